"""Error taxonomy for the ingestion pipeline.

Every stage raises its own subclass of :class:`IngestionError` so callers
can tell which stage failed.  The original collaborator exception is always
chained as ``__cause__``.
"""

from __future__ import annotations


class IngestionError(Exception):
    """Base class for all ingestion failures."""

    stage = "ingest"


class FetchError(IngestionError):
    """Raised when a blob cannot be retrieved from storage."""

    stage = "fetch"

    def __init__(self, message: str, key: str | None = None) -> None:
        self.key = key
        super().__init__(message)


class ParseError(IngestionError):
    """Raised when a downloaded file cannot be turned into pages."""

    stage = "parse"

    def __init__(self, message: str, path: str | None = None) -> None:
        self.path = path
        super().__init__(message)


class EmbeddingError(IngestionError):
    """Raised when the embedding model call fails for a chunk."""

    stage = "embed"


class UploadError(IngestionError):
    """Raised when the vector index rejects the upsert."""

    stage = "upload"

    def __init__(self, message: str, namespace: str | None = None) -> None:
        self.namespace = namespace
        super().__init__(message)
