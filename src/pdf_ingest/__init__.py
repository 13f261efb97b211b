"""
pdf_ingest — load PDFs from S3 into a namespaced vector index.

Public API
----------
- :func:`ingest` — ingest one document, return its first page's chunks.
- :func:`ingest_document` — ingest one document, return every chunk.
- :class:`IngestionPipeline` — the stages wired together (inject fakes here).
- :class:`Page`, :class:`Chunk`, :class:`EmbeddingRecord`,
  :class:`IngestionResult` — data models.
- :class:`FetchError`, :class:`ParseError`, :class:`EmbeddingError`,
  :class:`UploadError` — one error per stage.
"""

from pdf_ingest.errors import EmbeddingError, FetchError, IngestionError, ParseError, UploadError
from pdf_ingest.models import Chunk, EmbeddingRecord, IngestionResult, Page
from pdf_ingest.pipeline import IngestionPipeline, ingest, ingest_document

__all__ = [
    "Chunk",
    "EmbeddingError",
    "EmbeddingRecord",
    "FetchError",
    "IngestionError",
    "IngestionPipeline",
    "IngestionResult",
    "Page",
    "ParseError",
    "UploadError",
    "ingest",
    "ingest_document",
]
