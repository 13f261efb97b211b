"""Abstract base classes for vector-index backends.

Adding a new backend only requires subclassing :class:`VectorIndexBase` and
:class:`PartitionBase`.  The uploader and pipeline are backend-agnostic.
"""

from __future__ import annotations

import re
import unicodedata
from abc import ABC, abstractmethod
from collections.abc import Sequence

from pdf_ingest.models import EmbeddingRecord

_DISALLOWED = re.compile(r"[^A-Za-z0-9._-]")


def sanitize_namespace(key: str) -> str:
    """Map a document key onto the character set partitions accept.

    Accented letters are reduced to their ASCII base, any other non-ASCII
    character is dropped, and anything outside ``[A-Za-z0-9._-]`` becomes
    ``-``.  Applying it twice gives the same result as applying it once.
    """
    ascii_key = unicodedata.normalize("NFKD", key).encode("ascii", "ignore").decode("ascii")
    namespace = _DISALLOWED.sub("-", ascii_key)
    if not namespace:
        raise ValueError(f"Key {key!r} has no characters usable as a namespace")
    return namespace


class PartitionBase(ABC):
    """One isolated namespace inside a vector index."""

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    def upsert(self, records: Sequence[EmbeddingRecord]) -> None:
        """Insert or overwrite *records* by id, in a single backend call."""
        ...


class VectorIndexBase(ABC):
    """Backend-agnostic vector-index interface.

    Parameters
    ----------
    index_name:
        Logical name of the shared index.
    """

    def __init__(self, index_name: str) -> None:
        self.index_name = index_name

    @abstractmethod
    def namespace(self, name: str) -> PartitionBase:
        """Return (creating if needed) the partition called *name*."""
        ...

    @abstractmethod
    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        ...
