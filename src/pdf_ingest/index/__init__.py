"""
Index — vector-index backends and partition naming.

Public surface
--------------
- :class:`VectorIndexBase`, :class:`PartitionBase` — abstract backend.
- :class:`ChromaVectorIndex` — default Chroma backend.
- :class:`PineconeVectorIndex` — optional Pinecone backend.
- :func:`sanitize_namespace` — document key → partition name.
- :func:`get_vector_index` — process-wide index handle built from settings.
"""

from __future__ import annotations

from functools import lru_cache

from pdf_ingest.config import settings
from pdf_ingest.index.base import PartitionBase, VectorIndexBase, sanitize_namespace

__all__ = [
    "ChromaVectorIndex",
    "PartitionBase",
    "PineconeVectorIndex",
    "VectorIndexBase",
    "get_vector_index",
    "sanitize_namespace",
]


@lru_cache(maxsize=1)
def get_vector_index() -> VectorIndexBase:
    """Return the process-wide vector index for ``settings.vector_backend``."""
    backend = settings.vector_backend.lower()
    if backend == "chroma":
        from pdf_ingest.index.chroma_index import ChromaVectorIndex

        return ChromaVectorIndex(settings.index_name)
    if backend == "pinecone":
        from pdf_ingest.index.pinecone_index import PineconeVectorIndex

        return PineconeVectorIndex(settings.index_name)
    raise ValueError(
        f"Unsupported vector_backend={settings.vector_backend!r}. "
        "Choose from: chroma, pinecone."
    )


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import backends to avoid pulling in their clients at import time."""
    if name == "ChromaVectorIndex":
        from pdf_ingest.index.chroma_index import ChromaVectorIndex

        return ChromaVectorIndex
    if name == "PineconeVectorIndex":
        from pdf_ingest.index.pinecone_index import PineconeVectorIndex

        return PineconeVectorIndex
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
