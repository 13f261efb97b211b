"""Chroma implementation of the vector-index abstraction.

Chroma has no namespaces inside a collection, so each partition is its own
collection named after the index and the namespace.
"""

from __future__ import annotations

import hashlib
import logging
import re
from collections.abc import Sequence
from typing import Any

import chromadb

from pdf_ingest.config import settings
from pdf_ingest.index.base import PartitionBase, VectorIndexBase
from pdf_ingest.models import EmbeddingRecord

logger = logging.getLogger(__name__)

_MAX_NAME_LEN = 63
_EDGE_CHARS = "._-"


def collection_name(index_name: str, namespace: str) -> str:
    """Return a Chroma-legal collection name for *namespace* in *index_name*.

    Chroma names are 3-63 characters, start and end alphanumeric and never
    contain ``..``.  Names that need rewriting get a hash suffix of the
    original so two namespaces never share a collection.
    """
    raw = f"{index_name}-{namespace}"
    name = re.sub(r"\.{2,}", ".", raw).strip(_EDGE_CHARS)
    if name == raw and len(name) <= _MAX_NAME_LEN:
        return name

    digest = hashlib.sha1(raw.encode("utf-8")).hexdigest()[:12]
    prefix = name[: _MAX_NAME_LEN - len(digest) - 1].rstrip(_EDGE_CHARS)
    return f"{prefix}-{digest}" if prefix else digest


class ChromaPartition(PartitionBase):
    """A Chroma collection acting as one namespace."""

    def __init__(self, name: str, collection: Any) -> None:
        super().__init__(name)
        self._collection = collection

    def upsert(self, records: Sequence[EmbeddingRecord]) -> None:
        # Chroma rejects repeated ids within one call; identical chunk texts
        # share an id, so keep the last record for each.
        unique = list({rec.id: rec for rec in records}.values())
        self._collection.upsert(
            ids=[rec.id for rec in unique],
            embeddings=[list(rec.values) for rec in unique],
            documents=[rec.text for rec in unique],
            metadatas=[dict(rec.metadata) for rec in unique],
        )
        logger.info("Upserted %d vectors into namespace %r", len(unique), self.name)


class ChromaVectorIndex(VectorIndexBase):
    """Chroma-backed vector index.

    Parameters
    ----------
    index_name:
        Prefix shared by every partition collection.
    host:
        Chroma server hostname.
    port:
        Chroma server port.
    client:
        Pre-built Chroma client (tests inject a mock here).
    distance_metric:
        ``cosine`` | ``l2`` | ``ip``, applied to newly created collections.
    """

    def __init__(
        self,
        index_name: str = settings.index_name,
        *,
        host: str = settings.chroma_host,
        port: int = settings.chroma_port,
        client: Any = None,
        distance_metric: str = "cosine",
    ) -> None:
        super().__init__(index_name)
        self._client = client if client is not None else chromadb.HttpClient(host=host, port=port)
        self._distance_metric = distance_metric

    def namespace(self, name: str) -> ChromaPartition:
        collection = self._client.get_or_create_collection(
            name=collection_name(self.index_name, name),
            metadata={"hnsw:space": self._distance_metric},
        )
        return ChromaPartition(name, collection)

    def health_check(self) -> bool:
        try:
            self._client.heartbeat()
            return True
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False
