"""Pinecone implementation of the vector-index abstraction."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from pinecone import Pinecone

from pdf_ingest.config import settings
from pdf_ingest.index.base import PartitionBase, VectorIndexBase
from pdf_ingest.models import EmbeddingRecord

logger = logging.getLogger(__name__)


class PineconePartition(PartitionBase):
    """A Pinecone namespace inside one index."""

    def __init__(self, name: str, index: Any) -> None:
        super().__init__(name)
        self._index = index

    def upsert(self, records: Sequence[EmbeddingRecord]) -> None:
        self._index.upsert(vectors=[rec.to_dict() for rec in records], namespace=self.name)
        logger.info("Upserted %d vectors into namespace %r", len(records), self.name)


class PineconeVectorIndex(VectorIndexBase):
    """Pinecone-backed vector index.

    Parameters
    ----------
    index_name:
        Name of an existing Pinecone index.
    api_key:
        Pinecone API key.
    client:
        Pre-built ``Pinecone`` client (tests inject a mock here).
    """

    def __init__(
        self,
        index_name: str = settings.index_name,
        *,
        api_key: str = settings.pinecone_api_key,
        client: Any = None,
    ) -> None:
        super().__init__(index_name)
        self._client = client if client is not None else Pinecone(api_key=api_key)
        self._index = self._client.Index(index_name)

    def namespace(self, name: str) -> PineconePartition:
        return PineconePartition(name, self._index)

    def health_check(self) -> bool:
        try:
            self._index.describe_index_stats()
            return True
        except Exception:
            logger.warning("Pinecone health-check failed", exc_info=True)
            return False
