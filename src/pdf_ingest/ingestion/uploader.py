"""Upload stage — one upsert per ingestion run."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from pdf_ingest.errors import UploadError
from pdf_ingest.index.base import VectorIndexBase
from pdf_ingest.models import EmbeddingRecord

logger = logging.getLogger(__name__)


class VectorUploader:
    """Write a batch of records into one partition of *index*."""

    def __init__(self, index: VectorIndexBase) -> None:
        self._index = index

    def upload(self, namespace: str, records: Sequence[EmbeddingRecord]) -> int:
        """Upsert *records* into *namespace* and return how many were sent.

        Raises
        ------
        UploadError
            When the index cannot be reached or rejects the write.
        """
        if not records:
            logger.warning("No records to upsert into namespace %r", namespace)
            return 0

        dimensions = {len(rec.values) for rec in records}
        if len(dimensions) > 1:
            raise UploadError(
                f"Vectors for namespace {namespace!r} have mixed dimensions {sorted(dimensions)}",
                namespace,
            )

        logger.info("Inserting %d vectors into %s/%s", len(records), self._index.index_name, namespace)
        try:
            partition = self._index.namespace(namespace)
            partition.upsert(records)
        except Exception as exc:
            raise UploadError(
                f"Upsert into namespace {namespace!r} failed: {exc}", namespace
            ) from exc
        return len(records)

    async def aupload(self, namespace: str, records: Sequence[EmbeddingRecord]) -> int:
        """Async wrapper around :meth:`upload`."""
        return await asyncio.to_thread(self.upload, namespace, records)
