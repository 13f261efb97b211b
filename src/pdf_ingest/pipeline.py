"""End-to-end ingestion: S3 → pages → chunks → embeddings → vector index.

Usage::

    import asyncio
    from pdf_ingest.pipeline import ingest, ingest_document

    preview = asyncio.run(ingest("uploads/1700000000report.pdf"))
    result = asyncio.run(ingest_document("uploads/1700000000report.pdf"))
    print(result.namespace, len(result.all_chunks))

Stages run strictly in order.  Chunking (per page) and embedding (per
chunk) fan out; the first failing unit cancels its siblings and its error
reaches the caller unchanged.  Nothing is upserted unless every chunk was
embedded.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Iterable
from typing import TypeVar

from pdf_ingest.config import settings
from pdf_ingest.errors import FetchError
from pdf_ingest.index import get_vector_index, sanitize_namespace
from pdf_ingest.ingestion.chunker import PageChunker
from pdf_ingest.ingestion.embedder import ChunkEmbedder, get_embeddings
from pdf_ingest.ingestion.fetcher import S3Fetcher, get_fetcher
from pdf_ingest.ingestion.loader import PdfExtractor
from pdf_ingest.ingestion.uploader import VectorUploader
from pdf_ingest.models import Chunk, IngestionResult

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def fan_out(awaitables: Iterable[Awaitable[T]]) -> list[T]:
    """Run *awaitables* concurrently and return their results in input order.

    On the first failure every task still running is cancelled and the
    failure is re-raised as is.
    """
    tasks = [asyncio.ensure_future(aw) for aw in awaitables]
    if not tasks:
        return []
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        raise


class IngestionPipeline:
    """Wire the four stages together.

    Parameters
    ----------
    fetcher:
        Downloads the blob for a storage key.
    extractor:
        Turns the downloaded file into pages.
    chunker:
        Splits one page into chunks.
    embedder:
        Turns one chunk into an embedding record.
    uploader:
        Upserts the records into the document's partition.
    keep_downloads:
        Leave the downloaded file on disk after extraction.
    """

    def __init__(
        self,
        fetcher: S3Fetcher,
        extractor: PdfExtractor,
        chunker: PageChunker,
        embedder: ChunkEmbedder,
        uploader: VectorUploader,
        *,
        keep_downloads: bool = False,
    ) -> None:
        self._fetcher = fetcher
        self._extractor = extractor
        self._chunker = chunker
        self._embedder = embedder
        self._uploader = uploader
        self._keep_downloads = keep_downloads

    @classmethod
    def from_settings(cls) -> IngestionPipeline:
        """Build a pipeline on top of the process-wide clients."""
        return cls(
            fetcher=get_fetcher(),
            extractor=PdfExtractor(),
            chunker=PageChunker(
                chunk_size=settings.chunk_size,
                chunk_overlap=settings.chunk_overlap,
                preview_max_bytes=settings.preview_max_bytes,
            ),
            embedder=ChunkEmbedder(get_embeddings(), max_concurrency=settings.embed_concurrency),
            uploader=VectorUploader(get_vector_index()),
            keep_downloads=settings.keep_downloads,
        )

    async def run(self, file_key: str) -> IngestionResult:
        """Ingest the document stored under *file_key*.

        Raises
        ------
        FetchError, ParseError, EmbeddingError, UploadError
            From whichever stage failed first.  No stage retries.
        """
        try:
            namespace = sanitize_namespace(file_key)
        except ValueError as exc:
            raise FetchError(f"Storage key {file_key!r} cannot name a partition: {exc}", file_key) from exc

        logger.info("Downloading %s into file system", file_key)
        local_path = await self._fetcher.afetch(file_key)
        try:
            pages = await self._extractor.aload(local_path)
        finally:
            if not self._keep_downloads:
                self._fetcher.discard(local_path)

        page_chunks = await fan_out(
            asyncio.to_thread(self._chunker.split_page, page) for page in pages
        )
        chunks = [chunk for chunk_list in page_chunks for chunk in chunk_list]
        logger.info("Split %d pages into %d chunks", len(pages), len(chunks))

        records = await fan_out(self._embedder.embed_chunk(chunk) for chunk in chunks)

        upserted = await self._uploader.aupload(namespace, records)
        logger.info("Ingested %s: %d vectors in namespace %r", file_key, upserted, namespace)

        return IngestionResult(
            file_key=file_key,
            namespace=namespace,
            pages=page_chunks,
            records_upserted=upserted,
        )


async def ingest_document(file_key: str, pipeline: IngestionPipeline | None = None) -> IngestionResult:
    """Ingest *file_key* and return the full :class:`IngestionResult`."""
    pipeline = pipeline or IngestionPipeline.from_settings()
    return await pipeline.run(file_key)


async def ingest(file_key: str, pipeline: IngestionPipeline | None = None) -> list[Chunk]:
    """Ingest *file_key* and return the chunks of its first page.

    The first page is a preview for the caller; use :func:`ingest_document`
    when every chunk is needed.  A document without pages returns ``[]``.
    """
    result = await ingest_document(file_key, pipeline)
    return result.first_page_chunks
