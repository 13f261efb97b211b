"""Chunk embedding and record assembly."""

from __future__ import annotations

import asyncio
import hashlib
import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from pdf_ingest.config import settings
from pdf_ingest.errors import EmbeddingError
from pdf_ingest.models import Chunk, EmbeddingRecord

if TYPE_CHECKING:
    from langchain_core.embeddings import Embeddings

logger = logging.getLogger(__name__)


def content_hash(text: str) -> str:
    """Return the record identifier for *text* (MD5 hex digest)."""
    return hashlib.md5(text.encode("utf-8")).hexdigest()


@lru_cache(maxsize=1)
def get_embeddings() -> Embeddings:
    """Return the configured embedding model.

    ``huggingface`` runs a local sentence-transformer; ``openai`` calls the
    OpenAI embeddings API with ``settings.openai_api_key``.
    """
    provider = settings.embedding_provider.lower()
    if provider == "huggingface":
        from langchain_huggingface import HuggingFaceEmbeddings

        return HuggingFaceEmbeddings(model_name=settings.embedding_model)
    if provider == "openai":
        from langchain_openai import OpenAIEmbeddings

        return OpenAIEmbeddings(
            model=settings.openai_embedding_model,
            api_key=settings.openai_api_key,
        )
    raise ValueError(
        f"Unsupported embedding_provider={settings.embedding_provider!r}. "
        "Choose from: huggingface, openai."
    )


class ChunkEmbedder:
    """Turn a :class:`Chunk` into an :class:`EmbeddingRecord`.

    Parameters
    ----------
    embeddings:
        Any LangChain ``Embeddings`` implementation.
    max_concurrency:
        Upper bound on embedding calls in flight at once.
    """

    def __init__(self, embeddings: Embeddings, *, max_concurrency: int = 8) -> None:
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {max_concurrency}")
        self._embeddings = embeddings
        self._max_concurrency = max_concurrency
        self._semaphore: asyncio.Semaphore | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    async def embed_chunk(self, chunk: Chunk) -> EmbeddingRecord:
        """Embed the chunk text and attach the page preview as metadata.

        Raises
        ------
        EmbeddingError
            When the embedding model call fails.
        """
        # One semaphore per event loop; a process-wide embedder can outlive a loop.
        loop = asyncio.get_running_loop()
        if self._semaphore is None or self._loop is not loop:
            self._semaphore = asyncio.Semaphore(self._max_concurrency)
            self._loop = loop

        async with self._semaphore:
            try:
                values = await self._embeddings.aembed_query(chunk.text)
            except Exception as exc:
                logger.error("Error embedding chunk from page %d: %s", chunk.page_number, exc)
                raise EmbeddingError(
                    f"Embedding failed for chunk on page {chunk.page_number}: {exc}"
                ) from exc

        if not values:
            raise EmbeddingError(f"Embedding provider returned an empty vector for page {chunk.page_number}")

        return EmbeddingRecord(
            id=content_hash(chunk.text),
            values=values,
            metadata={"text": chunk.truncated_preview, "pageNumber": chunk.page_number},
        )
