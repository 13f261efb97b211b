"""Page chunking and byte-bounded previews."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from langchain_text_splitters import RecursiveCharacterTextSplitter

from pdf_ingest.models import Chunk, Page

logger = logging.getLogger(__name__)

DEFAULT_SEPARATORS: tuple[str, ...] = ("\n\n", "\n", ". ", " ", "")


def truncate_by_bytes(text: str, max_bytes: int) -> str:
    """Return the longest prefix of *text* whose UTF-8 encoding fits in *max_bytes*.

    A multi-byte code point cut by the limit is dropped entirely, so the
    result is always valid UTF-8 and never longer than *max_bytes* bytes.
    """
    if max_bytes < 0:
        raise ValueError(f"max_bytes must be >= 0, got {max_bytes}")
    return text.encode("utf-8")[:max_bytes].decode("utf-8", errors="ignore")


class PageChunker:
    """Split one :class:`Page` into ordered :class:`Chunk` records.

    Parameters
    ----------
    chunk_size:
        Maximum number of characters per chunk.
    chunk_overlap:
        Number of overlapping characters between consecutive chunks.
    separators:
        Split boundaries in priority order; ``""`` is the hard-cut fallback.
    preview_max_bytes:
        Byte cap of the page preview attached to every chunk.
    """

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        separators: Sequence[str] = DEFAULT_SEPARATORS,
        preview_max_bytes: int = 36000,
    ) -> None:
        if chunk_overlap >= chunk_size:
            raise ValueError(
                f"chunk_overlap ({chunk_overlap}) must be < chunk_size ({chunk_size})"
            )
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.preview_max_bytes = preview_max_bytes
        self._splitter = RecursiveCharacterTextSplitter(
            chunk_size=chunk_size,
            chunk_overlap=chunk_overlap,
            length_function=len,
            separators=list(separators),
        )

    def split_page(self, page: Page) -> list[Chunk]:
        """Return the chunks of *page* in reading order.

        Newlines are removed before splitting.  Empty or whitespace-only
        pages produce no chunks.
        """
        text = page.text.replace("\n", "")
        preview = truncate_by_bytes(text, self.preview_max_bytes)

        chunks = [
            Chunk(text=segment, page_number=page.page_number, truncated_preview=preview)
            for segment in self._splitter.split_text(text)
        ]
        logger.debug("Page %d split into %d chunks", page.page_number, len(chunks))
        return chunks
