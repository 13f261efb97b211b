"""Domain models flowing between the ingestion stages."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Page(BaseModel):
    """One physical page of an extracted document.

    Attributes
    ----------
    text:
        Raw page text as produced by the PDF loader.
    page_number:
        1-based page number.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    page_number: int = Field(ge=1)


class Chunk(BaseModel):
    """A bounded-length segment of page text, the unit of embedding.

    Attributes
    ----------
    text:
        The segment produced by the splitter.  This is what gets embedded
        and hashed.
    page_number:
        Page the segment was cut from.
    truncated_preview:
        Byte-capped preview of the *whole page* text.  Stored as record
        metadata so that retrieval returns page context, not just the hit.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    page_number: int
    truncated_preview: str


class EmbeddingRecord(BaseModel):
    """Vector plus metadata, ready to be upserted into a partition."""

    model_config = ConfigDict(frozen=True)

    id: str
    values: list[float] = Field(min_length=1)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def text(self) -> str:
        return self.metadata.get("text", "")

    def to_dict(self) -> dict[str, Any]:
        """Return the ``{"id", "values", "metadata"}`` wire shape."""
        return {"id": self.id, "values": list(self.values), "metadata": dict(self.metadata)}


class IngestionResult(BaseModel):
    """Outcome of one ingestion run.

    ``pages`` keeps the chunk lists in page order so callers can rebuild
    the document; :attr:`first_page_chunks` is the short preview returned
    by :func:`pdf_ingest.pipeline.ingest`.
    """

    file_key: str
    namespace: str
    pages: list[list[Chunk]] = Field(default_factory=list)
    records_upserted: int = 0

    @property
    def first_page_chunks(self) -> list[Chunk]:
        return list(self.pages[0]) if self.pages else []

    @property
    def all_chunks(self) -> list[Chunk]:
        return [chunk for page in self.pages for chunk in page]
