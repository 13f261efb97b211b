"""PDF extraction — thin wrapper around LangChain's ``PyPDFLoader``.

The loader's output is validated against an explicit page schema before it
leaves this module, so downstream stages never see a missing page number or
a non-string body.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from langchain_community.document_loaders import PyPDFLoader
from pydantic import BaseModel, Field, StrictInt, StrictStr, ValidationError

from pdf_ingest.errors import ParseError
from pdf_ingest.models import Page

if TYPE_CHECKING:
    from langchain_core.documents import Document

logger = logging.getLogger(__name__)


class _LoadedPage(BaseModel):
    """Shape every loader document must have.  ``page`` is 0-based."""

    page_content: StrictStr
    page: StrictInt = Field(ge=0)


def to_page(document: Document) -> Page:
    """Validate one loader document and convert it to a :class:`Page`."""
    metadata = getattr(document, "metadata", None)
    if not isinstance(metadata, dict):
        raise ParseError(f"Loader document has no metadata mapping: {document!r}")

    try:
        raw = _LoadedPage.model_validate(
            {"page_content": getattr(document, "page_content", None), "page": metadata.get("page")}
        )
    except ValidationError as exc:
        source = metadata.get("source")
        raise ParseError(f"Unexpected page shape from loader: {exc}", source) from exc

    return Page(text=raw.page_content, page_number=raw.page + 1)


class PdfExtractor:
    """Parse a local PDF into an ordered list of :class:`Page` records.

    Parameters
    ----------
    loader_cls:
        LangChain loader class taking the file path as its only positional
        argument.  Defaults to ``PyPDFLoader`` (one document per page).
    """

    def __init__(self, loader_cls: Any = PyPDFLoader) -> None:
        self._loader_cls = loader_cls

    def load(self, path: str | Path) -> list[Page]:
        """Load *path* and return its pages in document order.

        Raises
        ------
        ParseError
            When the file is missing or malformed, or the loader output
            does not match the page schema.
        """
        path = str(path)
        try:
            documents = self._loader_cls(path).load()
        except Exception as exc:
            raise ParseError(f"Could not parse {path}: {exc}", path) from exc

        pages = [to_page(doc) for doc in documents]
        logger.info("Extracted %d pages from %s", len(pages), path)
        return pages

    async def aload(self, path: str | Path) -> list[Page]:
        """Async wrapper around :meth:`load`."""
        return await asyncio.to_thread(self.load, path)
