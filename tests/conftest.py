"""Shared pytest configuration and fixtures."""

from __future__ import annotations

import pytest
from fakes import FakeEmbeddings, FakeExtractor, FakeFetcher, FakeVectorIndex

from pdf_ingest.ingestion.chunker import PageChunker
from pdf_ingest.ingestion.embedder import ChunkEmbedder
from pdf_ingest.ingestion.uploader import VectorUploader
from pdf_ingest.models import Page
from pdf_ingest.pipeline import IngestionPipeline


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


@pytest.fixture()
def fake_embeddings() -> FakeEmbeddings:
    return FakeEmbeddings()


@pytest.fixture()
def fake_index() -> FakeVectorIndex:
    return FakeVectorIndex()


@pytest.fixture()
def make_pipeline():
    """Factory building a pipeline from fakes plus the real chunker, embedder and uploader."""

    def _make(
        pages: list[Page],
        *,
        index: FakeVectorIndex | None = None,
        embeddings: FakeEmbeddings | None = None,
        fetcher: FakeFetcher | None = None,
        extractor: FakeExtractor | None = None,
        keep_downloads: bool = False,
    ) -> tuple[IngestionPipeline, dict]:
        parts = {
            "fetcher": fetcher or FakeFetcher(),
            "extractor": extractor or FakeExtractor(pages),
            "embeddings": embeddings or FakeEmbeddings(),
            "index": index or FakeVectorIndex(),
        }
        pipeline = IngestionPipeline(
            fetcher=parts["fetcher"],
            extractor=parts["extractor"],
            chunker=PageChunker(chunk_size=1000, chunk_overlap=200),
            embedder=ChunkEmbedder(parts["embeddings"], max_concurrency=4),
            uploader=VectorUploader(parts["index"]),
            keep_downloads=keep_downloads,
        )
        return pipeline, parts

    return _make
