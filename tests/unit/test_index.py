"""Unit tests for the vector-index layer — naming, backends and the factory."""

from __future__ import annotations

import re
from unittest.mock import MagicMock, patch

import pytest

import pdf_ingest.index as index_module
from pdf_ingest.index import sanitize_namespace
from pdf_ingest.index.chroma_index import ChromaVectorIndex, collection_name
from pdf_ingest.index.pinecone_index import PineconeVectorIndex
from pdf_ingest.models import EmbeddingRecord

_CHROMA_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]{1,61}[A-Za-z0-9]$")


def _record(rec_id: str, text: str = "preview", page: int = 1) -> EmbeddingRecord:
    return EmbeddingRecord(id=rec_id, values=[0.1, 0.2], metadata={"text": text, "pageNumber": page})


# ── sanitize_namespace ─────────────────────────────────────────────────


class TestSanitizeNamespace:
    def test_plain_key_is_kept(self) -> None:
        assert sanitize_namespace("1700000000report.pdf") == "1700000000report.pdf"

    def test_path_separators_and_spaces_replaced(self) -> None:
        assert sanitize_namespace("uploads/My Report.pdf") == "uploads-My-Report.pdf"

    def test_accents_reduced_to_ascii(self) -> None:
        assert sanitize_namespace("résumé.pdf") == "resume.pdf"

    def test_non_ascii_dropped(self) -> None:
        assert sanitize_namespace("日本report.pdf") == "report.pdf"

    @pytest.mark.parametrize(
        "key",
        ["uploads/My Report.pdf", "résumé.pdf", "日本report.pdf", "a@b#c$d", "--x--", "ok"],
    )
    def test_is_idempotent(self, key: str) -> None:
        once = sanitize_namespace(key)
        assert sanitize_namespace(once) == once
        assert once.isascii()

    def test_unusable_key_raises(self) -> None:
        with pytest.raises(ValueError, match="namespace"):
            sanitize_namespace("日本語")


# ── Chroma ─────────────────────────────────────────────────────────────


class TestCollectionName:
    def test_simple_name_is_readable(self) -> None:
        assert collection_name("chatpdf", "report.pdf") == "chatpdf-report.pdf"

    @pytest.mark.parametrize("namespace", ["x" * 200, "report..pdf", "draft-", "a" * 57 + "."])
    def test_result_is_chroma_legal(self, namespace: str) -> None:
        name = collection_name("chatpdf", namespace)
        assert _CHROMA_NAME.match(name), name
        assert ".." not in name

    def test_long_names_stay_distinct(self) -> None:
        a = collection_name("chatpdf", "x" * 100 + "a")
        b = collection_name("chatpdf", "x" * 100 + "b")
        assert a != b

    def test_is_deterministic(self) -> None:
        assert collection_name("chatpdf", "y" * 90) == collection_name("chatpdf", "y" * 90)


class TestChromaVectorIndex:
    @pytest.fixture()
    def client(self) -> MagicMock:
        return MagicMock()

    def test_namespace_maps_to_collection(self, client: MagicMock) -> None:
        index = ChromaVectorIndex("chatpdf", client=client)
        partition = index.namespace("report.pdf")

        assert partition.name == "report.pdf"
        client.get_or_create_collection.assert_called_once_with(
            name="chatpdf-report.pdf", metadata={"hnsw:space": "cosine"}
        )

    def test_upsert_single_call(self, client: MagicMock) -> None:
        collection = client.get_or_create_collection.return_value
        index = ChromaVectorIndex("chatpdf", client=client)

        index.namespace("doc").upsert([_record("a", "p1", 1), _record("b", "p2", 2)])

        collection.upsert.assert_called_once_with(
            ids=["a", "b"],
            embeddings=[[0.1, 0.2], [0.1, 0.2]],
            documents=["p1", "p2"],
            metadatas=[{"text": "p1", "pageNumber": 1}, {"text": "p2", "pageNumber": 2}],
        )

    def test_upsert_collapses_repeated_ids(self, client: MagicMock) -> None:
        collection = client.get_or_create_collection.return_value
        index = ChromaVectorIndex("chatpdf", client=client)

        index.namespace("doc").upsert([_record("a", "first"), _record("a", "second")])

        kwargs = collection.upsert.call_args.kwargs
        assert kwargs["ids"] == ["a"]
        assert kwargs["documents"] == ["second"]

    def test_health_check(self, client: MagicMock) -> None:
        index = ChromaVectorIndex("chatpdf", client=client)
        assert index.health_check() is True

        client.heartbeat.side_effect = ConnectionError("down")
        assert index.health_check() is False


# ── Pinecone ───────────────────────────────────────────────────────────


class TestPineconeVectorIndex:
    def test_upsert_into_namespace(self) -> None:
        client = MagicMock()
        pinecone_index = client.Index.return_value

        index = PineconeVectorIndex("chatpdf", client=client)
        index.namespace("report.pdf").upsert([_record("a", "p1", 1)])

        client.Index.assert_called_once_with("chatpdf")
        pinecone_index.upsert.assert_called_once_with(
            vectors=[{"id": "a", "values": [0.1, 0.2], "metadata": {"text": "p1", "pageNumber": 1}}],
            namespace="report.pdf",
        )

    def test_health_check_failure(self) -> None:
        client = MagicMock()
        client.Index.return_value.describe_index_stats.side_effect = RuntimeError("401")
        assert PineconeVectorIndex("chatpdf", client=client).health_check() is False


# ── Factory ────────────────────────────────────────────────────────────


class TestGetVectorIndex:
    def setup_method(self) -> None:
        index_module.get_vector_index.cache_clear()

    def teardown_method(self) -> None:
        index_module.get_vector_index.cache_clear()

    def test_unsupported_backend_raises(self) -> None:
        with patch.object(index_module.settings, "vector_backend", "faiss"):
            with pytest.raises(ValueError, match="Unsupported vector_backend"):
                index_module.get_vector_index()

    def test_chroma_backend_is_a_singleton(self) -> None:
        with (
            patch.object(index_module.settings, "vector_backend", "chroma"),
            patch("pdf_ingest.index.chroma_index.chromadb.HttpClient") as mock_client,
        ):
            first = index_module.get_vector_index()
            second = index_module.get_vector_index()

        assert first is second
        assert isinstance(first, ChromaVectorIndex)
        mock_client.assert_called_once()

    def test_lazy_attribute_access(self) -> None:
        assert index_module.ChromaVectorIndex is ChromaVectorIndex
        with pytest.raises(AttributeError):
            index_module.NoSuchBackend  # noqa: B018
