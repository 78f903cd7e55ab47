"""Tests for the ParkService ingestion pipeline."""

import asyncio
from unittest.mock import AsyncMock, Mock, patch

import chromadb
import pytest
from chromadb.config import Settings

# Use an absolute import to ensure patch targets are correct.
from components.document_processing import DocumentLoaderError, RawDocument
from components.embedding_system import EmbeddingGenerator
from components.park_service import (
    IngestValidationError,
    ParkService,
)
from components.vector_store import ParkVectorStore, derive_point_id
from park_knowledge.config import Config, PathsConfig

ACADIA = (
    "Acadia National Park\n"
    "State(s): ME\n"
    "Description:\n"
    "Rocky coastline and granite peaks.\n"
    "Directions:\n"
    "Take Route 3."
)
YELLOWSTONE = "Yellowstone National Park\nState(s): WY, MT, ID\nGeysers everywhere."


@pytest.fixture
def test_config(tmp_path):
    """Create a test configuration."""
    return Config(
        paths=PathsConfig(
            data_dir=str(tmp_path / "parks"),
            database_dir=str(tmp_path / "db"),
        )
    )


@pytest.fixture
def mock_vector_store():
    store = Mock(spec=ParkVectorStore)
    store.ensure_collection = AsyncMock()
    store.upsert = AsyncMock()
    return store


@pytest.fixture
def mock_generator():
    generator = Mock(spec=EmbeddingGenerator)

    async def generate(texts):
        return [[float(i), 1.0] for i, _ in enumerate(texts)]

    generator.generate = AsyncMock(side_effect=generate)
    return generator


@pytest.fixture
def park_service(test_config, mock_vector_store, mock_generator):
    return ParkService(test_config, mock_vector_store, mock_generator)


class TestParkService:
    """Test the ParkService class."""

    @pytest.mark.asyncio
    async def test_ingest_writes_one_point_per_park(
        self, park_service, mock_vector_store, mock_generator
    ):
        result = await park_service.ingest(
            [
                RawDocument(file_name="acad.txt", content=ACADIA),
                RawDocument(file_name="yell.txt", content=YELLOWSTONE),
            ]
        )

        assert result.count == 2
        assert result.message == "Successfully ingested 2 parks."

        mock_generator.generate.assert_awaited_once_with(
            ["Rocky coastline and granite peaks.", YELLOWSTONE]
        )
        points = mock_vector_store.upsert.await_args.args[0]
        assert [p.code for p in points] == ["acad", "yell"]
        assert points[0].id == derive_point_id("acad")
        assert points[0].name == "Acadia National Park"
        assert points[0].region == "ME"
        assert points[0].content == ACADIA
        assert points[1].region == "WY, MT, ID"
        assert points[1].vector == [1.0, 1.0]

    @pytest.mark.asyncio
    async def test_steps_run_in_order(
        self, park_service, mock_vector_store, mock_generator
    ):
        calls = []
        mock_vector_store.ensure_collection.side_effect = lambda: calls.append("ensure")
        mock_generator.generate.side_effect = lambda texts: (
            calls.append("embed") or [[0.0, 1.0]]
        )
        mock_vector_store.upsert.side_effect = lambda points: calls.append("upsert")

        await park_service.ingest([RawDocument(file_name="acad.txt", content=ACADIA)])

        assert calls == ["ensure", "embed", "upsert"]

    @pytest.mark.asyncio
    async def test_malformed_documents_are_skipped(
        self, park_service, mock_vector_store
    ):
        result = await park_service.ingest(
            [
                RawDocument(file_name="bad.txt", content="only one line"),
                RawDocument(file_name="acad.txt", content=ACADIA),
            ]
        )

        assert result.count == 1
        points = mock_vector_store.upsert.await_args.args[0]
        assert [p.code for p in points] == ["acad"]

    @pytest.mark.asyncio
    async def test_all_invalid_is_a_validation_error(
        self, park_service, mock_vector_store, mock_generator
    ):
        with pytest.raises(IngestValidationError, match="No valid documents"):
            await park_service.ingest(
                [
                    RawDocument(file_name="a.txt", content="one line"),
                    RawDocument(file_name="b.txt", content=""),
                ]
            )

        mock_vector_store.ensure_collection.assert_not_awaited()
        mock_generator.generate.assert_not_awaited()
        mock_vector_store.upsert.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_request_falls_back_to_local_files(
        self, park_service, test_config, mock_vector_store
    ):
        data_dir = test_config.get_data_path()
        data_dir.mkdir(parents=True)
        (data_dir / "acad.txt").write_text(ACADIA)

        result = await park_service.ingest([])

        assert result.count == 1
        points = mock_vector_store.upsert.await_args.args[0]
        assert points[0].code == "acad"

    @pytest.mark.asyncio
    async def test_nothing_anywhere_is_a_validation_error(self, park_service):
        with pytest.raises(IngestValidationError, match="No documents found"):
            await park_service.ingest(None)

    @pytest.mark.asyncio
    async def test_loader_failure_propagates(self, park_service):
        with patch(
            "components.park_service.main.load_park_documents",
            side_effect=DocumentLoaderError("unreadable"),
        ):
            with pytest.raises(DocumentLoaderError):
                await park_service.ingest()

    @pytest.mark.asyncio
    async def test_upstream_failure_propagates(self, park_service, mock_generator):
        mock_generator.generate.side_effect = RuntimeError("embedding service down")

        with pytest.raises(RuntimeError, match="embedding service down"):
            await park_service.ingest(
                [RawDocument(file_name="acad.txt", content=ACADIA)]
            )

    @pytest.mark.asyncio
    async def test_cancellation_propagates_before_upsert(
        self, park_service, mock_vector_store, mock_generator
    ):
        mock_generator.generate.side_effect = asyncio.CancelledError()

        with pytest.raises(asyncio.CancelledError):
            await park_service.ingest(
                [RawDocument(file_name="acad.txt", content=ACADIA)]
            )

        mock_vector_store.upsert.assert_not_awaited()


class TestDuplicateCodes:
    """Documents sharing a park code within one request."""

    @pytest.mark.asyncio
    async def test_later_document_wins_in_batch(
        self, park_service, mock_vector_store, mock_generator
    ):
        updated = ACADIA.replace("Take Route 3.", "Take Route 102.")

        result = await park_service.ingest(
            [
                RawDocument(file_name="acad.txt", content=ACADIA),
                RawDocument(file_name="yell.txt", content=YELLOWSTONE),
                RawDocument(file_name="acad.md", content=updated),
            ]
        )

        assert result.count == 2
        assert result.message == "Successfully ingested 2 parks."
        assert len(mock_generator.generate.await_args.args[0]) == 2
        points = mock_vector_store.upsert.await_args.args[0]
        assert [p.code for p in points] == ["acad", "yell"]
        assert points[0].content == updated

    @pytest.mark.asyncio
    async def test_same_code_twice_stores_one_point(
        self, test_config, mock_generator, tmp_path
    ):
        client = chromadb.PersistentClient(
            path=str(tmp_path / "chroma"),
            settings=Settings(anonymized_telemetry=False, allow_reset=True),
        )
        store = ParkVectorStore(client, collection_name="dup_parks", vector_size=2)
        service = ParkService(test_config, store, mock_generator)
        updated = ACADIA.replace("Take Route 3.", "Take Route 102.")

        result = await service.ingest(
            [
                RawDocument(file_name="acad.txt", content=ACADIA),
                RawDocument(file_name="acad.md", content=updated),
            ]
        )

        assert result.count == 1
        assert await store.count() == 1
        hits = await store.search([0.0, 1.0], limit=5)
        assert [hit.code for hit in hits] == ["acad"]
        assert hits[0].content == updated
