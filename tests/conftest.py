"""Test fixtures and configuration."""

import hashlib
import logging
import re
import sys
from pathlib import Path
from typing import List

import chromadb
import pytest
from chromadb.config import Settings
from components.document_processing import RawDocument
from components.embedding_system import EmbeddingGenerator
from components.vector_store import ParkVectorStore
from llama_index.core.embeddings import BaseEmbedding
from park_knowledge.config import (
    Config,
    GenerationModelConfig,
    PathsConfig,
    VectorStoreConfig,
)

EMBED_DIM = 64


# --- This function enables logging visibility during tests ---
def pytest_configure(config):
    """Configure logging to be visible for all tests."""
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(levelname)s:%(name)s:%(message)s",
        stream=sys.stdout,
    )


# -----------------------------------------------------------


class KeywordEmbedding(BaseEmbedding):
    """Deterministic bag-of-words embedding so similarity follows shared words."""

    dimensions: int = EMBED_DIM

    def _vector(self, text: str) -> List[float]:
        vector = [0.0] * self.dimensions
        for word in re.findall(r"[a-z]+", text.lower()):
            bucket = int(hashlib.md5(word.encode("utf-8")).hexdigest(), 16)
            vector[bucket % self.dimensions] += 1.0
        # Keeps every vector non-zero for cosine distance.
        vector[0] += 0.01
        return vector

    def _get_query_embedding(self, query: str) -> List[float]:
        return self._vector(query)

    def _get_text_embedding(self, text: str) -> List[float]:
        return self._vector(text)

    async def _aget_query_embedding(self, query: str) -> List[float]:
        return self._vector(query)


ACADIA_TEXT = """Acadia National Park
State(s): ME
Description:
Granite peaks and rocky Atlantic coastline on Mount Desert Island.
Directions:
From Bangor take Route 1A to Ellsworth, then Route 3.
"""

YELLOWSTONE_TEXT = """Yellowstone National Park
State(s): WY, MT, ID
Description:
Geysers and hot springs of Yellowstone with roaming bison herds.
Camping Information:
Twelve campgrounds are available.
Weather:
Snow is possible in every month.
"""


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Create a test configuration."""
    return Config(
        paths=PathsConfig(
            data_dir=str(tmp_path / "parks"),
            database_dir=str(tmp_path / "test_db"),
        ),
        vector_store=VectorStoreConfig(
            collection_name="test_parks", vector_size=EMBED_DIM
        ),
        generation_model=GenerationModelConfig(
            model_name="openai/test-model", api_key="test-key"
        ),
    )


@pytest.fixture
def embedding_generator() -> EmbeddingGenerator:
    return EmbeddingGenerator(KeywordEmbedding())


@pytest.fixture
def vector_store(test_config: Config) -> ParkVectorStore:
    client = chromadb.PersistentClient(
        path=test_config.paths.database_dir,
        settings=Settings(anonymized_telemetry=False, allow_reset=True),
    )
    return ParkVectorStore(
        client,
        collection_name=test_config.vector_store.collection_name,
        vector_size=test_config.vector_store.vector_size,
    )


@pytest.fixture
def park_documents() -> List[RawDocument]:
    return [
        RawDocument(file_name="acad.txt", content=ACADIA_TEXT),
        RawDocument(file_name="yell.txt", content=YELLOWSTONE_TEXT),
    ]
