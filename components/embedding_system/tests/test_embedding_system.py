"""Tests for the embedding factory and the async embedding generator."""

from unittest.mock import AsyncMock, MagicMock, Mock, patch

import numpy as np
import pytest
from components.embedding_system import (
    EmbeddingError,
    EmbeddingGenerator,
    OpenAIEndpointEmbedding,
    SentenceTransformersEmbedding,
    create_embedding_model,
)
from llama_index.core.embeddings import MockEmbedding
from park_knowledge.config import EmbeddingModelConfig


class TestEmbeddingFactory:
    """Test class for embedding factory functions."""

    @patch("sentence_transformers.SentenceTransformer")
    def test_create_sentence_transformers_embedding(self, mock_st):
        mock_st.return_value.encode.side_effect = lambda texts: np.full(
            (len(texts), 4), 0.25
        )
        config = EmbeddingModelConfig(
            provider="sentence_transformers", model_name="all-MiniLM-L6-v2"
        )

        model = create_embedding_model(config)

        assert isinstance(model, SentenceTransformersEmbedding)
        mock_st.assert_called_once_with("all-MiniLM-L6-v2")
        assert model.get_text_embedding("hello") == [0.25] * 4

    def test_create_openai_endpoint_embedding(self):
        config = EmbeddingModelConfig(
            provider="openai_endpoint",
            model_name="text-embedding-3-small",
            endpoint_url="https://api.openai.com/v1",
            api_key="test_key",
        )

        model = create_embedding_model(config)

        assert isinstance(model, OpenAIEndpointEmbedding)
        assert model.api_model_name == "text-embedding-3-small"

    def test_unsupported_provider_raises_error(self):
        config = EmbeddingModelConfig(provider="unsupported", model_name="some-model")

        with pytest.raises(ValueError, match="Unsupported embedding provider"):
            create_embedding_model(config)

    def test_missing_endpoint_url_or_api_key_raises_error(self):
        config = EmbeddingModelConfig(
            provider="openai_endpoint", model_name="text-embedding-3-small"
        )

        with pytest.raises(ValueError, match="endpoint_url and api_key are required"):
            create_embedding_model(config)


class TestEmbeddingGenerator:
    """Test the async generator interface."""

    @pytest.mark.asyncio
    async def test_generates_one_vector_per_input(self):
        generator = EmbeddingGenerator(MockEmbedding(embed_dim=8))

        vectors = await generator.generate(["one", "two", "three"])

        assert len(vectors) == 3
        assert all(len(vector) == 8 for vector in vectors)

    @pytest.mark.asyncio
    async def test_empty_input_skips_model(self):
        model = MagicMock()
        model.aget_text_embedding_batch = AsyncMock()
        generator = EmbeddingGenerator(model)

        assert await generator.generate([]) == []
        model.aget_text_embedding_batch.assert_not_called()

    @pytest.mark.asyncio
    async def test_preserves_input_order(self):
        model = Mock()
        model.aget_text_embedding_batch = AsyncMock(return_value=[[1.0], [2.0]])
        generator = EmbeddingGenerator(model)

        vectors = await generator.generate(["first", "second"])

        assert vectors == [[1.0], [2.0]]
        model.aget_text_embedding_batch.assert_awaited_once_with(["first", "second"])

    @pytest.mark.asyncio
    async def test_count_mismatch_raises(self):
        model = Mock()
        model.aget_text_embedding_batch = AsyncMock(return_value=[[1.0]])
        generator = EmbeddingGenerator(model)

        with pytest.raises(EmbeddingError, match="1 vectors for 2 inputs"):
            await generator.generate(["a", "b"])
