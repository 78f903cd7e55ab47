import asyncio
import logging
from typing import Any, List, cast

from llama_index.core.embeddings import BaseEmbedding
from park_knowledge.config import EmbeddingModelConfig
from pydantic import PrivateAttr

logger = logging.getLogger(__name__)


class SentenceTransformersEmbedding(BaseEmbedding):
    """Wrapper for SentenceTransformers embedding models."""

    _sentence_model: Any = PrivateAttr(default=None)

    def __init__(self, model_name: str, **kwargs: Any):
        """Initialize SentenceTransformers model.

        Args:
            model_name: Name of the SentenceTransformers model
            **kwargs: Additional arguments for BaseEmbedding
        """
        try:
            from sentence_transformers import SentenceTransformer

            _model = SentenceTransformer(model_name)
            logger.info(f"Loaded SentenceTransformers model: {model_name}")
        except ImportError as e:
            raise ImportError(
                "sentence-transformers is required for this provider. "
                "Install with: pip install sentence-transformers"
            ) from e

        super().__init__(model_name=model_name, **kwargs)
        self._sentence_model = _model

    def _encode(self, texts: List[str]) -> List[List[float]]:
        return cast(List[List[float]], self._sentence_model.encode(texts).tolist())

    def _get_query_embedding(self, query: str) -> List[float]:
        """Get query embedding."""
        return self._encode([query])[0]

    def _get_text_embedding(self, text: str) -> List[float]:
        """Get text embedding."""
        return self._encode([text])[0]

    def _get_text_embeddings(self, texts: List[str]) -> List[List[float]]:
        """Encode a batch of texts in one model call."""
        return self._encode(texts)

    async def _aget_query_embedding(self, query: str) -> List[float]:
        """Get query embedding without blocking the event loop."""
        return await asyncio.to_thread(self._get_query_embedding, query)

    async def _aget_text_embeddings(self, texts: List[str]) -> List[List[float]]:
        """Encode a batch of texts without blocking the event loop."""
        return await asyncio.to_thread(self._encode, texts)


class OpenAIEndpointEmbedding(BaseEmbedding):
    """Wrapper for OpenAI-compatible API endpoints."""

    api_model_name: str = ""

    _client: Any = PrivateAttr(default=None)
    _async_client: Any = PrivateAttr(default=None)

    def __init__(self, model_name: str, endpoint_url: str, api_key: str, **kwargs: Any):
        """Initialize OpenAI-compatible embedding clients.

        Args:
            model_name: Name of the embedding model
            endpoint_url: API endpoint URL
            api_key: API key for authentication
            **kwargs: Additional arguments for BaseEmbedding
        """
        try:
            from openai import AsyncOpenAI, OpenAI

            client = OpenAI(api_key=api_key, base_url=endpoint_url)
            async_client = AsyncOpenAI(api_key=api_key, base_url=endpoint_url)
            logger.info(
                f"Initialized OpenAI-compatible client for {model_name} "
                f"at {endpoint_url}"
            )
        except ImportError as e:
            raise ImportError(
                "openai is required for this provider. Install with: pip install openai"
            ) from e

        super().__init__(model_name=model_name, api_model_name=model_name, **kwargs)
        self._client = client
        self._async_client = async_client

    def _get_query_embedding(self, query: str) -> List[float]:
        """Get query embedding."""
        return self._get_text_embeddings([query])[0]

    def _get_text_embedding(self, text: str) -> List[float]:
        """Get text embedding."""
        return self._get_text_embeddings([text])[0]

    def _get_text_embeddings(self, texts: List[str]) -> List[List[float]]:
        response = self._client.embeddings.create(
            model=self.api_model_name, input=texts
        )
        return [item.embedding for item in response.data]

    async def _aget_query_embedding(self, query: str) -> List[float]:
        """Get query embedding asynchronously."""
        return (await self._aget_text_embeddings([query]))[0]

    async def _aget_text_embeddings(self, texts: List[str]) -> List[List[float]]:
        response = await self._async_client.embeddings.create(
            model=self.api_model_name, input=texts
        )
        return [item.embedding for item in response.data]


def create_embedding_model(config: EmbeddingModelConfig) -> BaseEmbedding:
    """Factory function to create embedding models based on configuration."""
    provider = config.provider.lower()

    if provider == "sentence_transformers":
        return SentenceTransformersEmbedding(config.model_name)

    elif provider == "openai_endpoint":
        if not config.endpoint_url or not config.api_key:
            raise ValueError(
                "endpoint_url and api_key are required for openai_endpoint provider"
            )
        return OpenAIEndpointEmbedding(
            config.model_name, config.endpoint_url, config.api_key
        )

    else:
        raise ValueError(
            f"Unsupported embedding provider: {provider}. "
            f"Supported providers: sentence_transformers, openai_endpoint"
        )
