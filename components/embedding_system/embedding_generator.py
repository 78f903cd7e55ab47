"""Async embedding generation used by ingestion and search."""

import logging
from typing import List

from llama_index.core.embeddings import BaseEmbedding

logger = logging.getLogger(__name__)


class EmbeddingError(Exception):
    """Raised when the embedding model returns an unusable response."""


class EmbeddingGenerator:
    """Generates one embedding vector per input string, preserving order."""

    def __init__(self, model: BaseEmbedding):
        self.model = model

    async def generate(self, texts: List[str]) -> List[List[float]]:
        """
        Embed a batch of strings.

        Args:
            texts: The strings to embed.

        Returns:
            One vector per input string, in input order.

        Raises:
            EmbeddingError: If the model does not return one vector per input.
        """
        if not texts:
            return []

        vectors = await self.model.aget_text_embedding_batch(texts)
        if len(vectors) != len(texts):
            raise EmbeddingError(
                f"Embedding model returned {len(vectors)} vectors for "
                f"{len(texts)} inputs"
            )

        logger.debug(f"Generated {len(vectors)} embeddings")
        return [list(vector) for vector in vectors]
