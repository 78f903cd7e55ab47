"""Embedding system component.

Creates the configured embedding model and exposes it to the rest of the
service through the async, order-preserving EmbeddingGenerator interface.
"""

from .embedding_factory import (
    OpenAIEndpointEmbedding,
    SentenceTransformersEmbedding,
    create_embedding_model,
)
from .embedding_generator import EmbeddingError, EmbeddingGenerator

__all__ = [
    "EmbeddingError",
    "EmbeddingGenerator",
    "OpenAIEndpointEmbedding",
    "SentenceTransformersEmbedding",
    "create_embedding_model",
]
