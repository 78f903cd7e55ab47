"""Vector store component: the park collection in ChromaDB."""

from .models import IndexPoint, ParkSearchResult
from .vector_store import (
    ParkVectorStore,
    VectorDimensionError,
    create_chroma_client,
    derive_point_id,
)

__all__ = [
    "IndexPoint",
    "ParkSearchResult",
    "ParkVectorStore",
    "VectorDimensionError",
    "create_chroma_client",
    "derive_point_id",
]
