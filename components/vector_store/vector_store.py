"""Vector store management for park embeddings and similarity search."""

import asyncio
import hashlib
import logging
import uuid
from pathlib import Path
from typing import Any, List, Optional, Sequence, Set

import chromadb
from chromadb.api import ClientAPI
from chromadb.config import Settings
from park_knowledge.config import PathsConfig, VectorStoreConfig

from .models import IndexPoint, ParkSearchResult

logger = logging.getLogger(__name__)


class VectorDimensionError(ValueError):
    """Raised when a vector does not match the collection's dimensionality."""


def derive_point_id(code: str) -> str:
    """
    Derives the point identifier for a park code.

    The full 128-bit MD5 digest of the UTF-8 code becomes a UUID, so the same
    code always maps to the same point and re-ingesting overwrites it.
    """
    digest = hashlib.md5(code.encode("utf-8")).digest()
    return str(uuid.UUID(bytes=digest))


def create_chroma_client(
    store_config: VectorStoreConfig, paths_config: PathsConfig
) -> ClientAPI:
    """Create a ChromaDB client for a remote server or a local directory."""
    settings = Settings(anonymized_telemetry=False, allow_reset=True)
    if store_config.host:
        logger.info(
            f"Connecting to ChromaDB at {store_config.host}:{store_config.port}"
        )
        return chromadb.HttpClient(
            host=store_config.host, port=store_config.port, settings=settings
        )

    persist_directory = Path(paths_config.database_dir)
    persist_directory.mkdir(parents=True, exist_ok=True)
    logger.info(f"Using local ChromaDB at {persist_directory}")
    return chromadb.PersistentClient(path=str(persist_directory), settings=settings)


class ParkVectorStore:
    """Manages the park collection: lifecycle, upserts and cosine search."""

    def __init__(
        self,
        client: ClientAPI,
        collection_name: str = "parks",
        vector_size: int = 384,
    ):
        """Initialize the vector store.

        Args:
            client: The ChromaDB client
            collection_name: Name of the park collection
            vector_size: Dimensionality every stored and queried vector must have
        """
        self.client = client
        self.collection_name = collection_name
        self.vector_size = vector_size
        self._collection: Optional[Any] = None

    def _check_dimensions(self, vector: Sequence[float]) -> None:
        if len(vector) != self.vector_size:
            raise VectorDimensionError(
                f"Vector has {len(vector)} dimensions but collection "
                f"'{self.collection_name}' requires {self.vector_size}"
            )

    def _list_collection_names(self) -> Set[str]:
        # Older chromadb releases return names, newer ones Collection objects.
        return {
            getattr(collection, "name", collection)
            for collection in self.client.list_collections()
        }

    def _ensure_collection_sync(self) -> Any:
        if self.collection_name in self._list_collection_names():
            collection = self.client.get_collection(
                name=self.collection_name, embedding_function=None
            )
            stored_size = (collection.metadata or {}).get("vector_size")
            if stored_size is not None and int(stored_size) != self.vector_size:
                raise VectorDimensionError(
                    f"Collection '{self.collection_name}' was created with "
                    f"{stored_size} dimensions, configured size is {self.vector_size}"
                )
            logger.info(f"Collection '{self.collection_name}' already exists")
            return collection

        collection = self.client.create_collection(
            name=self.collection_name,
            metadata={
                "hnsw:space": "cosine",
                "vector_size": self.vector_size,
                "description": "National park descriptions",
            },
            embedding_function=None,
        )
        logger.info(
            f"Created collection '{self.collection_name}' "
            f"with {self.vector_size} dimensions"
        )
        return collection

    async def ensure_collection(self) -> None:
        """Create the park collection if it does not exist. Safe to call repeatedly."""
        self._collection = await asyncio.to_thread(self._ensure_collection_sync)

    async def _get_collection(self) -> Any:
        if self._collection is None:
            await self.ensure_collection()
        return self._collection

    async def list_collection_names(self) -> List[str]:
        """Return the names of all collections in the database."""
        return sorted(await asyncio.to_thread(self._list_collection_names))

    async def upsert(self, points: List[IndexPoint]) -> None:
        """Write a batch of points; points with an existing id are replaced.

        Args:
            points: The points to write
        """
        if not points:
            return

        for point in points:
            self._check_dimensions(point.vector)

        collection = await self._get_collection()
        await asyncio.to_thread(
            collection.upsert,
            ids=[point.id for point in points],
            embeddings=[point.vector for point in points],
            metadatas=[point.payload() for point in points],
        )
        logger.info(f"Upserted {len(points)} points into '{self.collection_name}'")

    async def search(
        self, query_vector: List[float], limit: int = 5
    ) -> List[ParkSearchResult]:
        """Cosine similarity search against the park collection.

        Args:
            query_vector: The query embedding
            limit: Maximum number of results to return

        Returns:
            Results ordered by descending similarity, as ranked by the database
        """
        self._check_dimensions(query_vector)
        collection = await self._get_collection()

        results = await asyncio.to_thread(
            collection.query,
            query_embeddings=[query_vector],
            n_results=limit,
            include=["metadatas", "distances"],
        )

        metadatas = (results.get("metadatas") or [[]])[0] or []
        distances = (results.get("distances") or [[]])[0] or []

        # Map stored payload fields back to the domain model
        return [
            ParkSearchResult(
                code=str(metadata.get("code", "")),
                name=str(metadata.get("name", "")),
                region=str(metadata.get("region", "")),
                content=str(metadata.get("content", "")),
                score=1.0 - float(distance),
            )
            for metadata, distance in zip(metadatas, distances)
            if metadata is not None
        ]

    async def count(self) -> int:
        """Return the number of points in the park collection."""
        collection = await self._get_collection()
        return int(await asyncio.to_thread(collection.count))
