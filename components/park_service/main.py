"""
This service encapsulates the park ingestion pipeline. It is decoupled from
any web framework and is the single writer of the park collection.

Responsibilities:
- Parsing raw park documents into records, skipping malformed ones.
- Making sure the collection exists before writing.
- Embedding every description in one batch and upserting the points.
- Loading park files from the local data directory when none are submitted.
"""

import asyncio
import logging
from typing import List, Optional

from components.document_processing import (
    ParsedRecord,
    RawDocument,
    load_park_documents,
    parse_document,
)
from components.embedding_system import EmbeddingGenerator
from components.vector_store import IndexPoint, ParkVectorStore, derive_point_id
from park_knowledge.config import Config

from .models import IngestResult

logger = logging.getLogger(__name__)

NO_DOCUMENTS_MESSAGE = "No documents found to ingest."
NO_VALID_DOCUMENTS_MESSAGE = "No valid documents to ingest after parsing."


class IngestValidationError(ValueError):
    """Raised when a request has nothing that can be ingested."""


class ParkService:
    """The central service for park ingestion."""

    def __init__(
        self,
        config: Config,
        vector_store: ParkVectorStore,
        embedding_generator: EmbeddingGenerator,
    ):
        """
        Initializes the ParkService with its required dependencies.

        Args:
            config: The application's configuration object.
            vector_store: The park collection in the vector database.
            embedding_generator: Produces one vector per description.
        """
        self.config = config
        self.vector_store = vector_store
        self.embedding_generator = embedding_generator

    async def load_local_documents(self) -> List[RawDocument]:
        """Reads the park files from the configured data directory."""
        data_path = self.config.get_data_path()
        logger.info(f"Loading park documents from {data_path}")
        return await asyncio.to_thread(load_park_documents, data_path)

    def parse_documents(self, documents: List[RawDocument]) -> List[ParsedRecord]:
        """Parses each document, dropping the ones that cannot be indexed."""
        records = []
        for document in documents:
            record = parse_document(document.file_name, document.content)
            if record is not None:
                records.append(record)
        skipped = len(documents) - len(records)
        if skipped:
            logger.warning(f"Skipped {skipped} of {len(documents)} documents")
        return records

    def deduplicate_records(self, records: List[ParsedRecord]) -> List[ParsedRecord]:
        """Keeps one record per park code; a later document replaces an earlier one."""
        by_code = {record.code: record for record in records}
        duplicates = len(records) - len(by_code)
        if duplicates:
            logger.warning(
                f"Found {duplicates} duplicate park codes; keeping the last occurrence"
            )
        return list(by_code.values())

    async def ingest(self, documents: Optional[List[RawDocument]] = None) -> IngestResult:
        """
        Runs the ingestion pipeline: parse, ensure collection, embed, upsert.

        Args:
            documents: Documents submitted by the caller. When empty or None,
                the park files in the local data directory are used instead.

        Returns:
            An IngestResult with the number of parks written.

        Raises:
            IngestValidationError: If there are no documents, or none parse.
            DocumentLoaderError: If the local park files cannot be read.
        """
        if not documents:
            documents = await self.load_local_documents()
        if not documents:
            raise IngestValidationError(NO_DOCUMENTS_MESSAGE)

        logger.info(f"Starting ingestion of {len(documents)} documents")
        records = self.parse_documents(documents)
        if not records:
            raise IngestValidationError(NO_VALID_DOCUMENTS_MESSAGE)
        records = self.deduplicate_records(records)

        await self.vector_store.ensure_collection()

        vectors = await self.embedding_generator.generate(
            [record.description for record in records]
        )

        points = [
            IndexPoint(
                id=derive_point_id(record.code),
                vector=vector,
                code=record.code,
                name=record.name,
                region=record.region,
                content=record.full_content,
            )
            for record, vector in zip(records, vectors)
        ]
        await self.vector_store.upsert(points)

        logger.info(f"Successfully ingested {len(points)} parks")
        return IngestResult(
            count=len(points), message=f"Successfully ingested {len(points)} parks."
        )

