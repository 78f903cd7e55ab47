"""Loader for park documents stored in a local directory."""

import logging
from pathlib import Path
from typing import List

from llama_index.core import SimpleDirectoryReader

from .models import RawDocument

logger = logging.getLogger(__name__)


class DocumentLoaderError(Exception):
    """Raised when local park documents cannot be loaded."""


def load_park_documents(data_dir: Path) -> List[RawDocument]:
    """
    Load every ``*.txt`` park file from a directory.

    Used by ingestion when the request body carries no documents.

    Args:
        data_dir: Directory containing the park text files.

    Returns:
        The raw documents, or an empty list when the directory is missing or
        holds no park files.

    Raises:
        DocumentLoaderError: If the files exist but cannot be read.
    """
    if not data_dir.exists():
        logger.warning(f"Parks directory not found at {data_dir}")
        return []

    if not any(data_dir.glob("*.txt")):
        logger.info(f"No park files found in {data_dir}")
        return []

    try:
        reader = SimpleDirectoryReader(
            input_dir=str(data_dir),
            required_exts=[".txt"],
            recursive=False,
        )
        documents = reader.load_data()
    except Exception as e:
        error_msg = f"An unexpected error occurred while loading park files: {e}"
        logger.error(error_msg, exc_info=True)
        raise DocumentLoaderError(error_msg) from e

    logger.info(f"Found {len(documents)} park files in {data_dir}")
    return [
        RawDocument(
            file_name=doc.metadata.get("file_name", f"{doc.id_}.txt"),
            content=doc.text,
        )
        for doc in documents
    ]
