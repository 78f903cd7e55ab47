"""Park service component: the ingestion pipeline."""

from .main import (
    NO_DOCUMENTS_MESSAGE,
    NO_VALID_DOCUMENTS_MESSAGE,
    IngestValidationError,
    ParkService,
)
from .models import IngestResult

__all__ = [
    "IngestResult",
    "IngestValidationError",
    "NO_DOCUMENTS_MESSAGE",
    "NO_VALID_DOCUMENTS_MESSAGE",
    "ParkService",
]
