"""Request and response models for the park knowledge HTTP API."""

from typing import Dict, List, Optional

from components.document_processing import RawDocument
from pydantic import BaseModel, Field


class AskRequest(BaseModel):
    """Request body for /ask and /ask/stream."""

    question: Optional[str] = Field(
        default=None, description="Natural-language question about the parks"
    )


class AskResponse(BaseModel):
    """Response body for /ask."""

    answer: str = Field(..., description="The assistant's answer")


class IngestRequest(BaseModel):
    """Request body for /ingest."""

    documents: Optional[List[RawDocument]] = Field(
        default=None,
        description="Park documents; when omitted the local park files are used",
    )


class IngestResponse(BaseModel):
    """Response body for a successful ingestion."""

    message: str = Field(..., description="Human-readable summary")
    count: int = Field(..., description="Number of parks written to the index")


class ErrorResponse(BaseModel):
    """Stable error shape returned by every endpoint."""

    error: str = Field(..., description="What went wrong")


class ModuleHealth(BaseModel):
    """Health of one dependency."""

    status: str = Field(..., description="healthy or unhealthy")
    details: str = Field(default="", description="Short diagnostic detail")


class HealthResponse(BaseModel):
    """Response body for /health."""

    status: str = Field(..., description="healthy, or degraded if any module is not")
    modules: Dict[str, ModuleHealth] = Field(default_factory=dict)
