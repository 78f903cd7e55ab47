"""Data models for the park ingestion service."""

from pydantic import BaseModel, Field


class IngestResult(BaseModel):
    """Summary of one completed ingestion."""

    count: int = Field(..., description="Number of parks written to the index")
    message: str = Field(..., description="Human-readable summary")
