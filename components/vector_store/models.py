"""Data models for the park vector index."""

from typing import List

from pydantic import BaseModel, Field


class IndexPoint(BaseModel):
    """One point stored in the vector database."""

    id: str = Field(..., description="Deterministic identifier derived from the code")
    vector: List[float] = Field(..., description="Embedding of the park description")
    code: str = Field(..., description="Park code")
    name: str = Field(..., description="Park name")
    region: str = Field(..., description="Park region (states)")
    content: str = Field(..., description="Full park document text")

    def payload(self) -> dict:
        return {
            "code": self.code,
            "name": self.name,
            "region": self.region,
            "content": self.content,
        }


class ParkSearchResult(BaseModel):
    """One retrieval hit from the vector index."""

    code: str = Field(..., description="Park code")
    name: str = Field(..., description="Park name")
    region: str = Field(..., description="Park region (states)")
    content: str = Field(..., description="Full park document text")
    score: float = Field(..., description="Cosine similarity, higher is more relevant")
