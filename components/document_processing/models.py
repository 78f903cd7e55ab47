"""Data models for park document ingestion."""

from pydantic import BaseModel, ConfigDict, Field


class RawDocument(BaseModel):
    """A raw park document as submitted for ingestion."""

    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(
        default="", alias="fileName", description="Source file name, e.g. acad.txt"
    )
    content: str = Field(default="", description="The raw text of the document")


class ParsedRecord(BaseModel):
    """A normalized, indexable park record."""

    code: str = Field(..., description="Park code derived from the file name")
    name: str = Field(..., description="Park name taken from the first line")
    region: str = Field(..., description="Region (states) taken from the second line")
    full_content: str = Field(..., description="The complete original text")
    description: str = Field(..., description="Text selected for embedding")
