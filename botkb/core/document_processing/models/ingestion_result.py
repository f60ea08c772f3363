"""
Ingestion result models.

Dependencies: pydantic
System role: Return type for IngestionPipeline.process()
"""

from enum import Enum

from pydantic import BaseModel, Field


class IngestionStatus(str, Enum):
    """Outcome of ingesting one file."""

    INGESTED = "ingested"
    SKIPPED = "skipped"
    FAILED = "failed"


class FileIngestionResult(BaseModel):
    """Result of running one file through the pipeline."""

    filename: str = Field(description="Source filename")
    status: IngestionStatus = Field(description="Per-file outcome")
    chunk_count: int = Field(default=0, description="Chunks persisted for this file")
    skipped_chunks: int = Field(default=0, description="Chunks dropped after embedding or persistence errors")
    message: str | None = Field(default=None, description="Reason for a skip or failure")
    processing_time_ms: float = Field(default=0.0, description="Wall time spent on the file")
