"""
Chunk domain model for document ingestion pipeline.

Represents one embedded slice of a source file before it is written to
the chunk table and the vector index.

Dependencies: pydantic
System role: Data structure for document chunks in ingestion pipeline
"""

from pydantic import BaseModel, Field


class Chunk(BaseModel):
    """Document chunk with its embedding vector."""

    id: str = Field(description="Chunk identifier shared by the chunk table and vector index")
    bot_id: str = Field(description="Owning bot")
    filename: str = Field(description="Source filename")
    chunk_index: int = Field(ge=0, description="Ordinal position within the source file")
    content: str = Field(min_length=1, description="Trimmed chunk text")
    embedding: list[float] = Field(description="Embedding vector")

    def vector_metadata(self) -> dict:
        """Metadata stored alongside the vector, filterable by bot_id."""
        return {
            "bot_id": self.bot_id,
            "filename": self.filename,
            "chunk_index": self.chunk_index,
        }
