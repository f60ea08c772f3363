"""
Vector database schemas.

Pydantic models for vector search results and the structural interface
every vector index adapter implements.

Dependencies: pydantic
System role: Type definitions for vector operations
"""

from typing import Any, Protocol

from pydantic import BaseModel, Field


class VectorMetadata(BaseModel):
    """Metadata attached to each vector; bot_id is the tenant filter."""

    bot_id: str = Field(description="Owning bot, exact-match filterable")
    filename: str = Field(default="", description="Source filename")
    chunk_index: int | None = Field(default=None, description="Ordinal position within the source file")


class VectorSearchResult(BaseModel):
    """Single result from vector search."""

    chunk_id: str = Field(description="Chunk identifier")
    content: str = Field(description="Chunk text content")
    metadata: VectorMetadata = Field(description="Chunk metadata")
    similarity_score: float = Field(description="Relevance score, higher is closer")


class VectorIndex(Protocol):
    """Operations the ingestion and retrieval code needs from a vector store."""

    def add_embeddings(
        self,
        texts: list[str],
        embeddings: list[list[float]],
        metadatas: list[dict[str, Any]],
        ids: list[str],
    ) -> list[str]: ...

    def delete(self, ids: list[str]) -> None: ...

    def similarity_search(
        self,
        query: str,
        k: int,
        bot_id: str,
    ) -> list[VectorSearchResult]: ...


def to_search_result(doc, score: float) -> VectorSearchResult:
    """Convert a LangChain (Document, score) pair into a VectorSearchResult."""
    metadata = doc.metadata or {}
    return VectorSearchResult(
        chunk_id=str(doc.id or ""),
        content=doc.page_content,
        metadata=VectorMetadata(
            bot_id=str(metadata.get("bot_id", "")),
            filename=str(metadata.get("filename", "")),
            chunk_index=metadata.get("chunk_index"),
        ),
        similarity_score=float(score),
    )
