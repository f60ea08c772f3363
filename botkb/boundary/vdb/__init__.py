"""
Vector database boundary layer.

Provides vector index adapters for chunk storage and bot-filtered retrieval.
- PGVectorStore: Production store (langchain_postgres)
- FAISSVectorsStore: Local development store (langchain_community FAISS)

Dependencies: langchain_postgres, langchain_community, faiss-cpu
System role: Vector store adapter for RAG retrieval
"""

from botkb.boundary.vdb.vector_schemas import (
    VectorIndex,
    VectorMetadata,
    VectorSearchResult,
)

__all__ = [
    "VectorIndex",
    "VectorMetadata",
    "VectorSearchResult",
]
