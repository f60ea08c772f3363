"""
Core business logic module.

Contains the exception hierarchy, the ingestion pipeline, the retrieval
cache and the answer assembly agent.
"""

from botkb.core.exceptions import (
    KnowledgeBaseException,
    ValidationError,
    BotNotFoundError,
    DocumentProcessingError,
    ExtractionError,
    EmbeddingError,
    PersistenceError,
    VectorStoreError,
    CacheError,
    ModelError,
    RetrievalError,
    ChunkNotFoundError,
)

__all__ = [
    "KnowledgeBaseException",
    "ValidationError",
    "BotNotFoundError",
    "DocumentProcessingError",
    "ExtractionError",
    "EmbeddingError",
    "PersistenceError",
    "VectorStoreError",
    "CacheError",
    "ModelError",
    "RetrievalError",
    "ChunkNotFoundError",
]
