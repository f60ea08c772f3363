"""
Vector store configuration settings.

Selects the vector index backend (PGVector for production, FAISS for local
development) and carries the embedding model settings shared by both.

Dependencies: pydantic, pydantic_settings
System role: Vector database configuration for RAG retrieval
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class VectorStoreSettings(BaseSettings):
    """Vector store configuration (FAISS for dev, PGVector for prod)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VECTOR_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    store_type: str = Field(
        default="pgvector",
        description="Vector store type: 'faiss' for local dev, 'pgvector' for production",
    )
    collection_name: str = Field(
        default="bot_chunks",
        description="PGVector collection holding every bot's chunks",
    )
    faiss_index_dir: str = Field(
        default=".faiss_index",
        description="Directory the FAISS index is persisted to",
    )

    embedding_model: str = Field(
        default="models/gemini-embedding-001",
        description="Google Gemini embedding model ID",
    )
    embedding_dimension: int = Field(
        default=768,
        description="Embedding vector dimension, constant across the corpus",
    )

    top_k: int = Field(default=3, description="Number of top results to retrieve")
    fetch_k_multiplier: int = Field(
        default=4,
        description="FAISS over-fetch factor applied before metadata filtering",
    )

    embedding_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Seconds before one embedding request is abandoned",
    )
    query_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Seconds before a PGVector connect or statement is abandoned",
    )
