"""
Configuration settings for the document ingestion pipeline.

Provides environment-based limits for upload validation, text extraction,
chunking, and vector-index batching.

Dependencies: pydantic, pydantic_settings
System role: Centralized pipeline configuration
"""

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

MB = 1024 * 1024


class IngestionSettings(BaseSettings):
    """Settings for document ingestion pipeline."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="INGESTION_",
        case_sensitive=False,
        extra="ignore",
    )

    # Per-file limits
    max_file_size: int = Field(
        default=5 * MB,
        gt=0,
        description="Files larger than this are skipped",
    )
    max_text_length: int = Field(
        default=1_000_000,
        gt=0,
        description="Extracted text beyond this many characters is truncated",
    )

    # Chunking settings
    chunk_size: int = Field(
        default=500,
        gt=0,
        description="Maximum chunk size in characters",
    )
    chunk_overlap: int = Field(
        default=100,
        ge=0,
        description="Overlap between consecutive chunks",
    )

    # Vector index batching
    batch_size: int = Field(
        default=5,
        gt=0,
        description="Chunks written to the vector index per call",
    )
    embedding_max_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts per chunk before an embedding failure is final",
    )

    # Request-level limits
    max_files_per_upload: int = Field(default=10, gt=0)
    max_total_upload_size: int = Field(default=50 * MB, gt=0)
    allowed_content_types: list[str] = Field(
        default=[
            "application/pdf",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
            "text/plain",
            "text/markdown",
            "text/x-markdown",
        ],
        description="MIME types accepted for ingestion",
    )

    @model_validator(mode="after")
    def _check_overlap(self) -> "IngestionSettings":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be smaller than "
                f"chunk_size ({self.chunk_size})"
            )
        return self


@lru_cache
def get_ingestion_settings() -> IngestionSettings:
    """
    Get cached ingestion settings instance.

    Returns:
        IngestionSettings: Singleton settings loaded from environment
    """
    return IngestionSettings()
