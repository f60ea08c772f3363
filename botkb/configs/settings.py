"""
Unified application settings.

Aggregates the database, vector store, cache, LLM and ingestion settings
into a single Settings object shared by services and boundaries.

Dependencies: All config modules
System role: Central configuration aggregator for the knowledge base
"""

from functools import lru_cache

from botkb.configs.base import BaseSettings
from botkb.configs.cache import CacheSettings
from botkb.configs.database import DatabaseSettings
from botkb.configs.llm import LLMSettings
from botkb.configs.vector_store import VectorStoreSettings
from botkb.core.document_processing.configs import IngestionSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    database: DatabaseSettings = DatabaseSettings()
    vector_store: VectorStoreSettings = VectorStoreSettings()
    cache: CacheSettings = CacheSettings()
    llm: LLMSettings = LLMSettings()
    ingestion: IngestionSettings = IngestionSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Environment variables are loaded once, on first call.

    Returns:
        Settings: Application settings instance

    Usage:
        from botkb.configs import get_settings
        settings = get_settings()
    """
    return Settings()
