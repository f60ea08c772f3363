"""
Retrieval cache configuration settings.

Dependencies: pydantic, pydantic_settings
System role: Redis connection and TTL settings for the retrieval cache
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CacheSettings(BaseSettings):
    """Redis-backed retrieval cache configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CACHE_",
        case_sensitive=False,
        extra="ignore",
    )

    redis_host: str = Field(default="localhost", description="Redis host")
    redis_port: int = Field(default=6379, description="Redis port")
    redis_db: int = Field(default=0, description="Redis logical database")
    redis_password: str | None = Field(default=None, description="Redis password")
    socket_timeout: float = Field(default=2.0, description="Redis socket timeout in seconds")

    key_prefix: str = Field(default="query", description="Namespace prefix for cached queries")
    ttl_seconds: int = Field(default=3600, gt=0, description="Cache entry time-to-live")

    @property
    def redis_url(self) -> str:
        """
        Construct Redis connection URL.

        Returns:
            str: redis:// URL with optional password
        """
        auth = f":{self.redis_password}@" if self.redis_password else ""
        return f"redis://{auth}{self.redis_host}:{self.redis_port}/{self.redis_db}"
