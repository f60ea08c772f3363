"""
Database configuration settings.

PostgreSQL connection parameters shared by three clients: the SQLAlchemy
async engine (asyncpg), the PGVector store (psycopg) and the conversation
history store (plain libpq URL).

Dependencies: pydantic, pydantic_settings, sqlalchemy
System role: Database connection configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict
from sqlalchemy.engine import URL

from botkb.configs.base import BaseSettings


class DatabaseSettings(BaseSettings):
    """PostgreSQL database configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="POSTGRES_",
        case_sensitive=False,
        extra="ignore",
    )

    host: str = Field(default="localhost")
    port: int = Field(default=5432)
    user: str = Field(default="postgres")
    password: str = Field(default="postgres")
    db: str = Field(default="botkb", description="Database holding bots, chunks and chat history")
    sslmode: str = Field(default="prefer", description="libpq sslmode")

    pool_size: int = Field(default=10, description="Async engine pool size")
    max_overflow: int = Field(default=20, description="Connections allowed above pool_size")
    pool_timeout: int = Field(default=30, description="Seconds to wait for a pooled connection")
    echo_sql: bool = Field(default=False, description="Echo SQL statements to logs")

    chat_history_table: str = Field(
        default="bot_chat_history",
        description="Table used by the conversation history store",
    )

    def _url(self, drivername: str, query: dict[str, str]) -> str:
        # URL.create escapes credentials containing reserved characters
        url = URL.create(
            drivername,
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.db,
            query=query,
        )
        return url.render_as_string(hide_password=False)

    @property
    def database_url(self) -> str:
        """libpq URL, used with psycopg.connect by the chat history store."""
        return self._url("postgresql", {"sslmode": self.sslmode})

    @property
    def async_database_url(self) -> str:
        """
        SQLAlchemy URL for the asyncpg driver.

        asyncpg takes 'ssl' instead of libpq's 'sslmode'; only 'require' is
        forwarded, every other mode uses the driver default.
        """
        query = {"ssl": "require"} if self.sslmode == "require" else {}
        return self._url("postgresql+asyncpg", query)

    @property
    def psycopg_url(self) -> str:
        """SQLAlchemy URL for the psycopg driver, used by PGVector."""
        return self._url("postgresql+psycopg", {"sslmode": self.sslmode})
