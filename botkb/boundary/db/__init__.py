"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, CreatedAtMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(), create_tables()
  - BotModel, BotChunkModel: Domain entities
  - bot_crud, chunk_crud: CRUD operation singletons

Dependencies: sqlalchemy, botkb.configs
System role: Database adapter for bots and their chunk store
"""

from botkb.boundary.db.base import Base, CreatedAtMixin, TimestampMixin, UUIDMixin
from botkb.boundary.db.connection import (
    create_tables,
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from botkb.boundary.db.models import BotChunkModel, BotModel
from botkb.boundary.db.CRUD import (
    BaseCRUD,
    BotCRUD,
    ChunkCRUD,
    bot_crud,
    chunk_crud,
)

__all__ = [
    "Base",
    "CreatedAtMixin",
    "TimestampMixin",
    "UUIDMixin",
    "create_tables",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    "BotModel",
    "BotChunkModel",
    "BaseCRUD",
    "BotCRUD",
    "ChunkCRUD",
    "bot_crud",
    "chunk_crud",
]
