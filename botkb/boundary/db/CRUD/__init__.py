"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from botkb.boundary.db.CRUD import chunk_crud

    counts = await chunk_crud.count_by_filename(db, bot_id)

The chat history store is imported from its own module because it reads
settings at construction time.
"""

from botkb.boundary.db.CRUD.base_crud import BaseCRUD
from botkb.boundary.db.CRUD.bot_crud import BotCRUD, bot_crud
from botkb.boundary.db.CRUD.chunk_crud import ChunkCRUD, chunk_crud

__all__ = [
    "BaseCRUD",
    "BotCRUD",
    "bot_crud",
    "ChunkCRUD",
    "chunk_crud",
]
