"""
Chunk persistence task.

Writes one embedded chunk to the chunk table and commits immediately, so
a later failure never takes already-stored sibling chunks with it.

Dependencies: sqlalchemy, botkb.boundary.db
System role: Persistence stage of document ingestion pipeline
"""

from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from botkb.boundary.db.CRUD.chunk_crud import ChunkCRUD, chunk_crud
from botkb.core.exceptions import PersistenceError
from ..models import Chunk


class SavingTask:
    """Persist chunks to durable storage."""

    def __init__(self, crud: ChunkCRUD = chunk_crud) -> None:
        self._crud = crud

    async def save(self, db: AsyncSession, chunk: Chunk) -> None:
        """
        Insert and commit one chunk row.

        Args:
            db: Async database session
            chunk: Embedded chunk

        Raises:
            PersistenceError: When the insert or commit fails (session is rolled back)
        """
        try:
            await self._crud.create(
                db,
                id=UUID(chunk.id),
                bot_id=UUID(chunk.bot_id),
                filename=chunk.filename,
                chunk_index=chunk.chunk_index,
                content=chunk.content,
                embedding=chunk.embedding,
            )
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise PersistenceError(
                f"Failed to persist chunk {chunk.chunk_index}: {e}",
                filename=chunk.filename,
                details={"chunk_id": chunk.id},
            ) from e
