"""
Bot chunk CRUD operations.

Provides chunk persistence plus the id lookups and aggregations used to
mirror deletions into the vector index and to list a bot's files.

Dependencies: sqlalchemy, botkb.boundary.db.models.chunk_model
System role: Durable chunk storage operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from botkb.boundary.db.CRUD.base_crud import BaseCRUD
from botkb.boundary.db.models.chunk_model import BotChunkModel


class ChunkCRUD(BaseCRUD[BotChunkModel]):
    """
    CRUD operations for BotChunkModel.

    Extends BaseCRUD with bot- and filename-scoped queries.
    """

    def __init__(self) -> None:
        super().__init__(BotChunkModel)

    async def get_ids_by_filename(
        self,
        session: AsyncSession,
        bot_id: UUID,
        filename: str,
    ) -> list[UUID]:
        """
        Collect chunk ids for one of a bot's files.

        Args:
            session: Async database session
            bot_id: Owning bot
            filename: Source filename

        Returns:
            Chunk ids, in chunk order
        """
        stmt = (
            select(BotChunkModel.id)
            .where(BotChunkModel.bot_id == bot_id, BotChunkModel.filename == filename)
            .order_by(BotChunkModel.chunk_index)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def get_ids_by_bot(self, session: AsyncSession, bot_id: UUID) -> list[UUID]:
        stmt = select(BotChunkModel.id).where(BotChunkModel.bot_id == bot_id)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def get_by_filename(
        self,
        session: AsyncSession,
        bot_id: UUID,
        filename: str,
    ) -> Sequence[BotChunkModel]:
        stmt = (
            select(BotChunkModel)
            .where(BotChunkModel.bot_id == bot_id, BotChunkModel.filename == filename)
            .order_by(BotChunkModel.chunk_index)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def delete_by_ids(self, session: AsyncSession, ids: list[UUID]) -> int:
        """
        Delete chunks by id.

        Returns:
            Number of rows removed
        """
        if not ids:
            return 0
        stmt = delete(BotChunkModel).where(BotChunkModel.id.in_(ids))
        result = await session.execute(stmt)
        return result.rowcount

    async def count_by_filename(
        self,
        session: AsyncSession,
        bot_id: UUID,
    ) -> list[tuple[str, int]]:
        """
        Count a bot's chunks per source file.

        Returns:
            (filename, chunk_count) pairs ordered by filename
        """
        stmt = (
            select(BotChunkModel.filename, func.count(BotChunkModel.id))
            .where(BotChunkModel.bot_id == bot_id)
            .group_by(BotChunkModel.filename)
            .order_by(BotChunkModel.filename)
        )
        result = await session.execute(stmt)
        return [(filename, count) for filename, count in result.all()]


chunk_crud = ChunkCRUD()
