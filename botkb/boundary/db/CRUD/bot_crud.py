"""
Bot CRUD operations.

Dependencies: sqlalchemy, botkb.boundary.db.models.bot_model
System role: Bot lookup for ingestion and answering
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from botkb.boundary.db.CRUD.base_crud import BaseCRUD
from botkb.boundary.db.models.bot_model import BotModel


class BotCRUD(BaseCRUD[BotModel]):
    """CRUD operations for BotModel."""

    def __init__(self) -> None:
        super().__init__(BotModel)

    async def get_instructions(self, session: AsyncSession, bot_id: UUID) -> list[str] | None:
        """
        Fetch a bot's instruction lines without loading the row.

        Returns:
            Instruction lines, or None when the bot does not exist
        """
        stmt = select(BotModel.instructions).where(BotModel.id == bot_id)
        result = await session.execute(stmt)
        row = result.one_or_none()
        if row is None:
            return None
        return [str(line) for line in (row[0] or [])]


bot_crud = BotCRUD()
