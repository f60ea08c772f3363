"""
Database table creation script.

Creates the bot and chunk tables and the conversation history table.

Dependencies: sqlalchemy, langchain_postgres, botkb.configs
System role: Database schema initialization

Usage:
    python -m botkb.boundary.db.create_tables
"""

import asyncio
import logging

from botkb.boundary.db.connection import create_tables, get_async_engine
from botkb.boundary.db.CRUD.chat_history_crud import chat_history_crud
from botkb.configs import get_settings
from botkb.observability.logger import configure_logging

logger = logging.getLogger(__name__)


async def create_all_tables() -> None:
    """
    Create every table; idempotent, existing tables are left unchanged.

    Raises:
        SQLAlchemyError: If the connection or a CREATE TABLE fails
    """
    engine = get_async_engine()
    try:
        await create_tables(engine)
        logger.info(f"{__name__}:create_all_tables - ORM tables created")
    finally:
        await engine.dispose()

    chat_history_crud.create_table()
    logger.info(f"{__name__}:create_all_tables - Chat history table created")


if __name__ == "__main__":
    configure_logging(get_settings().log_level)
    asyncio.run(create_all_tables())
