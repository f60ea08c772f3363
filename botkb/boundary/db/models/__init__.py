"""
Database models package.

Exports:
  - BotModel: Bot ORM model (owner of a knowledge base)
  - BotChunkModel: Embedded chunk ORM model

Dependencies: sqlalchemy, botkb.boundary.db.base
System role: Database model definitions for domain entities
"""

from botkb.boundary.db.models.bot_model import BotModel
from botkb.boundary.db.models.chunk_model import BotChunkModel

__all__ = [
    "BotModel",
    "BotChunkModel",
]
