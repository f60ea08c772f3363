"""
Bot ORM model.

A bot owns a knowledge base of chunks and a list of standing instructions
that prefix every prompt. Bot CRUD itself is handled by the surrounding
application; this layer reads bots and cascades chunk deletion.

Dependencies: sqlalchemy, botkb.boundary.db.base
System role: Bot persistence for knowledge base ownership
"""

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from botkb.boundary.db.base import Base, TimestampMixin, UUIDMixin


class BotModel(Base, UUIDMixin, TimestampMixin):
    """
    Bot ORM model.

    Attributes:
        id: UUID primary key
        name: Display name
        instructions: Ordered instruction lines joined into the prompt header
        chunks: Knowledge base rows (cascading delete)
    """

    __tablename__ = "bots"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    instructions: Mapped[list] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        doc="Instruction lines prepended to every prompt",
    )

    chunks = relationship(
        "BotChunkModel",
        back_populates="bot",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
