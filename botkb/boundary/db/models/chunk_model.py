"""
Bot chunk ORM model.

One row per embedded chunk. The row id is also the chunk's id in the
vector index, which is how deletions are mirrored between the two stores.

Dependencies: sqlalchemy, botkb.boundary.db.base
System role: Durable chunk storage
"""

from uuid import UUID

from sqlalchemy import JSON, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from botkb.boundary.db.base import Base, CreatedAtMixin, UUIDMixin


class BotChunkModel(Base, UUIDMixin, CreatedAtMixin):
    """
    Chunk ORM model.

    Rows are written once during ingestion and never updated.

    Attributes:
        bot_id: Owning bot (cascade on bot delete)
        filename: Source filename, used for per-file deletion and listing
        chunk_index: Ordinal position within the source file
        content: Trimmed chunk text
        embedding: Embedding vector as a JSON float array
    """

    __tablename__ = "bot_chunks"
    __table_args__ = (
        Index("ix_bot_chunks_bot_id_filename", "bot_id", "filename"),
    )

    bot_id: Mapped[UUID] = mapped_column(
        ForeignKey("bots.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    filename: Mapped[str] = mapped_column(String(512), nullable=False)
    chunk_index: Mapped[int] = mapped_column(Integer, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    embedding: Mapped[list] = mapped_column(JSON, nullable=False)

    bot = relationship("BotModel", back_populates="chunks")
