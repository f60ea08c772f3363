"""
Chat history adapter.

Binds the conversation history store to one caller-supplied session id,
so services pass the session explicitly on every request.

Dependencies: botkb.boundary.db.CRUD.chat_history_crud
System role: Chat history business logic adapter
"""

from typing import List
from uuid import UUID

from langchain_core.messages import BaseMessage

from botkb.boundary.db.CRUD.chat_history_crud import ChatHistoryCRUD, chat_history_crud
from botkb.models.chat import ChatMessage


class ChatHistoryAdapter:
    """Session-scoped view of the chat history store."""

    def __init__(self, session_id: UUID, store: ChatHistoryCRUD | None = None) -> None:
        """
        Args:
            session_id: Conversation session id
            store: History store (module singleton when None)
        """
        self.session_id = session_id
        self._store = store or chat_history_crud

    async def get_messages(self, limit: int | None = None) -> List[BaseMessage]:
        """
        Get the most recent messages of the session, oldest first.

        Args:
            limit: Maximum number of messages (None = all)
        """
        return await self._store.get_recent_messages(self.session_id, limit)

    async def get_chat_messages(self, limit: int | None = None) -> List[ChatMessage]:
        """Same as get_messages, as caller-facing ChatMessage objects."""
        messages = await self.get_messages(limit)
        return [ChatMessage.from_message(msg) for msg in messages]

    async def add_exchange(self, question: str, answer: str) -> None:
        await self._store.add_exchange(self.session_id, question, answer)

    async def clear(self) -> None:
        await self._store.clear_history(self.session_id)
