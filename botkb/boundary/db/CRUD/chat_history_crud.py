"""
Chat history CRUD operations.

Wraps LangChain PostgresChatMessageHistory as the conversation session
store. Every call names its session explicitly; there is no notion of a
current or last-used session.

Dependencies: langchain_postgres, psycopg, fastapi.concurrency, botkb.configs
System role: Conversation history persistence keyed by caller-supplied session id
"""

from uuid import UUID

import psycopg
from fastapi.concurrency import run_in_threadpool
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langchain_postgres import PostgresChatMessageHistory

from botkb.configs import get_settings


class ChatHistoryCRUD:
    """
    Session-scoped chat message storage.

    Uses short-lived psycopg connections as required by langchain_postgres;
    blocking calls run in the threadpool.
    """

    def __init__(self, connection_string: str | None = None, table_name: str | None = None) -> None:
        settings = get_settings()
        self.connection_string = connection_string or settings.database.database_url
        self.table_name = table_name or settings.database.chat_history_table

    def _add_messages_sync(self, session_id: UUID, messages: list[BaseMessage]) -> None:
        with psycopg.connect(self.connection_string) as conn:
            history = PostgresChatMessageHistory(
                self.table_name,
                str(session_id),
                sync_connection=conn,
            )
            history.add_messages(messages)

    def _get_messages_sync(self, session_id: UUID) -> list[BaseMessage]:
        with psycopg.connect(self.connection_string) as conn:
            history = PostgresChatMessageHistory(
                self.table_name,
                str(session_id),
                sync_connection=conn,
            )
            return history.get_messages()

    def _clear_sync(self, session_id: UUID) -> None:
        with psycopg.connect(self.connection_string) as conn:
            history = PostgresChatMessageHistory(
                self.table_name,
                str(session_id),
                sync_connection=conn,
            )
            history.clear()

    async def add_exchange(self, session_id: UUID, question: str, answer: str) -> None:
        """
        Append a user question and the assistant answer in one write.

        Args:
            session_id: Conversation session id supplied by the caller
            question: User message
            answer: Assistant reply
        """
        await run_in_threadpool(
            self._add_messages_sync,
            session_id,
            [HumanMessage(content=question), AIMessage(content=answer)],
        )

    async def get_recent_messages(self, session_id: UUID, limit: int | None = None) -> list[BaseMessage]:
        """
        Retrieve the newest messages of a session, oldest first.

        Args:
            session_id: Conversation session id
            limit: Maximum number of messages (None for all)
        """
        messages = await run_in_threadpool(self._get_messages_sync, session_id)
        if limit is not None:
            messages = messages[-limit:] if limit > 0 else []
        return messages

    async def clear_history(self, session_id: UUID) -> None:
        await run_in_threadpool(self._clear_sync, session_id)

    def create_table(self) -> None:
        """Create the chat history table (one-time setup)."""
        with psycopg.connect(self.connection_string) as conn:
            PostgresChatMessageHistory.create_tables(conn, self.table_name)


chat_history_crud = ChatHistoryCRUD()
