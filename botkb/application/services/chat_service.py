"""
Chat service for grounded Q&A over a bot's knowledge base.

ask() answers a single question with caller-supplied history.
process_chat() does the same for a conversation session: it reads the
session's recent history, answers, and appends the exchange. The session
id is always supplied by the caller.

Dependencies: botkb.core.agentic_system, botkb.application.adapters, botkb.boundary.db
System role: Chat service orchestration layer
"""

import logging
from typing import Sequence
from uuid import UUID

from langchain_core.messages import BaseMessage
from sqlalchemy.ext.asyncio import AsyncSession

from botkb.application.adapters.chat_history_adapter import ChatHistoryAdapter
from botkb.boundary.db.CRUD.bot_crud import bot_crud
from botkb.boundary.db.CRUD.chat_history_crud import ChatHistoryCRUD
from botkb.core.agentic_system.agent.rag_agent import RAGAgent
from botkb.core.exceptions import BotNotFoundError, ValidationError
from botkb.models.chat import ChatMessage, ChatResponse
from botkb.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


class ChatService:
    """Bot Q&A with optional session-scoped conversation history."""

    def __init__(
        self,
        db: AsyncSession,
        rag_agent: RAGAgent,
        history_store: ChatHistoryCRUD | None = None,
    ) -> None:
        """
        Args:
            db: AsyncSession for bot lookups
            rag_agent: RAG agent instance for answers
            history_store: Conversation history store (module singleton when None)
        """
        self.db = db
        self.rag_agent = rag_agent
        self._history_store = history_store

    async def ask(
        self,
        bot_id: UUID,
        question: str,
        history: Sequence[ChatMessage | BaseMessage] | None = None,
    ) -> str:
        """
        Answer a question from a bot's knowledge base.

        Args:
            bot_id: Bot to ask
            question: User question
            history: Prior messages, oldest first

        Returns:
            str: Answer text, or a fallback message when answering failed

        Raises:
            ValidationError: When the question is blank
            BotNotFoundError: When the bot does not exist
        """
        if not question or not question.strip():
            raise ValidationError("Question must not be empty", field="question")

        instructions = await bot_crud.get_instructions(self.db, bot_id)
        if instructions is None:
            raise BotNotFoundError(str(bot_id))

        messages = [
            msg.to_message() if isinstance(msg, ChatMessage) else msg
            for msg in (history or [])
        ]
        return await self.rag_agent.answer(
            bot_id=str(bot_id),
            question=question,
            history=messages,
            instructions=instructions,
        )

    async def process_chat(
        self,
        bot_id: UUID,
        session_id: UUID,
        message: str,
        context_window_size: int = 10,
    ) -> ChatResponse:
        """
        Answer a message within a conversation session.

        Flow:
        1. Fetch the session's recent history (context window)
        2. Answer with that history
        3. Append the user message and the answer to the session

        Args:
            bot_id: Bot to ask
            session_id: Caller-supplied conversation session id
            message: User message
            context_window_size: Recent messages passed as history

        Returns:
            ChatResponse: Session id and answer

        History store failures degrade to an empty history on read and an
        unrecorded exchange on write; the answer is still returned.
        """
        chat_adapter = ChatHistoryAdapter(session_id=session_id, store=self._history_store)
        try:
            chat_history = await chat_adapter.get_messages(limit=context_window_size)
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:process_chat - History read failed, answering without history",
                e,
                level=logging.WARNING,
                bot_id=bot_id,
                session_id=session_id,
            )
            chat_history = []

        answer = await self.ask(bot_id, message, chat_history)

        try:
            await chat_adapter.add_exchange(message, answer)
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:process_chat - History write failed, exchange not recorded",
                e,
                level=logging.WARNING,
                bot_id=bot_id,
                session_id=session_id,
            )

        logger.info(
            f"{__name__}:process_chat - bot_id={bot_id} session_id={session_id} "
            f"history={len(chat_history)}"
        )
        return ChatResponse(session_id=str(session_id), answer=answer)
