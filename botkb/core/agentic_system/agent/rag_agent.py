"""
RAG answer agent.

Retrieves a bot's most relevant chunks through the cached retriever,
builds a grounded prompt and asks the chat model. answer() never raises:
every failure is logged and replaced with a fixed fallback message.

Dependencies: langchain_core, langchain_google_genai, botkb.core.retriever
System role: Retrieval and answer assembly
"""

import logging
from typing import Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import BaseMessage
from langchain_core.output_parsers import StrOutputParser
from langchain_core.runnables import Runnable
from langchain_google_genai import ChatGoogleGenerativeAI

from botkb.configs.llm import LLMSettings
from botkb.core.agentic_system.agent.rag_agent_prompt import build_prompt
from botkb.core.exceptions import ModelError
from botkb.core.retriever import Retriever
from botkb.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)


def create_chat_model(settings: LLMSettings) -> BaseChatModel:
    """Build the Gemini chat model from LLM settings."""
    return ChatGoogleGenerativeAI(
        model=settings.model_id,
        temperature=settings.temperature,
        timeout=settings.timeout,
        max_retries=settings.max_retries,
    )


class RAGAgent:
    """
    Grounded question answering over one bot's knowledge base.

    The no-context policy comes from LLMSettings and is applied to every
    question: 'short_circuit' answers with the no-information message
    without calling the model, 'placeholder' asks the model with an
    explicit no-context marker.
    """

    def __init__(
        self,
        retriever: Retriever,
        settings: LLMSettings | None = None,
        model: BaseChatModel | Runnable | None = None,
        top_k: int | None = None,
    ) -> None:
        """
        Args:
            retriever: Cached bot-scoped retriever
            settings: LLM settings (defaults loaded from environment)
            model: Chat model or runnable accepting prompt text (Gemini when None)
            top_k: Chunks retrieved per question (retriever default when None)
        """
        self._retriever = retriever
        self._settings = settings or LLMSettings()
        self._model = model or create_chat_model(self._settings)
        self._chain = self._model | StrOutputParser()
        self._top_k = top_k

    async def answer(
        self,
        bot_id: str,
        question: str,
        history: Sequence[BaseMessage] | None = None,
        instructions: Sequence[str] | None = None,
    ) -> str:
        """
        Answer a question from the bot's knowledge base.

        Args:
            bot_id: Bot whose chunks are eligible
            question: User question
            history: Conversation so far, oldest first
            instructions: Bot instruction lines

        Returns:
            str: Model answer, the no-information message, or the fallback message
        """
        try:
            chunks = await self._retriever.retrieve(bot_id, question, self._top_k)

            if not chunks:
                if self._settings.no_context_policy == "short_circuit":
                    logger.info(f"{__name__}:answer - No context for bot_id={bot_id}, short-circuiting")
                    return self._settings.no_information_message
                logger.info(f"{__name__}:answer - No context for bot_id={bot_id}, using placeholder")

            prompt = build_prompt(
                instructions=instructions,
                history=history,
                context_chunks=chunks,
                question=question,
                history_window=self._settings.history_window,
            )
            answer = await self._invoke_model(prompt)
            if not answer.strip():
                raise ModelError("Model returned an empty answer")

            logger.info(
                f"{__name__}:answer - Answered bot_id={bot_id} with {len(chunks)} chunks, "
                f"answer_len={len(answer)}"
            )
            return answer.strip()

        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:answer - Answer assembly failed, returning fallback",
                e,
                bot_id=bot_id,
                question=question,
            )
            return self._settings.fallback_message

    async def _invoke_model(self, prompt: str) -> str:
        try:
            return await self._chain.ainvoke(prompt)
        except Exception as e:
            raise ModelError(f"Language model call failed: {e}") from e
