"""
Chat domain models and schemas.

Dependencies: pydantic, langchain_core.messages
System role: Chat service contracts
"""

from typing import Literal

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    """Single chat message supplied by or returned to a caller."""

    role: Literal["user", "assistant"] = Field(description="Message role: 'user' or 'assistant'")
    content: str = Field(description="Message content")

    def to_message(self) -> BaseMessage:
        if self.role == "user":
            return HumanMessage(content=self.content)
        return AIMessage(content=self.content)

    @classmethod
    def from_message(cls, message: BaseMessage) -> "ChatMessage":
        role = "user" if message.type == "human" else "assistant"
        return cls(role=role, content=str(message.content))


class ChatResponse(BaseModel):
    """Answer to a session-scoped chat message."""

    session_id: str
    answer: str
