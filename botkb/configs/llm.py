"""
Language model configuration settings.

Holds the chat model parameters and the answer policy applied when
retrieval finds no context. The policy is deployment-wide so every call
site answers empty-context questions the same way.

Dependencies: pydantic, pydantic_settings
System role: LLM and answer assembly configuration
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_FALLBACK_MESSAGE = (
    "I'm sorry, I encountered an error processing your request. Please try again."
)
DEFAULT_NO_INFORMATION_MESSAGE = (
    "I don't have enough information to answer that question. "
    "Please try rephrasing it or upload documents that cover this topic."
)


class LLMSettings(BaseSettings):
    """Chat model configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LLM_",
        case_sensitive=False,
        extra="ignore",
    )

    model_id: str = Field(default="gemini-2.0-flash", description="Gemini chat model ID")
    temperature: float = Field(default=0.2, ge=0.0, le=2.0, description="Sampling temperature")
    timeout: float = Field(default=60.0, description="Request timeout in seconds")
    max_retries: int = Field(default=2, description="Client-side retries for model calls")

    no_context_policy: Literal["short_circuit", "placeholder"] = Field(
        default="short_circuit",
        description=(
            "'short_circuit' answers with the no-information message without a model call; "
            "'placeholder' sends the question with an explicit no-context marker"
        ),
    )
    history_window: int = Field(
        default=10,
        ge=0,
        description="Most recent conversation messages folded into the prompt",
    )

    fallback_message: str = Field(default=DEFAULT_FALLBACK_MESSAGE)
    no_information_message: str = Field(default=DEFAULT_NO_INFORMATION_MESSAGE)
