"""Supporting adapters."""

from .chat_history_adapter import ChatHistoryAdapter

__all__ = ["ChatHistoryAdapter"]
