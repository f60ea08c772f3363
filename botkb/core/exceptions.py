"""
Exception hierarchy for the bot knowledge base.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class KnowledgeBaseException(Exception):
    """Base exception for all knowledge base errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(KnowledgeBaseException):
    """Raised when an upload or request fails validation."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class BotNotFoundError(KnowledgeBaseException):
    """Raised when a bot cannot be found."""

    def __init__(self, bot_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["bot_id"] = bot_id
        super().__init__(f"Bot not found: {bot_id}", details)


class DocumentProcessingError(KnowledgeBaseException):
    """Base exception for document ingestion errors."""

    def __init__(
        self,
        message: str,
        filename: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize document processing error.

        Args:
            message: Error message
            filename: Source file being ingested
            details: Additional context
        """
        details = details or {}
        if filename:
            details["filename"] = filename
        super().__init__(message, details)


class ExtractionError(DocumentProcessingError):
    """Raised when text extraction fails for a whole file."""

    def __init__(
        self,
        message: str,
        filename: str | None = None,
        content_type: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if content_type:
            details["content_type"] = content_type
        super().__init__(message, filename, details)


class EmbeddingError(DocumentProcessingError):
    """Raised when embedding generation fails for a chunk."""

    pass


class PersistenceError(DocumentProcessingError):
    """Raised when a chunk row cannot be written."""

    pass


class VectorStoreError(KnowledgeBaseException):
    """Raised when vector store operations fail."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize vector store error.

        Args:
            message: Error message
            operation: Operation that failed (add, search, delete)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class CacheError(KnowledgeBaseException):
    """Raised when the cache store fails (always recoverable)."""

    pass


class ModelError(KnowledgeBaseException):
    """Raised when the language model call fails."""

    pass


class RetrievalError(KnowledgeBaseException):
    """Raised when retrieval operations fail."""

    def __init__(
        self,
        message: str,
        bot_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if bot_id:
            details["bot_id"] = bot_id
        super().__init__(message, details)


class ChunkNotFoundError(KnowledgeBaseException):
    """Raised when a chunk id does not exist."""

    def __init__(self, chunk_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["chunk_id"] = chunk_id
        super().__init__(f"Chunk not found: {chunk_id}", details)
