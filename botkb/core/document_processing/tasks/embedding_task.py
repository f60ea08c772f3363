"""
Per-chunk embedding task.

Embeds one chunk at a time through the configured LangChain embeddings,
retrying transient failures with exponential backoff.

Dependencies: langchain_core, tenacity
System role: Embedding stage of document ingestion pipeline
"""

import logging

from langchain_core.embeddings import Embeddings
from tenacity import Retrying, stop_after_attempt, wait_exponential_jitter

from botkb.core.exceptions import EmbeddingError

logger = logging.getLogger(__name__)


class EmbeddingTask:
    """Generate one embedding vector per chunk."""

    def __init__(
        self,
        embeddings: Embeddings,
        dimension: int,
        max_attempts: int = 3,
        wait_initial: float = 0.5,
        wait_max: float = 8.0,
    ) -> None:
        """
        Args:
            embeddings: LangChain embeddings client
            dimension: Expected vector length for the whole corpus
            max_attempts: Attempts before the chunk is given up on
            wait_initial: First backoff delay in seconds
            wait_max: Backoff ceiling in seconds
        """
        if dimension <= 0:
            raise ValueError("dimension must be positive")
        self._embeddings = embeddings
        self._dimension = dimension
        self._max_attempts = max_attempts
        self._wait_initial = wait_initial
        self._wait_max = wait_max

    def embed(self, text: str, filename: str | None = None) -> list[float]:
        """
        Embed a single chunk.

        Args:
            text: Chunk content
            filename: Source file, for error context

        Returns:
            list[float]: Embedding of the configured dimension

        Raises:
            EmbeddingError: When every attempt fails or the vector has the wrong size
        """
        retrying = Retrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential_jitter(initial=self._wait_initial, max=self._wait_max),
            before_sleep=lambda retry_state: logger.warning(
                f"{__name__}:embed - Retry {retry_state.attempt_number}/{self._max_attempts} "
                f"for {filename}"
            ),
            reraise=True,
        )
        try:
            vector = retrying(self._embeddings.embed_query, text)
        except Exception as e:
            raise EmbeddingError(f"Failed to generate embedding: {e}", filename=filename) from e

        if len(vector) != self._dimension:
            raise EmbeddingError(
                f"Embedding has {len(vector)} dimensions, expected {self._dimension}",
                filename=filename,
            )
        return list(vector)
