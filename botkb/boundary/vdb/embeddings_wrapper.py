"""
Gemini embeddings pinned to one vector size.

Chunk vectors and query vectors must live in the same space, so every
embed call made through this client asks Gemini for the configured
output dimensionality. Calls carry a per-request timeout.

Dependencies: langchain_google_genai, python-dotenv
System role: Embedding client shared by ingestion and retrieval
"""

import logging
from typing import List

from dotenv import load_dotenv
from langchain_google_genai import GoogleGenerativeAIEmbeddings

logger = logging.getLogger(__name__)
load_dotenv()


class FixedDimensionEmbeddings(GoogleGenerativeAIEmbeddings):
    """Gemini embeddings that always return vectors of one dimension."""

    _output_dimensionality: int = 768

    def __init__(
        self,
        model: str = "models/gemini-embedding-001",
        output_dimensionality: int = 768,
        request_timeout: float | None = None,
        **kwargs,
    ) -> None:
        """
        Args:
            model: Gemini embedding model ID
            output_dimensionality: Length of every returned vector
            request_timeout: Seconds before a single embed request is abandoned
            **kwargs: Passed through to GoogleGenerativeAIEmbeddings
        """
        if request_timeout is not None:
            kwargs.setdefault("request_options", {"timeout": request_timeout})
        super().__init__(model=model, **kwargs)
        self._output_dimensionality = output_dimensionality
        logger.info(
            f"{__name__}:__init__ - model={model} dimension={output_dimensionality} "
            f"timeout={request_timeout}"
        )

    @property
    def dimension(self) -> int:
        return self._output_dimensionality

    def embed_documents(
        self,
        texts: List[str],
        *,
        batch_size: int = 100,
        task_type: str | None = None,
        titles: List[str] | None = None,
        output_dimensionality: int | None = None,
    ) -> List[List[float]]:
        return super().embed_documents(
            texts,
            batch_size=batch_size,
            task_type=task_type,
            titles=titles,
            output_dimensionality=output_dimensionality or self._output_dimensionality,
        )

    def embed_query(
        self,
        text: str,
        task_type: str | None = None,
        title: str | None = None,
        output_dimensionality: int | None = None,
    ) -> List[float]:
        return super().embed_query(
            text,
            task_type=task_type,
            title=title,
            output_dimensionality=output_dimensionality or self._output_dimensionality,
        )
