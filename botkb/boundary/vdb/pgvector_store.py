"""
PGVector store for production retrieval.

Stores chunk vectors in PostgreSQL through langchain_postgres, with
bot_id metadata filtering for tenant isolation.

Dependencies: langchain_postgres, tenacity, botkb.boundary.vdb.embeddings_wrapper
System role: Production vector store (PostgreSQL + pgvector)
"""

import logging
from typing import Any

from langchain_core.embeddings import Embeddings
from langchain_postgres import PGVector
from tenacity import retry, stop_after_attempt, wait_exponential_jitter

from botkb.boundary.vdb.vector_schemas import VectorSearchResult, to_search_result
from botkb.core.exceptions import VectorStoreError

logger = logging.getLogger(__name__)


def timeout_connect_args(timeout: float) -> dict[str, Any]:
    """psycopg connect arguments bounding connection setup and every statement."""
    return {
        "connect_timeout": max(1, int(timeout)),
        "options": f"-c statement_timeout={int(timeout * 1000)}",
    }


class PGVectorStore:
    """
    PGVector-backed vector index.

    Chunks of every bot share one collection; searches are always filtered
    on bot_id.
    """

    def __init__(
        self,
        embeddings: Embeddings,
        connection: str,
        collection_name: str = "bot_chunks",
        query_timeout: float = 30.0,
    ) -> None:
        """
        Args:
            embeddings: Embeddings used to embed search queries
            connection: SQLAlchemy URL using the psycopg driver
            collection_name: PGVector collection name
            query_timeout: Seconds allowed for connecting and for each statement
        """
        self._collection_name = collection_name
        self._vector_store = PGVector(
            embeddings=embeddings,
            collection_name=collection_name,
            connection=connection,
            use_jsonb=True,
            engine_args={"connect_args": timeout_connect_args(query_timeout)},
        )
        logger.info(
            f"{__name__}:__init__ - PGVector collection={collection_name} timeout={query_timeout}s"
        )

    def add_embeddings(
        self,
        texts: list[str],
        embeddings: list[list[float]],
        metadatas: list[dict[str, Any]],
        ids: list[str],
    ) -> list[str]:
        """
        Add precomputed embeddings to the collection.

        Raises:
            VectorStoreError: When the insert fails
        """
        try:
            return self._vector_store.add_embeddings(
                texts=texts,
                embeddings=embeddings,
                metadatas=metadatas,
                ids=ids,
            )
        except Exception as e:
            raise VectorStoreError(f"Failed to add vectors: {e}", operation="add") from e

    def delete(self, ids: list[str]) -> None:
        if not ids:
            return
        try:
            self._vector_store.delete(ids=ids)
            logger.info(f"{__name__}:delete - Deleted {len(ids)} vectors")
        except Exception as e:
            raise VectorStoreError(f"Failed to delete vectors: {e}", operation="delete") from e

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential_jitter(initial=0.5, max=5),
        before_sleep=lambda retry_state: logger.warning(
            f"{__name__}:similarity_search - Retry {retry_state.attempt_number}/3"
        ),
        reraise=True,
    )
    def _search_with_retry(self, query: str, k: int, bot_id: str) -> list[tuple]:
        return self._vector_store.similarity_search_with_relevance_scores(
            query,
            k=k,
            filter={"bot_id": {"$eq": bot_id}},
        )

    def similarity_search(self, query: str, k: int, bot_id: str) -> list[VectorSearchResult]:
        """
        Search a single bot's chunks.

        Args:
            query: Search query text
            k: Number of results to return
            bot_id: Only chunks of this bot are eligible

        Returns:
            list[VectorSearchResult]: Results ordered by relevance

        Raises:
            VectorStoreError: After retries are exhausted
        """
        try:
            results = self._search_with_retry(query, k, bot_id)
        except Exception as e:
            raise VectorStoreError(f"Similarity search failed: {e}", operation="search") from e

        logger.info(
            f"{__name__}:similarity_search - Found {len(results)} results",
            extra={"bot_id": bot_id, "k": k},
        )
        return [to_search_result(doc, score) for doc, score in results]
