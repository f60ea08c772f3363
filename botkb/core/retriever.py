"""
Cached, bot-scoped retrieval.

Runs the vector index similarity search through the retrieval cache.
Every search is filtered on bot_id, so one bot never sees another bot's
chunks.

Dependencies: fastapi.concurrency, botkb.boundary.vdb, botkb.core.retrieval_cache
System role: RAG retrieval business logic
"""

import logging

from fastapi.concurrency import run_in_threadpool

from botkb.boundary.vdb.vector_schemas import VectorIndex, VectorSearchResult
from botkb.core.exceptions import RetrievalError, VectorStoreError
from botkb.core.retrieval_cache import RetrievalCache

logger = logging.getLogger(__name__)


class Retriever:
    """Top-K chunk retrieval for a single bot."""

    def __init__(self, vector_store: VectorIndex, cache: RetrievalCache, default_top_k: int = 3) -> None:
        self._vector_store = vector_store
        self._cache = cache
        self._default_top_k = default_top_k

    async def retrieve(
        self,
        bot_id: str,
        query: str,
        top_k: int | None = None,
    ) -> list[VectorSearchResult]:
        """
        Retrieve the most relevant chunks of a bot.

        Args:
            bot_id: Bot whose knowledge base is searched
            query: Question text
            top_k: Result count (configured default when None)

        Returns:
            list[VectorSearchResult]: Up to top_k results ordered by relevance

        Raises:
            RetrievalError: When the vector index search fails
        """
        k = top_k or self._default_top_k

        async def search() -> list[VectorSearchResult]:
            try:
                results = await run_in_threadpool(self._vector_store.similarity_search, query, k, bot_id)
            except VectorStoreError as e:
                raise RetrievalError(f"Vector search failed: {e.message}", bot_id=bot_id) from e
            # Guard against a store that ignores the metadata filter
            return [r for r in results if r.metadata.bot_id == bot_id][:k]

        return await self._cache.get_or_compute(bot_id, query, k, search)

    async def invalidate(self, bot_id: str) -> int:
        return await self._cache.invalidate(bot_id)
