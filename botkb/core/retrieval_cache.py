"""
Retrieval cache.

Memoizes similarity-search results per (bot, normalized query, top_k) in
Redis with a fixed TTL. Keys live under a per-bot prefix so every entry
of a bot can be dropped when its corpus changes. The cache is best-effort:
store failures are logged and never surface to callers.

Dependencies: redis (redis.asyncio), pydantic, hashlib
System role: Query result caching for RAG retrieval
"""

import hashlib
import logging
from typing import Awaitable, Callable

from pydantic import TypeAdapter, ValidationError as PydanticValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError

from botkb.boundary.vdb.vector_schemas import VectorSearchResult
from botkb.core.exceptions import CacheError
from botkb.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

_RESULTS = TypeAdapter(list[VectorSearchResult])

ComputeFn = Callable[[], Awaitable[list[VectorSearchResult]]]


def normalize_query(query: str) -> str:
    """Lowercase and collapse whitespace so trivially different queries share a key."""
    return " ".join(query.lower().split())


class RetrievalCache:
    """Redis-backed cache of similarity-search results."""

    def __init__(self, client: Redis, prefix: str = "query", ttl_seconds: int = 3600) -> None:
        """
        Args:
            client: asyncio Redis client (decode_responses=True)
            prefix: Namespace prefix for every key
            ttl_seconds: Lifetime of a cached entry
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._client = client
        self._prefix = prefix
        self._ttl_seconds = ttl_seconds

    def bot_prefix(self, bot_id: str) -> str:
        return f"{self._prefix}:{bot_id}:"

    def build_key(self, bot_id: str, query: str, top_k: int) -> str:
        """
        Build the cache key for a lookup.

        Returns:
            str: "{prefix}:{bot_id}:{sha256(normalized query)}:{top_k}"
        """
        digest = hashlib.sha256(normalize_query(query).encode("utf-8")).hexdigest()
        return f"{self.bot_prefix(bot_id)}{digest}:{top_k}"

    async def get_or_compute(
        self,
        bot_id: str,
        query: str,
        top_k: int,
        compute_fn: ComputeFn,
    ) -> list[VectorSearchResult]:
        """
        Return cached results, computing and storing them on a miss.

        A corrupt or undecodable entry is evicted and treated as a miss. Errors raised by
        compute_fn propagate; cache store errors do not.

        Args:
            bot_id: Owning bot
            query: Raw query text
            top_k: Requested result count
            compute_fn: Coroutine factory running the underlying search

        Returns:
            list[VectorSearchResult]: Ordered search results
        """
        key = self.build_key(bot_id, query, top_k)

        cached = await self._safe_get(key)
        if cached is not None:
            try:
                results = _RESULTS.validate_json(cached)
                logger.debug(f"{__name__}:get_or_compute - Cache hit bot_id={bot_id}")
                return results
            except PydanticValidationError as e:
                logger.warning(
                    f"{__name__}:get_or_compute - Evicting corrupt cache entry bot_id={bot_id}: "
                    f"{e.error_count()} validation errors"
                )
                await self._safe_delete(key)

        logger.debug(f"{__name__}:get_or_compute - Cache miss bot_id={bot_id}")
        results = await compute_fn()
        await self._safe_set(key, _RESULTS.dump_json(results).decode("utf-8"))
        return results

    async def invalidate(self, bot_id: str) -> int:
        """
        Delete every cached entry of a bot.

        Safe to run while other requests write entries for the same bot; a
        write that lands mid-scan can survive until its TTL expires.

        Returns:
            int: Number of keys deleted (0 when the store is unavailable)
        """
        try:
            deleted = await self._delete_prefix(self.bot_prefix(bot_id))
        except CacheError as e:
            log_exception_with_context(
                logger,
                f"{__name__}:invalidate - Cache invalidation failed",
                e,
                level=logging.WARNING,
                bot_id=bot_id,
            )
            return 0
        logger.info(f"{__name__}:invalidate - Removed {deleted} cached queries for bot_id={bot_id}")
        return deleted

    async def _delete_prefix(self, prefix: str, batch: int = 500) -> int:
        deleted = 0
        keys: list[str] = []
        try:
            async for key in self._client.scan_iter(match=f"{prefix}*", count=batch):
                keys.append(key)
                if len(keys) >= batch:
                    deleted += await self._client.delete(*keys)
                    keys = []
            if keys:
                deleted += await self._client.delete(*keys)
        except (RedisError, OSError) as e:
            raise CacheError(f"Failed to delete keys under {prefix}: {e}") from e
        return deleted

    async def _safe_get(self, key: str) -> str | None:
        try:
            return await self._get(key)
        except UnicodeDecodeError:
            # Value is not valid UTF-8 and cannot be decoded by the client
            logger.warning(f"{__name__}:_safe_get - Evicting undecodable cache entry")
            await self._safe_delete(key)
            return None
        except CacheError as e:
            logger.warning(f"{__name__}:_safe_get - {e.message}")
            return None

    async def _safe_set(self, key: str, value: str) -> None:
        try:
            await self._set(key, value)
        except CacheError as e:
            logger.warning(f"{__name__}:_safe_set - {e.message}")

    async def _safe_delete(self, key: str) -> None:
        try:
            await self._client.delete(key)
        except (RedisError, OSError) as e:
            logger.warning(f"{__name__}:_safe_delete - Failed to delete cache key: {e}")

    async def _get(self, key: str) -> str | None:
        try:
            return await self._client.get(key)
        except (RedisError, OSError) as e:
            raise CacheError(f"Cache read failed: {e}") from e

    async def _set(self, key: str, value: str) -> None:
        try:
            await self._client.set(key, value, ex=self._ttl_seconds)
        except (RedisError, OSError) as e:
            raise CacheError(f"Cache write failed: {e}") from e
