"""
Tests for the Redis retrieval cache.

Uses a dict-backed Redis double; failure cases use a client whose every
call raises a Redis connection error.

Dependencies: pytest, pytest-asyncio, redis
System role: Retrieval cache verification
"""

import hashlib
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from botkb.core.retrieval_cache import RetrievalCache, normalize_query


class UnavailableRedis:
    """Redis double whose every operation fails."""

    async def get(self, key):
        raise RedisConnectionError("connection refused")

    async def set(self, key, value, ex=None):
        raise RedisConnectionError("connection refused")

    async def delete(self, *keys):
        raise RedisConnectionError("connection refused")

    async def scan_iter(self, match=None, count=None):
        raise RedisConnectionError("connection refused")
        yield


class TestCacheKeys:
    """Test suite for key construction."""

    def test_normalize_query(self) -> None:
        assert normalize_query("  What ARE\tyour\n hours? ") == "what are your hours?"

    def test_key_format(self, retrieval_cache: RetrievalCache) -> None:
        digest = hashlib.sha256(b"opening hours").hexdigest()

        key = retrieval_cache.build_key("bot-1", "Opening   Hours", 3)

        assert key == f"query:bot-1:{digest}:3"

    def test_equivalent_queries_share_key(self, retrieval_cache) -> None:
        assert retrieval_cache.build_key("b", "Hello World", 3) == retrieval_cache.build_key("b", " hello  world ", 3)
        assert retrieval_cache.build_key("b", "hello", 3) != retrieval_cache.build_key("b", "hello", 5)
        assert retrieval_cache.build_key("a", "hello", 3) != retrieval_cache.build_key("b", "hello", 3)

    def test_rejects_non_positive_ttl(self, fake_redis) -> None:
        with pytest.raises(ValueError):
            RetrievalCache(fake_redis, ttl_seconds=0)


class TestGetOrCompute:
    """Test suite for cache reads and writes."""

    @pytest.mark.asyncio
    async def test_second_lookup_is_served_from_cache(
        self, retrieval_cache, fake_redis, result_factory
    ) -> None:
        # Arrange
        results = [result_factory("bot-1", "We open at 9am."), result_factory("bot-1", "Closed Sundays.")]
        compute = AsyncMock(return_value=results)

        # Act
        first = await retrieval_cache.get_or_compute("bot-1", "hours", 3, compute)
        second = await retrieval_cache.get_or_compute("bot-1", "  HOURS ", 3, compute)

        # Assert
        assert compute.await_count == 1
        assert first == results
        assert second == results
        key = retrieval_cache.build_key("bot-1", "hours", 3)
        assert fake_redis.ttls[key] == 3600

    @pytest.mark.asyncio
    async def test_corrupt_entry_is_recomputed(self, retrieval_cache, fake_redis, result_factory) -> None:
        key = retrieval_cache.build_key("bot-1", "hours", 3)
        fake_redis.store[key] = "{not valid json"
        results = [result_factory("bot-1", "We open at 9am.")]
        compute = AsyncMock(return_value=results)

        found = await retrieval_cache.get_or_compute("bot-1", "hours", 3, compute)

        assert found == results
        compute.assert_awaited_once()
        assert fake_redis.store[key] != "{not valid json"

    @pytest.mark.asyncio
    async def test_undecodable_entry_is_recomputed(self, retrieval_cache, fake_redis, result_factory) -> None:
        key = retrieval_cache.build_key("bot-1", "hello", 3)
        fake_redis.store[key] = b"\xff\xfe garbage"
        results = [result_factory("bot-1", "Hello from Acme.")]
        compute = AsyncMock(return_value=results)

        found = await retrieval_cache.get_or_compute("bot-1", "hello", 3, compute)

        assert found == results
        compute.assert_awaited_once()
        assert isinstance(fake_redis.store[key], str)
        assert await retrieval_cache.get_or_compute("bot-1", "hello", 3, compute) == results
        compute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_compute_error_is_not_cached(self, retrieval_cache, fake_redis) -> None:
        compute = AsyncMock(side_effect=RuntimeError("search failed"))

        with pytest.raises(RuntimeError):
            await retrieval_cache.get_or_compute("bot-1", "hours", 3, compute)

        assert fake_redis.store == {}

    @pytest.mark.asyncio
    async def test_empty_results_are_cached(self, retrieval_cache) -> None:
        compute = AsyncMock(return_value=[])

        await retrieval_cache.get_or_compute("bot-1", "unknown topic", 3, compute)
        found = await retrieval_cache.get_or_compute("bot-1", "unknown topic", 3, compute)

        assert found == []
        assert compute.await_count == 1

    @pytest.mark.asyncio
    async def test_unavailable_store_falls_through(self, result_factory) -> None:
        cache = RetrievalCache(UnavailableRedis())
        results = [result_factory("bot-1", "We open at 9am.")]
        compute = AsyncMock(return_value=results)

        first = await cache.get_or_compute("bot-1", "hours", 3, compute)
        second = await cache.get_or_compute("bot-1", "hours", 3, compute)

        assert first == results
        assert second == results
        assert compute.await_count == 2


class TestInvalidate:
    """Test suite for per-bot invalidation."""

    @pytest.mark.asyncio
    async def test_invalidate_forces_recompute(self, retrieval_cache, result_factory) -> None:
        compute = AsyncMock(return_value=[result_factory("bot-1", "Old answer.")])
        await retrieval_cache.get_or_compute("bot-1", "hours", 3, compute)

        await retrieval_cache.invalidate("bot-1")
        await retrieval_cache.get_or_compute("bot-1", "hours", 3, compute)

        assert compute.await_count == 2

    @pytest.mark.asyncio
    async def test_invalidate_only_touches_one_bot(self, retrieval_cache, fake_redis) -> None:
        compute = AsyncMock(return_value=[])
        await retrieval_cache.get_or_compute("bot-1", "hours", 3, compute)
        await retrieval_cache.get_or_compute("bot-1", "prices", 5, compute)
        await retrieval_cache.get_or_compute("bot-10", "hours", 3, compute)

        deleted = await retrieval_cache.invalidate("bot-1")

        assert deleted == 2
        assert list(fake_redis.store) == [retrieval_cache.build_key("bot-10", "hours", 3)]

    @pytest.mark.asyncio
    async def test_invalidate_swallows_store_errors(self) -> None:
        cache = RetrievalCache(UnavailableRedis())

        assert await cache.invalidate("bot-1") == 0
