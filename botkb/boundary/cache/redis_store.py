"""
Redis client factory.

Dependencies: redis (redis.asyncio), botkb.configs
System role: Shared key/value store with TTL and SCAN for the retrieval cache
"""

import logging
from functools import lru_cache

from redis.asyncio import Redis

from botkb.configs import get_settings

logger = logging.getLogger(__name__)


@lru_cache
def get_redis_client() -> Redis:
    """
    Get the process-wide asyncio Redis client.

    The client manages its own connection pool and is safe to share
    between concurrent requests. Values are decoded to str.

    Returns:
        Redis: Configured asyncio Redis client
    """
    settings = get_settings().cache
    logger.info(
        f"{__name__}:get_redis_client - Connecting to redis://{settings.redis_host}:"
        f"{settings.redis_port}/{settings.redis_db}"
    )
    return Redis.from_url(
        settings.redis_url,
        socket_timeout=settings.socket_timeout,
        socket_connect_timeout=settings.socket_timeout,
        decode_responses=True,
    )
