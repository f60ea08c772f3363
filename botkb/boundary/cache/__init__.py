"""
Cache boundary layer.

Provides the asyncio Redis client backing the retrieval cache.

Dependencies: redis
System role: Cache store adapter
"""

from botkb.boundary.cache.redis_store import get_redis_client

__all__ = ["get_redis_client"]
