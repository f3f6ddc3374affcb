"""Redis connection — backs the rate limiter and the health probe.

Learn: The client is created in the app lifespan and shared by every
request. When Redis is down (or never initialized, e.g. in tests),
get_redis() raises and callers skip their Redis-backed behaviour.
"""

from typing import Optional

import redis.asyncio as aioredis

from sketchroom.config import settings

# Global Redis connection pool (initialized in lifespan)
_redis: Optional[aioredis.Redis] = None


async def init_redis() -> aioredis.Redis:
    """Initialize the Redis connection pool."""
    global _redis
    client = aioredis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_timeout=2,
    )
    # Verify connection
    await client.ping()
    _redis = client
    return _redis


async def close_redis() -> None:
    """Close the Redis connection pool."""
    global _redis
    if _redis:
        await _redis.aclose()
        _redis = None


def get_redis() -> aioredis.Redis:
    """Get the Redis connection (must be initialized first)."""
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis
