"""
Redis client for the stock-themes backend.

Provides the async Redis client used to publish change events. Publishing
is disabled when REDIS_URL is empty.
"""

import redis.asyncio as aioredis
from typing import Optional
from app.core.config import settings

# Global Redis client instance
_redis_client: Optional[aioredis.Redis] = None


def redis_enabled() -> bool:
    """Whether a Redis URL is configured."""
    return bool(settings.REDIS_URL)


async def get_redis() -> aioredis.Redis:
    """
    Get or create the Redis client instance.

    Returns:
        Redis client instance (async)
    """
    global _redis_client

    if _redis_client is None:
        _redis_client = aioredis.from_url(
            settings.REDIS_URL,
            encoding="utf-8",
            decode_responses=True,
        )

    return _redis_client


async def close_redis():
    """Close the Redis connection (for cleanup)."""
    global _redis_client

    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None
