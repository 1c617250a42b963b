"""
Redis client for the history response cache.

Chart payloads from ``/api/history`` are cached per plant and days window
under ``history:{plant_id}:{days}``. Every cache operation is best-effort:
connection failures are logged but never propagated, and an empty Redis URL
disables caching entirely.

CHANGELOG:
- 2026-10-19: Initial creation
"""

import json
import logging
from typing import Any

import redis.asyncio as redis

logger = logging.getLogger(__name__)


def history_cache_key(plant_id: str, days: int) -> str:
    """Cache key for one plant's chart payload over a days window."""
    return f"history:{plant_id}:{days}"


async def get_redis(redis_url: str) -> redis.Redis | None:
    """Create an async Redis client, or None when caching is disabled.

    Args:
        redis_url: Redis connection URL; empty string disables caching.

    Returns:
        redis.Redis | None: Async Redis client.
    """
    if not redis_url:
        return None
    return redis.from_url(redis_url)


async def get_cached(redis_url: str, key: str) -> Any | None:
    """Return the decoded cached value for ``key``, or None on miss/failure."""
    try:
        client = await get_redis(redis_url)
        if client is None:
            return None
        try:
            cached = await client.get(key)
        finally:
            await client.aclose()
        return None if cached is None else json.loads(cached)
    except Exception:
        logger.warning("Redis read failed for key %s", key, exc_info=True)
        return None


async def set_cached(redis_url: str, key: str, value: Any, ttl_s: int) -> None:
    """Store ``value`` as JSON under ``key`` for ``ttl_s`` seconds.

    A TTL of 0 skips the write.
    """
    if ttl_s <= 0:
        return
    try:
        client = await get_redis(redis_url)
        if client is None:
            return
        try:
            await client.set(key, json.dumps(value), ex=ttl_s)
        finally:
            await client.aclose()
    except Exception:
        logger.warning("Redis write failed for key %s", key, exc_info=True)


async def invalidate_history_cache(redis_url: str, plant_id: str) -> None:
    """Delete every cached history payload for a plant.

    Args:
        redis_url: Redis connection URL; empty string is a no-op.
        plant_id: The plant whose cached charts should be cleared.
    """
    try:
        client = await get_redis(redis_url)
        if client is None:
            return
        try:
            keys = [key async for key in client.scan_iter(match=f"history:{plant_id}:*")]
            if keys:
                await client.delete(*keys)
        finally:
            await client.aclose()
    except Exception:
        logger.warning(
            "Failed to invalidate history cache for plant %s",
            plant_id,
            exc_info=True,
        )
