"""Redis store for the feed cache.

Handles:
- Connection lifecycle (one client per process, shared by all requests)
- Cache-aside primitives: GET, batched MGET, SETEX
- Key naming for comment counts and comment lists

TTL policy:
- Comment counts and comment lists: ~10 seconds (COMMENT_CACHE_TTL)

Redis transport errors never leave this module raw; they surface as CacheIOError.
The client decodes replies as UTF-8, so a stored value that is not valid UTF-8
fails inside the read itself; that surfaces as CacheDecodeError for the key.
"""

import logging
from collections.abc import Sequence

import redis.asyncio as redis
from redis.exceptions import RedisError

from timeline.errors import CacheDecodeError, CacheIOError
from timeline.settings import get_settings

# Key prefixes
PREFIX_COMMENTS = "comments."

# Redis client (initialized on startup)
_redis: redis.Redis | None = None
logger = logging.getLogger("uvicorn.error")


def comment_count_key(post_id: int) -> str:
    """Cache key holding the decimal comment count of a post."""
    return f"{PREFIX_COMMENTS}{post_id}.count"


def comment_list_key(post_id: int) -> str:
    """Cache key holding the serialized newest-first comment list of a post."""
    return f"{PREFIX_COMMENTS}{post_id}"


class RedisCache:
    """Cache client backed by a shared redis.asyncio connection pool."""

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    async def get(self, key: str) -> str | None:
        """Get value from cache.

        Args:
            key: Cache key.

        Returns:
            Cached value or None if not found (or expired).
        """
        try:
            return await self._client.get(key)
        except RedisError as e:
            raise CacheIOError(f"GET {key} failed: {e}") from e
        except UnicodeDecodeError as e:
            raise CacheDecodeError(key, "not valid UTF-8") from e

    async def get_multi(self, keys: Sequence[str]) -> dict[str, str]:
        """Get many values in one round trip.

        Args:
            keys: Cache keys.

        Returns:
            Mapping of the keys that are present to their values.
        """
        if not keys:
            return {}
        try:
            values = await self._client.mget(list(keys))
        except RedisError as e:
            raise CacheIOError(f"MGET of {len(keys)} keys failed: {e}") from e
        except UnicodeDecodeError as e:
            # The reply is decoded as a whole, so the offending key is unknown.
            raise CacheDecodeError(", ".join(keys), "MGET reply is not valid UTF-8") from e
        return {key: value for key, value in zip(keys, values) if value is not None}

    async def set(self, key: str, value: str, ttl: int) -> None:
        """Set value in cache with TTL.

        Args:
            key: Cache key.
            value: Value to cache.
            ttl: Time-to-live in seconds.
        """
        try:
            ok = await self._client.setex(key, ttl, value)
        except RedisError as e:
            raise CacheIOError(f"SETEX {key} failed: {e}") from e
        if not ok:
            raise CacheIOError(f"SETEX {key} was not acknowledged")


async def init_redis() -> None:
    """Initialize Redis connection."""
    global _redis
    settings = get_settings()
    _redis = redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
    )
    await _redis.ping()
    logger.info("Redis connected")


async def close_redis() -> None:
    """Close Redis connection."""
    global _redis
    if _redis:
        await _redis.aclose()
        _redis = None


def get_cache() -> RedisCache:
    """Get the process-wide cache client."""
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return RedisCache(_redis)
