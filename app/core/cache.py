"""
Redis cache module for Leave Request Service.

Caches the admin leave summary (counts per status). Every create, update
and delete invalidates it. Caching is best-effort: Redis errors are
logged and treated as a cache miss, never surfaced to callers.
"""

import json
from typing import Any, Optional

import redis
from redis import Redis

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)


class CacheKeys:
    """Centralized cache key definitions for consistency."""

    LEAVE_SUMMARY = "leave:summary:status"


class RedisClient:
    """Singleton Redis client manager."""

    _instance: Optional[Redis] = None

    @classmethod
    def get_client(cls) -> Redis:
        """Get or create Redis client instance."""
        if cls._instance is None:
            cls._instance = redis.Redis(
                host=settings.REDIS_HOST,
                port=settings.REDIS_PORT,
                password=settings.REDIS_PASSWORD if settings.REDIS_PASSWORD else None,
                db=settings.REDIS_DB,
                decode_responses=True,
                socket_connect_timeout=2,
                socket_timeout=2,
            )
            logger.info(
                f"Redis client connected to {settings.REDIS_HOST}:{settings.REDIS_PORT}"
            )
        return cls._instance

    @classmethod
    def close(cls):
        """Close Redis connection."""
        if cls._instance:
            cls._instance.close()
            cls._instance = None
            logger.info("Redis client closed")

    @classmethod
    def ping(cls) -> bool:
        """Check if Redis is reachable."""
        try:
            client = cls.get_client()
            return client.ping()
        except redis.RedisError as e:
            logger.error(f"Redis ping failed: {e}")
            return False


def get_from_cache(key: str) -> Optional[Any]:
    """
    Retrieve data from Redis cache.

    Args:
        key: Cache key

    Returns:
        Cached data or None if disabled/not found/error
    """
    if not settings.CACHE_ENABLED:
        return None
    try:
        data = RedisClient.get_client().get(key)
        if data:
            return json.loads(data)
        return None
    except json.JSONDecodeError as e:
        logger.error(f"Cache JSON decode error for key {key}: {e}")
        return None
    except redis.RedisError as e:
        logger.error(f"Cache get error for key {key}: {e}")
        return None


def set_to_cache(key: str, value: Any, ttl: int | None = None) -> bool:
    """
    Store data in Redis cache with TTL.

    Args:
        key: Cache key
        value: Data to cache (will be JSON serialized)
        ttl: Time-to-live in seconds, defaults to CACHE_TTL

    Returns:
        True if successful, False otherwise
    """
    if not settings.CACHE_ENABLED:
        return False
    try:
        serialized = json.dumps(value)
        RedisClient.get_client().setex(key, ttl or settings.CACHE_TTL, serialized)
        return True
    except redis.RedisError as e:
        logger.error(f"Cache set error for key {key}: {e}")
        return False


def delete_from_cache(key: str) -> bool:
    """
    Delete a specific key from cache.

    Args:
        key: Cache key to delete

    Returns:
        True if successful, False otherwise
    """
    if not settings.CACHE_ENABLED:
        return False
    try:
        RedisClient.get_client().delete(key)
        return True
    except redis.RedisError as e:
        logger.error(f"Cache delete error for key {key}: {e}")
        return False


# Leave Summary Cache Functions


def get_leave_summary() -> Optional[dict]:
    return get_from_cache(CacheKeys.LEAVE_SUMMARY)


def set_leave_summary(summary: dict) -> bool:
    return set_to_cache(CacheKeys.LEAVE_SUMMARY, summary)


def invalidate_leave_summary() -> bool:
    return delete_from_cache(CacheKeys.LEAVE_SUMMARY)
