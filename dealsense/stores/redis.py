"""Redis store for caching.

Handles:
- Generic get/set with TTL
- Trust score cache

TTL policies:
- Trust scores: 1 day (keyed by observation date, so age decay still
  applies when the date rolls over)
"""

import logging
from datetime import date

import redis.asyncio as redis

from dealsense.settings import get_settings

# TTL constants (in seconds)
TTL_TRUST_SCORE = 86400  # 1 day

# Key prefixes
PREFIX_TRUST = "trust:"

# Redis client (initialized on startup)
_redis: redis.Redis | None = None
logger = logging.getLogger("uvicorn.error")


async def init_redis() -> None:
    """Initialize Redis connection."""
    global _redis
    settings = get_settings()
    client = redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
    )
    # Validate connectivity early (especially for `rediss://` in production).
    await client.ping()
    _redis = client
    logger.info("Redis connected")


async def close_redis() -> None:
    """Close Redis connection."""
    global _redis
    if _redis:
        await _redis.aclose()
        _redis = None


def is_redis_ready() -> bool:
    """Check whether init_redis() has run."""
    return _redis is not None


def _get_redis() -> redis.Redis:
    """Get Redis client instance."""
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis


# ============================================================
# Generic cache operations
# ============================================================


async def cache_get(key: str) -> str | None:
    """Get value from cache.

    Args:
        key: Cache key.

    Returns:
        Cached value or None if not found.
    """
    return await _get_redis().get(key)


async def cache_set(key: str, value: str, ttl: int) -> None:
    """Set value in cache with TTL.

    Args:
        key: Cache key.
        value: Value to cache.
        ttl: Time-to-live in seconds.
    """
    await _get_redis().setex(key, ttl, value)


# ============================================================
# Trust score cache
# ============================================================


def trust_cache_key(deal_id: str, observed_on: date) -> str:
    """Cache key for a deal's trust score on a given observation date."""
    return f"{PREFIX_TRUST}{deal_id}:{observed_on.isoformat()}"


async def get_trust_score_cache(deal_id: str, observed_on: date) -> float | None:
    """Get cached trust score.

    Returns:
        Trust score or None if not cached.
    """
    value = await cache_get(trust_cache_key(deal_id, observed_on))
    if value is None:
        return None
    return float(value)


async def set_trust_score_cache(deal_id: str, observed_on: date, score: float) -> None:
    """Cache a trust score for the observation date."""
    await cache_set(trust_cache_key(deal_id, observed_on), str(score), TTL_TRUST_SCORE)
