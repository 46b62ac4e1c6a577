"""
Predicsure AI — Shared Redis client and JSON cache helpers.

The Redis client is opened by the application lifespan.  When it is not
available (tests, scripts, or a Redis outage) the helpers fall back to a
per-process TTL dictionary so callers never need to branch.
"""

from __future__ import annotations

import json
import time
from typing import Any, Optional

import structlog

from app.config import get_settings

logger = structlog.get_logger("predicsure.cache")

_redis_client = None

# key -> (expires_at_monotonic, value)
_local_cache: dict[str, tuple[float, Any]] = {}


async def _connect_redis() -> None:
    global _redis_client
    import redis.asyncio as aioredis

    settings = get_settings()
    client = aioredis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
        socket_connect_timeout=5,
    )
    await client.ping()
    _redis_client = client
    logger.info("redis_connected", url=settings.REDIS_URL)


async def _close_redis() -> None:
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None
        logger.info("redis_closed")


def get_redis():
    """Return the shared Redis client, or ``None`` before startup."""
    return _redis_client


async def cache_get(key: str) -> Optional[Any]:
    redis = get_redis()
    if redis is not None:
        try:
            raw = await redis.get(key)
        except Exception as exc:
            logger.warning("cache_get_failed", key=key, error=str(exc))
        else:
            return json.loads(raw) if raw is not None else None

    entry = _local_cache.get(key)
    if entry is None:
        return None
    expires_at, value = entry
    if time.monotonic() >= expires_at:
        _local_cache.pop(key, None)
        return None
    return value


async def cache_set(key: str, value: Any, ttl_seconds: int) -> None:
    redis = get_redis()
    if redis is not None:
        try:
            await redis.set(key, json.dumps(value, default=str), ex=ttl_seconds)
            return
        except Exception as exc:
            logger.warning("cache_set_failed", key=key, error=str(exc))

    now = time.monotonic()
    _prune_expired(now)
    _local_cache[key] = (now + ttl_seconds, value)


def _prune_expired(now: float) -> None:
    expired = [k for k, (expires_at, _) in _local_cache.items() if now >= expires_at]
    for k in expired:
        del _local_cache[k]


def clear_local_cache() -> None:
    _local_cache.clear()
