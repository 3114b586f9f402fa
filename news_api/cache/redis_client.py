"""
Redis client - advisory locks for bulk jobs (seed, reindex).
Challenge: Connection pooling, fail gracefully when Redis is down.
Design: Single client instance, module-level helpers; tests swap the client.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from redis.asyncio import Redis

from news_api.config import get_settings
from news_api.core.exceptions import JobAlreadyRunningError

logger = logging.getLogger(__name__)

settings = get_settings()

LOCK_PREFIX = "news:lock:"

# Shared async Redis client (connection pool managed by redis-py)
_redis: Redis | None = None


async def get_redis() -> Redis:
    """Get Redis connection."""
    global _redis
    if _redis is None:
        _redis = Redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=2,
        )
    return _redis


async def acquire_lock(name: str, token: str, ttl_seconds: int) -> bool:
    """
    SET NX EX on the job key. False only when another holder has it;
    Redis errors count as acquired (graceful degradation, job runs unlocked).
    """
    try:
        client = await get_redis()
        return bool(await client.set(LOCK_PREFIX + name, token, nx=True, ex=ttl_seconds))
    except Exception as e:
        logger.warning("acquire_lock(%s): Redis unavailable, running without lock: %s", name, e)
        return True


async def release_lock(name: str, token: str) -> bool:
    """Delete the key only if we still own it."""
    try:
        client = await get_redis()
        if await client.get(LOCK_PREFIX + name) == token:
            await client.delete(LOCK_PREFIX + name)
            return True
        return False
    except Exception as e:
        logger.warning("release_lock(%s) failed: %s", name, e)
        return False


@asynccontextmanager
async def job_lock(name: str, ttl_seconds: int | None = None) -> AsyncIterator[None]:
    """Hold the advisory lock for one bulk job. Raises JobAlreadyRunningError if held elsewhere."""
    token = uuid.uuid4().hex
    ttl = ttl_seconds or settings.job_lock_ttl_seconds
    if not await acquire_lock(name, token, ttl):
        raise JobAlreadyRunningError(name)
    try:
        yield
    finally:
        await release_lock(name, token)


async def close_redis() -> None:
    """Close the shared client. Next get_redis() builds a new one (bound to the running loop)."""
    global _redis
    if _redis is not None:
        client, _redis = _redis, None
        await client.aclose()
