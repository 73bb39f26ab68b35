import logging

from redis.asyncio import Redis, RedisError

from task_tracker.core.config import Settings
from task_tracker.exceptions import CacheError

logger = logging.getLogger(__name__)


def create_redis(settings: Settings) -> Redis:
    """Build the process-wide Redis client. Does not connect yet."""
    return Redis.from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=settings.redis_pool_size,
        socket_connect_timeout=5,
        socket_timeout=5,
        socket_keepalive=True,
        health_check_interval=30,
    )


class TaskCountCache:
    """
    Thin adapter over Redis for the task counter.

    Keys are used verbatim and written without expiry. increment/decrement
    map to INCR/DECR, so concurrent adjustments are atomic on the server.

    A RedisError is always raised as CacheError: callers must be able to
    tell "the key is gone" (get returns None) apart from "Redis is down".
    """

    def __init__(self, redis: Redis):
        self._redis = redis

    async def get(self, key: str) -> str | None:
        try:
            return await self._redis.get(key)
        except RedisError as e:
            logger.error(f"Redis GET error for {key}: {e}")
            raise CacheError(f"GET {key} failed") from e

    async def set(self, key: str, value: int | str) -> None:
        try:
            await self._redis.set(key, str(value))
        except RedisError as e:
            logger.error(f"Redis SET error for {key}: {e}")
            raise CacheError(f"SET {key} failed") from e

    async def increment(self, key: str) -> int:
        try:
            return await self._redis.incr(key)
        except RedisError as e:
            logger.error(f"Redis INCR error for {key}: {e}")
            raise CacheError(f"INCR {key} failed") from e

    async def decrement(self, key: str) -> int:
        try:
            return await self._redis.decr(key)
        except RedisError as e:
            logger.error(f"Redis DECR error for {key}: {e}")
            raise CacheError(f"DECR {key} failed") from e

    async def ping(self) -> None:
        try:
            await self._redis.ping()
        except RedisError as e:
            logger.error(f"Redis PING error: {e}")
            raise CacheError("PING failed") from e

    async def close(self):
        """Graceful shutdown of the Redis connection pool."""
        try:
            await self._redis.aclose()
            logger.info("Redis connection closed")
        except RedisError as e:
            logger.error(f"Error closing Redis: {e}")
