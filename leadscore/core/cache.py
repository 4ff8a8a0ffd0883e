import json
import logging
from typing import Any, Optional

from redis.asyncio import Redis

logger = logging.getLogger(__name__)


class CacheService:
    """Best-effort async Redis wrapper shared by every worker process.

    Without a client (Redis down at startup) reads miss and writes are
    dropped.  Redis errors at call time are logged and treated the same
    way, so a cache outage only ever costs a database round-trip.
    """

    def __init__(self, redis_client: Optional[Redis] = None) -> None:
        self._redis: Optional[Redis] = redis_client

    @property
    def is_available(self) -> bool:
        return self._redis is not None

    async def _call(self, command: str, key: str, *args: Any) -> Any:
        if self._redis is None:
            return None
        try:
            return await getattr(self._redis, command)(key, *args)
        except Exception:
            logger.warning("Redis %s failed for key %s", command.upper(), key)
            return None

    async def get(self, key: str) -> Optional[str]:
        return await self._call("get", key)

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        """Store *value*, expiring after *ttl* seconds when given."""
        if ttl:
            await self._call("setex", key, ttl, value)
        else:
            await self._call("set", key, value)

    async def delete(self, key: str) -> None:
        await self._call("delete", key)

    async def get_json(self, key: str) -> Optional[Any]:
        """Decode a JSON value; undecodable payloads read as a miss."""
        raw = await self.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            logger.warning("Invalid JSON in cache key %s", key)
            return None

    async def set_json(self, key: str, data: Any, ttl: Optional[int] = None) -> None:
        try:
            payload = json.dumps(data, default=str)
        except (TypeError, ValueError):
            logger.warning("Failed to serialise data for cache key %s", key)
            return
        await self.set(key, payload, ttl=ttl)

    async def close(self) -> None:
        """Release the connection pool; later calls become no-ops."""
        if self._redis is None:
            return
        try:
            await self._redis.aclose()
        except Exception:
            logger.warning("Redis close failed")
        finally:
            self._redis = None


async def create_redis_client(url: str) -> Optional[Redis]:
    """Connect to Redis and verify the connection, or return ``None``.

    A ``None`` result means the caller runs with in-process caching only.
    """
    try:
        client = Redis.from_url(url, decode_responses=True)
        await client.ping()
        return client
    except Exception:
        logger.warning("Redis unavailable, rule snapshot cache is in-memory only")
        return None
