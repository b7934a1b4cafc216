"""
Local durable cache.

String-keyed, string-valued storage owned by a single visitor: the guest
cart session token and the last saved vehicle live here. In the browser
this was localStorage; server-side each visitor gets a namespace in
Upstash Redis.
"""
from typing import Protocol

from storefront.db import TTL, RedisKeys, get_redis
from storefront.logging import get_logger, sanitize_id_for_logging

logger = get_logger(__name__)

CART_SESSION_KEY = "cart_session_id"
SELECTED_VEHICLE_KEY = "selected_vehicle"


class LocalCache(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def remove(self, key: str) -> None: ...


class MemoryLocalCache:
    """Process-local cache; also used to carry header values through a request."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> str | None:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def snapshot(self) -> dict[str, str]:
        return dict(self._data)


class RedisLocalCache:
    """Visitor-scoped cache stored in Upstash Redis."""

    def __init__(self, visitor_id: str, redis=None) -> None:
        if not visitor_id:
            raise ValueError("visitor_id must be a non-empty string")
        self.visitor_id = visitor_id
        self._redis = redis  # Lazy initialization

    @property
    def redis(self):
        if self._redis is None:
            self._redis = get_redis()
        return self._redis

    def _key(self, key: str) -> str:
        return RedisKeys.local_key(self.visitor_id, key)

    async def get(self, key: str) -> str | None:
        value = await self.redis.get(self._key(key))
        return value if value is None or isinstance(value, str) else str(value)

    async def set(self, key: str, value: str) -> None:
        await self.redis.set(self._key(key), value, ex=TTL.LOCAL_CACHE)

    async def remove(self, key: str) -> None:
        await self.redis.delete(self._key(key))
        logger.debug(
            "Removed %s for visitor %s", key, sanitize_id_for_logging(self.visitor_id)
        )
