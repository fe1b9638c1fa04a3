"""
Redis-backed key-value store.
"""

import logging
from typing import Any

import redis.asyncio as redis
from redis.exceptions import RedisError

from ticket_relay.store.base import KeyValueStore

logger = logging.getLogger(__name__)


class RedisKeyValueStore(KeyValueStore):
    """
    Key-value store over a shared Redis instance.

    Maps each primitive onto one Redis command:
    - rpush / lpop / llen on the queue list
    - SET NX EX for leases
    - SET EX for completion markers
    - DEL for release and purge
    """

    def __init__(self, client: redis.Redis):
        """
        Initialize the store with a Redis client.

        Args:
            client: An asyncio Redis client.
        """
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisKeyValueStore":
        """Create a store from a redis:// URL with string responses."""
        return cls(redis.from_url(url, decode_responses=True))

    async def rpush(self, key: str, value: Any) -> int:
        return await self._client.rpush(key, value)

    async def lpop(self, key: str) -> Any | None:
        return await self._client.lpop(key)

    async def llen(self, key: str) -> int:
        return await self._client.llen(key)

    async def get(self, key: str) -> Any | None:
        return await self._client.get(key)

    async def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        # SET key value NX EX ttl returns None when the key already exists
        result = await self._client.set(key, value, nx=True, ex=ttl_seconds)
        return bool(result)

    async def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None:
        await self._client.set(key, value, ex=ttl_seconds)

    async def delete(self, key: str) -> None:
        await self._client.delete(key)

    async def ping(self) -> bool:
        try:
            return bool(await self._client.ping())
        except RedisError as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    async def close(self) -> None:
        await self._client.aclose()
