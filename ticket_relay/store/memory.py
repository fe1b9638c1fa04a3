"""
In-memory key-value store.

Reproduces the atomic semantics of the Redis store inside one process so the
queue, lease and ledger can be exercised without a server. Each primitive
runs under a single asyncio lock, and expiry is evaluated lazily against an
injectable clock.
"""

import asyncio
import time
from collections import deque
from collections.abc import Callable
from typing import Any

from ticket_relay.store.base import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Process-local store with TTL support. Not shared between processes."""

    def __init__(self, clock: Callable[[], float] | None = None):
        """
        Initialize the store.

        Args:
            clock: Returns the current time in seconds. Defaults to time.monotonic.
        """
        self._clock = clock or time.monotonic
        self._values: dict[str, tuple[Any, float | None]] = {}
        self._lists: dict[str, deque[Any]] = {}
        self._lock = asyncio.Lock()

    def _expired(self, key: str) -> bool:
        entry = self._values.get(key)
        if entry is None:
            return True
        _, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._values[key]
            return True
        return False

    async def rpush(self, key: str, value: Any) -> int:
        async with self._lock:
            items = self._lists.setdefault(key, deque())
            items.append(value)
            return len(items)

    async def lpop(self, key: str) -> Any | None:
        async with self._lock:
            items = self._lists.get(key)
            if not items:
                return None
            value = items.popleft()
            if not items:
                del self._lists[key]
            return value

    async def llen(self, key: str) -> int:
        async with self._lock:
            return len(self._lists.get(key, ()))

    async def get(self, key: str) -> Any | None:
        async with self._lock:
            if self._expired(key):
                return None
            return self._values[key][0]

    async def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        async with self._lock:
            if not self._expired(key):
                return False
            self._values[key] = (value, self._clock() + ttl_seconds)
            return True

    async def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None:
        async with self._lock:
            self._values[key] = (value, self._clock() + ttl_seconds)

    async def delete(self, key: str) -> None:
        async with self._lock:
            self._values.pop(key, None)
            self._lists.pop(key, None)
