"""
Minimal key-value store interface.

Every coordination primitive used by the queue, lease and ledger is a single
atomic call on this interface. Implementations must not require multi-key
transactions.
"""

from abc import ABC, abstractmethod
from typing import Any


class KeyValueStore(ABC):
    """Async key-value store exposing the atomic primitives the queue relies on."""

    @abstractmethod
    async def rpush(self, key: str, value: Any) -> int:
        """Append a value to the tail of a list. Returns the new length."""

    @abstractmethod
    async def lpop(self, key: str) -> Any | None:
        """Remove and return the head of a list, or None if it is empty."""

    @abstractmethod
    async def llen(self, key: str) -> int:
        """Length of a list (0 if absent)."""

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Get a value, or None if absent or expired."""

    @abstractmethod
    async def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        """
        Set a value with expiry only if the key does not exist.

        Returns:
            True if the value was written.
        """

    @abstractmethod
    async def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None:
        """Unconditionally set a value with expiry."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete a key of any type. Deleting an absent key is not an error."""

    async def ping(self) -> bool:
        """Check connectivity."""
        return True

    async def close(self) -> None:
        """Release client resources."""
        return None
