"""
Store connection management.
Handles creation and teardown of the process-wide key-value store client.
"""

import logging

from ticket_relay.config import get_settings
from ticket_relay.store.base import KeyValueStore
from ticket_relay.store.redis_store import RedisKeyValueStore

logger = logging.getLogger(__name__)

# Global store instance
_store: KeyValueStore | None = None


async def init_store(store: KeyValueStore | None = None) -> KeyValueStore:
    """
    Initialize the key-value store.
    Should be called on application startup.

    Args:
        store: Optional pre-built store (tests pass an in-memory one).

    Returns:
        KeyValueStore: The active store.
    """
    global _store
    if store is not None:
        _store = store
    elif _store is None:
        settings = get_settings()
        _store = RedisKeyValueStore.from_url(settings.redis_url)
    logger.info("Key-value store initialized", extra={"store": type(_store).__name__})
    return _store


async def close_store() -> None:
    """
    Close the store connection.
    Should be called on application shutdown.
    """
    global _store
    if _store is not None:
        await _store.close()
        _store = None
        logger.info("Key-value store closed")


def get_store() -> KeyValueStore:
    """
    Dependency for getting the active store.

    Returns:
        KeyValueStore: The active store.

    Raises:
        RuntimeError: If the store is not initialized.
    """
    if _store is None:
        raise RuntimeError("Store not initialized. Call init_store() first.")
    return _store
