"""
Key-value store module.
Contains the store interface and its Redis and in-memory implementations.
"""

from ticket_relay.store.base import KeyValueStore
from ticket_relay.store.connection import close_store, get_store, init_store
from ticket_relay.store.memory import InMemoryKeyValueStore
from ticket_relay.store.redis_store import RedisKeyValueStore

__all__ = [
    "KeyValueStore",
    "RedisKeyValueStore",
    "InMemoryKeyValueStore",
    "init_store",
    "get_store",
    "close_store",
]
