"""
Unit tests for the in-memory key-value store.
"""

from ticket_relay.store.memory import InMemoryKeyValueStore


class TestInMemoryKeyValueStore:
    """Tests for InMemoryKeyValueStore."""

    async def test_list_operations(self, store: InMemoryKeyValueStore):
        """Test rpush appends and lpop pops from the head."""
        assert await store.rpush("q", "a") == 1
        assert await store.rpush("q", "b") == 2

        assert await store.llen("q") == 2
        assert await store.lpop("q") == "a"
        assert await store.lpop("q") == "b"
        assert await store.lpop("q") is None
        assert await store.llen("q") == 0

    async def test_set_if_absent(self, store: InMemoryKeyValueStore, clock):
        """Test conditional set honours existing, unexpired keys."""
        assert await store.set_if_absent("k", "1", 10) is True
        assert await store.set_if_absent("k", "2", 10) is False
        assert await store.get("k") == "1"

        clock.advance(10)
        assert await store.get("k") is None
        assert await store.set_if_absent("k", "2", 10) is True

    async def test_set_with_expiry_overwrites(self, store: InMemoryKeyValueStore):
        """Test unconditional set replaces the value."""
        await store.set_with_expiry("k", "1", 10)
        await store.set_with_expiry("k", "2", 10)

        assert await store.get("k") == "2"

    async def test_delete(self, store: InMemoryKeyValueStore):
        """Test delete removes values and whole lists."""
        await store.set_with_expiry("k", "1", 10)
        await store.rpush("q", "a")

        await store.delete("k")
        await store.delete("q")
        await store.delete("missing")

        assert await store.get("k") is None
        assert await store.llen("q") == 0

    async def test_ping(self, store: InMemoryKeyValueStore):
        """Test the in-memory store is always reachable."""
        assert await store.ping() is True
