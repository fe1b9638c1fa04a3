"""
Unit tests for the lease manager and completion ledger.
"""

import asyncio

import pytest

from ticket_relay.queue.facade import RelayQueue
from ticket_relay.queue.lease import LeaseManager
from ticket_relay.queue.ledger import CompletionLedger
from ticket_relay.store.memory import InMemoryKeyValueStore


class TestLeaseManager:
    """Tests for LeaseManager."""

    @pytest.fixture
    def leases(self, store: InMemoryKeyValueStore) -> LeaseManager:
        """Create a lease manager over the in-memory store."""
        return LeaseManager(store, "test:relay")

    def test_key_layout(self, leases: LeaseManager):
        """Test lease keys follow <namespace>:lock:<job_id>."""
        assert leases.key_for("abc") == "test:relay:lock:abc"

    async def test_acquire_then_contend(self, leases: LeaseManager):
        """Test a held lease cannot be taken again."""
        assert await leases.acquire("abc", 120) is True
        assert await leases.acquire("abc", 120) is False

    async def test_acquire_after_expiry(self, leases: LeaseManager, clock):
        """Test an expired lease can be taken again."""
        assert await leases.acquire("abc", 120) is True

        clock.advance(119)
        assert await leases.acquire("abc", 120) is False

        clock.advance(1)
        assert await leases.acquire("abc", 120) is True

    async def test_release(self, leases: LeaseManager):
        """Test a released lease can be taken again."""
        await leases.acquire("abc", 120)
        await leases.release("abc")

        assert await leases.acquire("abc", 120) is True

    async def test_release_is_idempotent(self, leases: LeaseManager):
        """Test releasing an absent lease is not an error."""
        await leases.release("never-held")
        await leases.release("never-held")

    async def test_leases_are_per_identity(self, leases: LeaseManager):
        """Test different identities do not contend."""
        assert await leases.acquire("abc", 120) is True
        assert await leases.acquire("def", 120) is True

    async def test_concurrent_acquire_single_winner(self, leases: LeaseManager):
        """Test exactly one of two concurrent acquires succeeds."""
        results = await asyncio.gather(
            leases.acquire("abc", 120),
            leases.acquire("abc", 120),
        )

        assert sorted(results) == [False, True]

    async def test_many_concurrent_acquires_single_winner(self, leases: LeaseManager):
        """Test a burst of acquires still yields one holder."""
        results = await asyncio.gather(*(leases.acquire("abc", 120) for _ in range(25)))

        assert results.count(True) == 1

    @pytest.mark.parametrize("ttl", [0, -5])
    async def test_rejects_non_positive_ttl(self, leases: LeaseManager, ttl: int):
        """Test non-positive TTLs are rejected."""
        with pytest.raises(ValueError):
            await leases.acquire("abc", ttl)


class TestCompletionLedger:
    """Tests for CompletionLedger."""

    @pytest.fixture
    def ledger(self, store: InMemoryKeyValueStore) -> CompletionLedger:
        """Create a ledger over the in-memory store."""
        return CompletionLedger(store, "test:relay")

    def test_key_layout(self, ledger: CompletionLedger):
        """Test ledger keys follow <namespace>:done:<job_id>."""
        assert ledger.key_for("abc") == "test:relay:done:abc"

    async def test_mark_and_check(self, ledger: CompletionLedger):
        """Test a marked job reads as done."""
        assert await ledger.is_done("abc") is False

        await ledger.mark_done("abc", 3600)

        assert await ledger.is_done("abc") is True

    async def test_marker_expires(self, ledger: CompletionLedger, clock):
        """Test the dedup window ends after the TTL."""
        await ledger.mark_done("abc", 3600)

        clock.advance(3599)
        assert await ledger.is_done("abc") is True

        clock.advance(1)
        assert await ledger.is_done("abc") is False

    async def test_mark_refreshes_window(self, ledger: CompletionLedger, clock):
        """Test marking again restarts the TTL."""
        await ledger.mark_done("abc", 100)
        clock.advance(90)
        await ledger.mark_done("abc", 100)
        clock.advance(90)

        assert await ledger.is_done("abc") is True

    async def test_rejects_non_positive_ttl(self, ledger: CompletionLedger):
        """Test non-positive TTLs are rejected."""
        with pytest.raises(ValueError):
            await ledger.mark_done("abc", 0)


class TestRelayQueue:
    """Tests for the RelayQueue facade."""

    async def test_lock_sequence(self, relay: RelayQueue):
        """Test enqueue, dequeue, and the acquire/release sequence on one identity."""
        await relay.enqueue({"job_id": "abc", "ticket_id": 1})

        job = await relay.dequeue()
        assert job is not None
        assert job.model_dump() == {"job_id": "abc", "ticket_id": 1}

        assert await relay.acquire_lock("abc", 120) is True
        assert await relay.acquire_lock("abc", 120) is False
        await relay.release_lock("abc")
        assert await relay.acquire_lock("abc", 120) is True

    async def test_purge_queue(self, relay: RelayQueue):
        """Test purge_queue empties the list."""
        await relay.enqueue({"job_id": "abc"})
        await relay.purge_queue()

        assert await relay.dequeue() is None
        assert await relay.queue_depth() == 0

    async def test_lock_and_done_are_independent(self, relay: RelayQueue):
        """Test leases and completion markers use separate keys."""
        await relay.mark_done("abc", 60)

        assert await relay.acquire_lock("abc", 60) is True
        await relay.release_lock("abc")
        assert await relay.is_done("abc") is True
