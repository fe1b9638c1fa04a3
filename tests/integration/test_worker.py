"""
Integration tests for concurrent drains over one shared store.
"""

import asyncio

import pytest

from ticket_relay.config import Settings, get_settings
from ticket_relay.queue.facade import RelayQueue
from ticket_relay.store.memory import InMemoryKeyValueStore
from ticket_relay.types.job import Job
from ticket_relay.worker.driver import WorkerDriver
from ticket_relay.worker.main import Worker


class GatedProcessor:
    """Processor that blocks until released, to hold a lease open."""

    def __init__(self):
        self.started = asyncio.Event()
        self.release = asyncio.Event()
        self.seen: list[str] = []

    async def __call__(self, job: Job) -> None:
        self.seen.append(job.job_id)
        self.started.set()
        await self.release.wait()


class TestConcurrentDrains:
    """Tests for drains sharing a store, as separate workers would."""

    @pytest.fixture
    def second_relay(self, store: InMemoryKeyValueStore, test_settings: Settings) -> RelayQueue:
        """A second facade over the same store, as another process would hold."""
        return RelayQueue.from_settings(store, test_settings)

    async def test_duplicate_identity_processed_once(
        self,
        relay: RelayQueue,
        second_relay: RelayQueue,
        test_settings: Settings,
    ):
        """Test two slots with the same job_id are not processed concurrently."""
        await relay.enqueue({"job_id": "dup", "ticket_id": 1})
        await relay.enqueue({"job_id": "dup", "ticket_id": 1})

        gated = GatedProcessor()
        driver_a = WorkerDriver(relay, gated, settings=test_settings, worker_id="a")
        driver_b = WorkerDriver(second_relay, gated, settings=test_settings, worker_id="b")

        task_a = asyncio.create_task(driver_a.drain(1))
        await gated.started.wait()

        result_b = await driver_b.drain(1)

        gated.release.set()
        result_a = await task_a

        assert result_a.processed == ["dup"]
        assert result_b.processed == []
        assert result_b.skipped == ["dup"]
        assert gated.seen == ["dup"]
        assert await relay.queue_depth() == 0

    async def test_concurrent_drains_take_distinct_entries(
        self,
        relay: RelayQueue,
        second_relay: RelayQueue,
        test_settings: Settings,
    ):
        """Test parallel drains never pop the same slot."""
        for i in range(10):
            await relay.enqueue({"job_id": f"job-{i}"})

        seen: list[str] = []

        async def processor(job: Job) -> None:
            await asyncio.sleep(0)
            seen.append(job.job_id)

        drivers = [
            WorkerDriver(relay, processor, settings=test_settings, worker_id="a"),
            WorkerDriver(second_relay, processor, settings=test_settings, worker_id="b"),
        ]

        results = await asyncio.gather(*(driver.drain(5) for driver in drivers))

        processed = results[0].processed + results[1].processed
        assert sorted(processed) == sorted(f"job-{i}" for i in range(10))
        assert len(seen) == len(set(seen)) == 10

    async def test_end_to_end_lock_sequence(self, relay: RelayQueue):
        """Test the enqueue, dequeue and lease sequence for one identity."""
        await relay.enqueue({"jobId": "abc", "ticketId": 1})

        job = await relay.dequeue()

        assert job is not None
        assert job.job_id == "abc"
        assert job.attributes == {"ticketId": 1}
        assert job.model_dump() == {"jobId": "abc", "ticketId": 1}
        assert await relay.acquire_lock("abc", 120) is True
        assert await relay.acquire_lock("abc", 120) is False
        await relay.release_lock("abc")
        assert await relay.acquire_lock("abc", 120) is True


class TestWorkerLoop:
    """Tests for the scheduled worker loop."""

    async def test_worker_drains_backlog_then_stops(
        self,
        relay: RelayQueue,
        test_settings: Settings,
    ):
        """Test the worker drains back-to-back while batches are full."""
        for i in range(7):
            await relay.enqueue({"job_id": f"job-{i}"})

        seen: list[str] = []

        async def processor(job: Job) -> None:
            seen.append(job.job_id)

        driver = WorkerDriver(relay, processor, settings=test_settings)
        worker = Worker(driver, poll_interval=30.0, batch_size=5)

        task = asyncio.create_task(worker.start())
        for _ in range(100):
            if len(seen) == 7:
                break
            await asyncio.sleep(0)

        await worker.stop()
        await asyncio.wait_for(task, timeout=5)

        assert seen == [f"job-{i}" for i in range(7)]
        assert await relay.queue_depth() == 0

    def test_explicit_zero_poll_interval_is_kept(self, relay: RelayQueue, test_settings: Settings):
        """Test a zero poll interval is honoured rather than replaced by the default."""
        driver = WorkerDriver(relay, settings=test_settings)

        assert Worker(driver, poll_interval=0).poll_interval == 0
        assert Worker(driver).poll_interval == get_settings().worker_poll_interval_seconds
        assert Worker(driver).batch_size == get_settings().worker_max_jobs

    async def test_worker_survives_store_errors(self, test_settings: Settings):
        """Test an exception from a drain does not end the worker loop."""
        calls = 0

        class FailingDriver:
            worker_id = "failing"

            async def drain(self, max_jobs=None):
                nonlocal calls
                calls += 1
                raise ConnectionError("store unavailable")

        worker = Worker(FailingDriver(), poll_interval=0.01, batch_size=1)

        task = asyncio.create_task(worker.start())
        while calls < 2:
            await asyncio.sleep(0.01)

        await worker.stop()
        await asyncio.wait_for(task, timeout=5)

        assert calls >= 2
