"""
Relay queue facade.

Bundles the queue, lease manager and completion ledger that share one
namespace behind the operations producers and workers call.
"""

from collections.abc import Mapping
from typing import Any

from ticket_relay.config import Settings, get_settings
from ticket_relay.constants import DEFAULT_DEQUEUE_MAX_ATTEMPTS
from ticket_relay.queue.job_queue import JobQueue
from ticket_relay.queue.lease import LeaseManager
from ticket_relay.queue.ledger import CompletionLedger
from ticket_relay.store.base import KeyValueStore
from ticket_relay.types.job import Job


class RelayQueue:
    """
    Queue, lease and ledger over one store namespace.

    Key layout:
    - <namespace>:queue            pending entries
    - <namespace>:lock:<job_id>    in-progress lease
    - <namespace>:done:<job_id>    completion marker
    """

    def __init__(
        self,
        store: KeyValueStore,
        namespace: str,
        dequeue_max_attempts: int = DEFAULT_DEQUEUE_MAX_ATTEMPTS,
    ):
        self.namespace = namespace
        self.queue = JobQueue(store, namespace, max_attempts=dequeue_max_attempts)
        self.leases = LeaseManager(store, namespace)
        self.ledger = CompletionLedger(store, namespace)

    @classmethod
    def from_settings(
        cls,
        store: KeyValueStore,
        settings: Settings | None = None,
    ) -> "RelayQueue":
        """Build a facade using the configured namespace and pop ceiling."""
        settings = settings or get_settings()
        return cls(
            store,
            settings.queue_namespace,
            dequeue_max_attempts=settings.dequeue_max_attempts,
        )

    async def enqueue(self, job: Job | Mapping[str, Any] | str) -> int:
        return await self.queue.enqueue(job)

    async def dequeue(self) -> Job | None:
        return await self.queue.dequeue()

    async def purge_queue(self) -> None:
        await self.queue.purge()

    async def queue_depth(self) -> int:
        return await self.queue.depth()

    async def mark_done(self, job_id: str, ttl_seconds: int) -> None:
        await self.ledger.mark_done(job_id, ttl_seconds)

    async def is_done(self, job_id: str) -> bool:
        return await self.ledger.is_done(job_id)

    async def acquire_lock(self, job_id: str, ttl_seconds: int) -> bool:
        return await self.leases.acquire(job_id, ttl_seconds)

    async def release_lock(self, job_id: str) -> None:
        await self.leases.release(job_id)
