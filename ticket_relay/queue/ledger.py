"""
Completion ledger.

Marks job identities processed within the last TTL seconds. Absence after
expiry only means the dedup window has passed.
"""

from ticket_relay.constants import DONE_KEY_SEGMENT, SENTINEL_VALUE
from ticket_relay.queue.lease import validate_ttl
from ticket_relay.store.base import KeyValueStore


class CompletionLedger:
    """TTL idempotency markers keyed by job identity."""

    def __init__(self, store: KeyValueStore, namespace: str):
        self._store = store
        self._prefix = f"{namespace}:{DONE_KEY_SEGMENT}:"

    def key_for(self, job_id: str) -> str:
        return f"{self._prefix}{job_id}"

    async def mark_done(self, job_id: str, ttl_seconds: int) -> None:
        """Record a successful run for `ttl_seconds`."""
        await self._store.set_with_expiry(
            self.key_for(job_id), SENTINEL_VALUE, validate_ttl(ttl_seconds)
        )

    async def is_done(self, job_id: str) -> bool:
        """Whether the job completed within the dedup window."""
        return bool(await self._store.get(self.key_for(job_id)))
