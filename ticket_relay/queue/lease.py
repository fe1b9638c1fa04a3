"""
Per-job lease with expiry.

A lease is a non-blocking trylock on a job identity. It stops two queue slots
carrying the same job_id from being processed at the same time. The TTL lets
a crashed holder's claim lapse on its own.
"""

import logging

from ticket_relay.constants import LOCK_KEY_SEGMENT, SENTINEL_VALUE
from ticket_relay.store.base import KeyValueStore

logger = logging.getLogger(__name__)


def validate_ttl(ttl_seconds: int) -> int:
    """Reject non-positive TTLs, which the store would treat as an error or as no expiry."""
    if ttl_seconds <= 0:
        raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
    return int(ttl_seconds)


class LeaseManager:
    """TTL lease keyed by job identity."""

    def __init__(self, store: KeyValueStore, namespace: str):
        self._store = store
        self._prefix = f"{namespace}:{LOCK_KEY_SEGMENT}:"

    def key_for(self, job_id: str) -> str:
        return f"{self._prefix}{job_id}"

    async def acquire(self, job_id: str, ttl_seconds: int) -> bool:
        """
        Try to take the lease for a job.

        Args:
            job_id: The job identity.
            ttl_seconds: Lease lifetime.

        Returns:
            True if the lease was taken, False if someone else holds it.
        """
        ttl = validate_ttl(ttl_seconds)
        acquired = await self._store.set_if_absent(self.key_for(job_id), SENTINEL_VALUE, ttl)
        if not acquired:
            logger.info("Lease held elsewhere", extra={"job_id": job_id})
        return acquired

    async def release(self, job_id: str) -> None:
        """Drop the lease. Releasing an absent lease is a no-op."""
        await self._store.delete(self.key_for(job_id))
