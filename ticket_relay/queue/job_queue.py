"""
FIFO job queue over a shared key-value list.

Entries are always written as canonical JSON strings. Readers never trust an
entry: every popped value is parsed into a tagged outcome and malformed
entries are dropped, bounded by a fixed number of pops per dequeue so a
polluted queue cannot trap a consumer.
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from ticket_relay.constants import (
    DEFAULT_DEQUEUE_MAX_ATTEMPTS,
    ENTRY_PREVIEW_LENGTH,
    QUEUE_KEY_SUFFIX,
    SPAN_DEQUEUE_JOB,
    SPAN_ENQUEUE_JOB,
    DiscardReason,
)
from ticket_relay.observability.metrics import get_metrics
from ticket_relay.observability.tracing import job_span
from ticket_relay.store.base import KeyValueStore
from ticket_relay.types.job import DiscardedEntry, Job, ParsedEntry, ParseOutcome

logger = logging.getLogger(__name__)


def _preview(raw: Any) -> str:
    text = raw if isinstance(raw, str) else repr(raw)
    return text[:ENTRY_PREVIEW_LENGTH]


def parse_entry(raw: Any) -> ParseOutcome:
    """
    Parse a raw queue value into a job or a discard reason.

    Args:
        raw: The value popped from the list.

    Returns:
        ParsedEntry for a valid job, DiscardedEntry otherwise.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            return DiscardedEntry(DiscardReason.NOT_A_STRING, _preview(raw))

    if not isinstance(raw, str):
        return DiscardedEntry(DiscardReason.NOT_A_STRING, _preview(raw))

    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError:
        return DiscardedEntry(DiscardReason.INVALID_JSON, _preview(raw))

    if not isinstance(decoded, dict):
        return DiscardedEntry(DiscardReason.NOT_A_MAPPING, _preview(raw))

    try:
        job = Job.model_validate(decoded)
    except ValidationError:
        return DiscardedEntry(DiscardReason.INVALID_JOB, _preview(raw))

    return ParsedEntry(job)


def serialize_job(job: Job | Mapping[str, Any] | str) -> str:
    """
    Convert a job to its queue entry string.

    Strings are assumed to be serialized already and are forwarded as is.
    """
    if isinstance(job, str):
        return job
    if isinstance(job, Job):
        return job.to_entry()
    return json.dumps(dict(job), sort_keys=True, separators=(",", ":"), default=str)


class JobQueue:
    """
    Shared FIFO queue of pending jobs.

    Guarantees:
    - Entries are stored as strings only
    - The oldest well-formed entry is returned first
    - A single dequeue pops at most `max_attempts` entries
    """

    def __init__(
        self,
        store: KeyValueStore,
        namespace: str,
        max_attempts: int = DEFAULT_DEQUEUE_MAX_ATTEMPTS,
    ):
        """
        Initialize the queue.

        Args:
            store: The shared key-value store.
            namespace: Key prefix shared by queue, leases and ledger.
            max_attempts: Pop ceiling per dequeue call.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._store = store
        self._namespace = namespace
        self._max_attempts = max_attempts
        self.key = f"{namespace}:{QUEUE_KEY_SUFFIX}"

    async def enqueue(self, job: Job | Mapping[str, Any] | str) -> int:
        """
        Append a job to the tail of the queue.

        Duplicate identities are not rejected here; producers check the
        completion ledger before enqueueing.

        Args:
            job: A Job, a mapping of job attributes, or a serialized entry.

        Returns:
            The queue length after the append.
        """
        payload = serialize_job(job)
        with job_span(SPAN_ENQUEUE_JOB, namespace=self._namespace):
            length = await self._store.rpush(self.key, payload)

        get_metrics().record_job_enqueued(self._namespace)
        logger.debug("Enqueued job entry", extra={"queue_length": length})
        return length

    async def dequeue(self) -> Job | None:
        """
        Remove and return the job at the head of the queue.

        Malformed entries are dropped and the next one is tried.

        Returns:
            The next valid Job, or None if the queue is empty or the pop
            ceiling was reached on malformed entries.
        """
        with job_span(SPAN_DEQUEUE_JOB, namespace=self._namespace) as span:
            for attempt in range(1, self._max_attempts + 1):
                raw = await self._store.lpop(self.key)
                if raw is None:
                    span.set_attribute("queue.empty", True)
                    return None

                outcome = parse_entry(raw)
                if isinstance(outcome, ParsedEntry):
                    span.set_attribute("job_id", outcome.job.job_id)
                    return outcome.job

                get_metrics().record_entry_discarded(outcome.reason.value)
                logger.warning(
                    "Dropping malformed queue entry",
                    extra={
                        "reason": outcome.reason.value,
                        "preview": outcome.preview,
                        "attempt": attempt,
                    },
                )

            logger.warning(
                "Dequeue gave up after consecutive malformed entries",
                extra={"max_attempts": self._max_attempts},
            )
            return None

    async def purge(self) -> None:
        """Delete every pending entry."""
        await self._store.delete(self.key)
        logger.info("Queue purged", extra={"queue": self.key})

    async def depth(self) -> int:
        """Number of pending entries, malformed ones included."""
        depth = await self._store.llen(self.key)
        get_metrics().update_queue_depth(self._namespace, depth)
        return depth
