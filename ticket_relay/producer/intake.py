"""
Ticket intake: dedup against the completion ledger, then enqueue.
"""

import logging
import time
from dataclasses import dataclass

from ticket_relay.observability.metrics import get_metrics
from ticket_relay.producer.identity import compute_job_id
from ticket_relay.queue.facade import RelayQueue
from ticket_relay.types.api import TicketPayload
from ticket_relay.types.job import Job

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of a ticket submission."""

    job_id: str
    enqueued: bool

    @property
    def deduped(self) -> bool:
        return not self.enqueued


def build_job(ticket: TicketPayload, job_id: str) -> Job:
    """Build the queued job for a ticket, stamped with its creation time in epoch ms."""
    return Job(
        job_id=job_id,
        **ticket.model_dump(),
        created_at=int(time.time() * 1000),
    )


async def submit_ticket(relay: RelayQueue, ticket: TicketPayload) -> SubmitResult:
    """
    Queue a ticket unless the same request completed recently.

    A request already in the queue but not yet done is enqueued again; the
    worker's lease keeps the two slots from running concurrently.

    Args:
        relay: Queue, lease and ledger facade.
        ticket: The inbound ticket.

    Returns:
        SubmitResult with the job identity and whether it was enqueued.
    """
    job_id = compute_job_id(ticket)

    if await relay.is_done(job_id):
        get_metrics().record_job_deduped(relay.namespace)
        logger.info("Ticket already processed (deduped)", extra={"job_id": job_id})
        return SubmitResult(job_id=job_id, enqueued=False)

    await relay.enqueue(build_job(ticket, job_id))
    logger.info(
        "Ticket enqueued",
        extra={"job_id": job_id, "ticket_id": str(ticket.ticket_id)},
    )
    return SubmitResult(job_id=job_id, enqueued=True)
