"""
Queue module.
Contains the job queue, lease manager, completion ledger and their facade.
"""

from ticket_relay.queue.facade import RelayQueue
from ticket_relay.queue.job_queue import JobQueue, parse_entry, serialize_job
from ticket_relay.queue.lease import LeaseManager
from ticket_relay.queue.ledger import CompletionLedger

__all__ = [
    "RelayQueue",
    "JobQueue",
    "LeaseManager",
    "CompletionLedger",
    "parse_entry",
    "serialize_job",
]
