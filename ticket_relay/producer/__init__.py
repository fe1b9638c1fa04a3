"""
Producer module.
Contains job identity, ticket intake and the best-effort worker kick.
"""

from ticket_relay.producer.identity import compute_job_id
from ticket_relay.producer.intake import SubmitResult, build_job, submit_ticket
from ticket_relay.producer.kick import WorkerKicker, resolve_origin

__all__ = [
    "compute_job_id",
    "submit_ticket",
    "build_job",
    "SubmitResult",
    "WorkerKicker",
    "resolve_origin",
]
