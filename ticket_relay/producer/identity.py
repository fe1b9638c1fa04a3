"""
Deterministic job identity for ticket submissions.
"""

import hashlib
import json

from ticket_relay.types.api import TicketPayload

# Fields that make two submissions the same logical request
IDENTITY_FIELDS = ("ticket_id", "company", "subject", "description", "vip")


def compute_job_id(ticket: TicketPayload) -> str:
    """
    Hash the identifying fields of a ticket.

    The same ticket with the same content always yields the same id, so a
    resubmission can be recognised by the completion ledger and the lease.

    Args:
        ticket: The inbound ticket.

    Returns:
        Hex SHA-256 digest.
    """
    canonical = json.dumps(
        {name: getattr(ticket, name) for name in IDENTITY_FIELDS},
        sort_keys=True,
        separators=(",", ":"),
    )
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
