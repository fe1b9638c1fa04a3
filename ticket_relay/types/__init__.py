"""
Type definitions for the ticket relay.
Contains input/output type definitions for all functions, grouped by module.
"""

from ticket_relay.types.api import (
    DrainRequest,
    DrainResponse,
    ErrorResponse,
    HealthResponse,
    IntakeResponse,
    PurgeResponse,
    TicketPayload,
)
from ticket_relay.types.job import (
    DiscardedEntry,
    DrainResult,
    Job,
    ParsedEntry,
    ParseOutcome,
)

__all__ = [
    # API types
    "TicketPayload",
    "IntakeResponse",
    "DrainRequest",
    "DrainResponse",
    "PurgeResponse",
    "HealthResponse",
    "ErrorResponse",
    # Job types
    "Job",
    "ParsedEntry",
    "DiscardedEntry",
    "ParseOutcome",
    "DrainResult",
]
