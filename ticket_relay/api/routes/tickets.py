"""
Ticket intake routes.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Body, HTTPException, Request, status

from ticket_relay.api.auth import BridgeAuth
from ticket_relay.api.dependencies import Kicker, Relay
from ticket_relay.constants import API_V1_PREFIX
from ticket_relay.producer.intake import submit_ticket
from ticket_relay.producer.kick import resolve_origin
from ticket_relay.types.api import ErrorResponse, IntakeResponse, TicketPayload

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{API_V1_PREFIX}/tickets", tags=["Tickets"])


@router.post(
    "",
    response_model=IntakeResponse,
    summary="Submit a ticket",
    description="Queue a ticket for processing unless the same request completed recently.",
    dependencies=[BridgeAuth],
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
async def submit(
    request: Request,
    relay: Relay,
    kicker: Kicker,
    background_tasks: BackgroundTasks,
    ticket: Annotated[TicketPayload | None, Body()] = None,
) -> IntakeResponse:
    """
    Accept a ticket webhook.

    Idempotent on the ticket's content: a request that completed within the
    dedup window is acknowledged without being queued again.

    Args:
        request: The raw request, used to locate the worker endpoint.
        relay: Queue facade.
        kicker: Best-effort worker kicker.
        background_tasks: Runs the kick after the response is sent.
        ticket: The inbound ticket. A missing body counts as an empty one.

    Returns:
        IntakeResponse with the job identity.
    """
    if ticket is None:
        ticket = TicketPayload()
    if not ticket.is_complete:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing ticketId/company",
        )

    result = await submit_ticket(relay, ticket)

    if result.deduped:
        return IntakeResponse(job_id=result.job_id, deduped=True)

    background_tasks.add_task(kicker.kick, resolve_origin(request.headers))

    return IntakeResponse(job_id=result.job_id, enqueued=True)
