"""
Worker drain and queue administration routes.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Body, Query

from ticket_relay.api.auth import AdminAuth, WorkerAuth
from ticket_relay.api.dependencies import Driver, Relay
from ticket_relay.constants import API_V1_PREFIX
from ticket_relay.types.api import DrainRequest, DrainResponse, PurgeResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix=API_V1_PREFIX, tags=["Worker"])


@router.get(
    "/worker",
    response_model=DrainResponse,
    summary="Drain the queue (scheduled)",
    description="Process up to maxJobs queued jobs. Called by the scheduler.",
    dependencies=[WorkerAuth],
)
async def drain_get(
    driver: Driver,
    max_jobs: Annotated[str | None, Query(alias="maxJobs")] = None,
) -> DrainResponse:
    """
    Run one bounded drain.

    Args:
        driver: Drain driver.
        max_jobs: Requested batch size, clamped to the configured range.

    Returns:
        DrainResponse listing the processed job ids.
    """
    result = await driver.drain(max_jobs)
    return DrainResponse(processed=result.processed)


@router.post(
    "/worker",
    response_model=DrainResponse,
    summary="Drain the queue (manual or kick)",
    description="Process up to maxJobs queued jobs.",
    dependencies=[WorkerAuth],
)
async def drain_post(
    driver: Driver,
    body: Annotated[DrainRequest | None, Body()] = None,
) -> DrainResponse:
    """
    Run one bounded drain.

    Args:
        driver: Drain driver.
        body: Optional body carrying maxJobs.

    Returns:
        DrainResponse listing the processed job ids.
    """
    result = await driver.drain(body.max_jobs if body else None)
    return DrainResponse(processed=result.processed)


@router.delete(
    "/queue",
    response_model=PurgeResponse,
    summary="Purge the queue",
    description="Delete every pending entry. Administrative reset only.",
    dependencies=[AdminAuth],
)
async def purge_queue(relay: Relay) -> PurgeResponse:
    """
    Delete the whole queue list.

    Leases and completion markers are left to expire on their own.
    """
    await relay.purge_queue()
    logger.warning("Queue purged via API", extra={"namespace": relay.namespace})
    return PurgeResponse()
