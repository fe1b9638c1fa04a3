"""
Health check routes.
"""

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import Response

from ticket_relay import __version__
from ticket_relay.api.dependencies import Relay
from ticket_relay.observability.metrics import get_metrics
from ticket_relay.store import get_store
from ticket_relay.types.api import HealthResponse

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check the health of the API and store connection.",
)
async def health_check(relay: Relay) -> HealthResponse:
    """
    Perform a health check.

    Pings the store and reports the queue depth.

    Args:
        relay: Queue facade.

    Returns:
        HealthResponse with service status.
    """
    store_status = "healthy" if await get_store().ping() else "unhealthy"

    depth = None
    if store_status == "healthy":
        depth = await relay.queue_depth()

    return HealthResponse(
        status="healthy" if store_status == "healthy" else "degraded",
        version=__version__,
        store=store_status,
        queue_depth=depth,
        timestamp=datetime.now(timezone.utc),
    )


@router.get(
    "/ready",
    summary="Readiness check",
    description="Check if the service is ready to receive traffic.",
)
async def readiness_check() -> dict:
    """
    Readiness probe endpoint.

    Returns:
        Ready status.
    """
    return {"ready": await get_store().ping()}


@router.get(
    "/live",
    summary="Liveness check",
    description="Check if the service is alive.",
)
async def liveness_check() -> dict:
    """
    Liveness probe endpoint.

    Returns:
        Alive status.
    """
    return {"alive": True}


@router.get(
    "/metrics",
    summary="Prometheus metrics",
    description="Expose Prometheus metrics.",
)
async def metrics() -> Response:
    """
    Expose Prometheus metrics.

    Returns:
        Prometheus-formatted metrics.
    """
    metrics_collector = get_metrics()
    return Response(
        content=metrics_collector.get_metrics(),
        media_type=metrics_collector.get_content_type(),
    )
