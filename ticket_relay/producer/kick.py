"""
Best-effort worker kick.

After an enqueue the producer asks a worker to drain one job right away. The
kick carries no delivery guarantee: failures are only logged, and scheduled
drains pick up anything a lost kick leaves behind.
"""

import logging
from collections.abc import Mapping
from uuid import uuid4

import httpx

from ticket_relay.config import Settings, get_settings
from ticket_relay.constants import (
    API_V1_PREFIX,
    REQUEST_ID_HEADER,
    WORKER_KEY_HEADER,
)
from ticket_relay.observability.metrics import get_metrics

logger = logging.getLogger(__name__)


def _first(value: str | None) -> str:
    return (value or "").split(",")[0].strip()


def resolve_origin(headers: Mapping[str, str], settings: Settings | None = None) -> str | None:
    """
    Work out the public origin to reach the worker endpoint on.

    Order: configured base URL, then X-Forwarded-Host, then Host. The scheme
    comes from X-Forwarded-Proto and defaults to https.

    Returns:
        The origin, or None if no host is known.
    """
    settings = settings or get_settings()
    if settings.public_base_url:
        return settings.public_base_url.rstrip("/")

    host = _first(headers.get("x-forwarded-host")) or _first(headers.get("host"))
    if not host:
        return None

    proto = _first(headers.get("x-forwarded-proto")) or "https"
    return f"{proto}://{host}"


class WorkerKicker:
    """Sends a one-job drain request to the worker endpoint."""

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the kicker.

        Args:
            settings: Optional settings override.
            transport: Optional httpx transport (tests use a mock transport).
        """
        self._settings = settings or get_settings()
        self._transport = transport

    async def kick(self, origin: str | None) -> bool:
        """
        Ask the worker at `origin` to drain one job.

        Never raises. Each call carries its own request id.

        Returns:
            True if the worker answered with a 2xx status.
        """
        metrics = get_metrics()
        if not origin:
            logger.warning("Worker kick skipped: no host available")
            metrics.record_worker_kick("skipped")
            return False

        request_id = uuid4().hex
        url = f"{origin}{API_V1_PREFIX}/worker"

        try:
            async with httpx.AsyncClient(
                timeout=self._settings.kick_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    url,
                    json={"maxJobs": 1},
                    headers={
                        WORKER_KEY_HEADER: self._settings.worker_key,
                        REQUEST_ID_HEADER: request_id,
                    },
                )
        except httpx.HTTPError as e:
            logger.warning(
                "Worker kick error",
                extra={"origin": origin, "request_id": request_id, "error": str(e)},
            )
            metrics.record_worker_kick("error")
            return False

        if not response.is_success:
            logger.warning(
                "Worker kick failed",
                extra={
                    "origin": origin,
                    "request_id": request_id,
                    "status_code": response.status_code,
                    "body": response.text[:200],
                },
            )
            metrics.record_worker_kick("failed")
            return False

        metrics.record_worker_kick("ok")
        return True
