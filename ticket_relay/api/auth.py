"""
Shared-secret authentication for the intake and worker endpoints.
"""

import hmac
from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status

from ticket_relay.config import get_settings
from ticket_relay.constants import (
    BRIDGE_KEY_HEADER,
    CRON_HEADER,
    CRON_USER_AGENT,
    WORKER_KEY_HEADER,
)


def keys_match(provided: str | None, expected: str) -> bool:
    """
    Compare a provided secret with the expected one in constant time.

    Args:
        provided: The header value, possibly missing.
        expected: The configured secret.

    Returns:
        True if both are present and equal.
    """
    if not provided or not expected:
        return False
    return hmac.compare_digest(provided.encode("utf-8"), expected.encode("utf-8"))


def is_cron_request(request: Request) -> bool:
    """Whether the request comes from the scheduled drain trigger."""
    if request.headers.get(CRON_HEADER) is not None:
        return True
    return CRON_USER_AGENT in request.headers.get("user-agent", "")


async def require_bridge_key(
    bridge_key: Annotated[str | None, Header(alias=BRIDGE_KEY_HEADER)] = None,
) -> None:
    """
    FastAPI dependency guarding the ticket intake webhook.

    Raises:
        HTTPException: 401 if the bridge key is missing or wrong.
    """
    if not keys_match(bridge_key, get_settings().bridge_key):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )


async def require_worker_access(
    request: Request,
    worker_key: Annotated[str | None, Header(alias=WORKER_KEY_HEADER)] = None,
) -> None:
    """
    FastAPI dependency guarding the drain endpoints.

    Scheduled (cron) calls are trusted; every other caller needs the worker key.

    Raises:
        HTTPException: 401 if the caller is neither cron nor holds the key.
    """
    if is_cron_request(request):
        return
    await require_worker_key(worker_key)


async def require_worker_key(
    worker_key: Annotated[str | None, Header(alias=WORKER_KEY_HEADER)] = None,
) -> None:
    """
    FastAPI dependency guarding administrative endpoints.

    Cron headers are not honoured here: only the worker key grants access.

    Raises:
        HTTPException: 401 if the worker key is missing or wrong.
    """
    if not keys_match(worker_key, get_settings().worker_key):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
        )


BridgeAuth = Depends(require_bridge_key)
WorkerAuth = Depends(require_worker_access)
AdminAuth = Depends(require_worker_key)
