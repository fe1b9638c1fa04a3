"""
FastAPI application entry point.
"""

import logging
import time
from collections.abc import Callable
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from ticket_relay import __version__
from ticket_relay.api.routes import health_router, tickets_router, worker_router
from ticket_relay.config import get_settings
from ticket_relay.observability.logging import setup_logging
from ticket_relay.observability.metrics import get_metrics, setup_metrics
from ticket_relay.observability.tracing import instrument_fastapi, setup_tracing
from ticket_relay.store import KeyValueStore, close_store, init_store
from ticket_relay.types.api import ErrorResponse

logger = logging.getLogger(__name__)


async def record_request_metrics(request: Request, call_next: Callable):
    """Middleware recording request counts and latency."""
    start = time.perf_counter()
    response = await call_next(request)
    route = request.scope.get("route")
    endpoint = getattr(route, "path", request.url.path)
    get_metrics().record_api_request(
        method=request.method,
        endpoint=endpoint,
        status=response.status_code,
        duration_seconds=time.perf_counter() - start,
    )
    return response


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Render HTTP errors as {"error": ...}."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail)).model_dump(),
        headers=exc.headers,
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render malformed request bodies and parameters as a 400."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "Invalid request")
    logger.info(
        "Rejected invalid request",
        extra={"path": request.url.path, "location": location, "reason": message},
    )
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error=f"Invalid request: {location}: {message}").model_dump(),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log and render unexpected failures (store outages included) as a 500."""
    logger.exception(
        "Unhandled error",
        extra={"path": request.url.path, "error": str(exc)},
    )
    return JSONResponse(status_code=500, content=ErrorResponse(error=str(exc)).model_dump())


def create_app(store: KeyValueStore | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store: Optional store to use instead of the configured Redis one.

    Returns:
        FastAPI: The configured application instance.
    """
    # Fails fast when required settings are missing
    get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Application lifespan manager.

        Handles startup and shutdown events.
        """
        # Startup
        setup_logging()
        setup_metrics()
        setup_tracing()
        await init_store(store)

        logger.info("Application started")

        yield

        # Shutdown
        await close_store()
        logger.info("Application shutdown")

    app = FastAPI(
        title="Ticket Relay API",
        description="Ticket intake and leased queue drain over a shared key-value store",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(BaseHTTPMiddleware, dispatch=record_request_metrics)

    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # Include routers
    app.include_router(health_router)
    app.include_router(tickets_router)
    app.include_router(worker_router)

    # Instrument with OpenTelemetry
    instrument_fastapi(app)

    return app


def run() -> None:
    """Run the API server."""
    settings = get_settings()
    app = create_app()

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
