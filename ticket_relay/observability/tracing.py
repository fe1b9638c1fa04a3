"""
OpenTelemetry tracing for the relay.

Spans cover the store round-trips of a job's life: enqueue, dequeue, lease
acquire and release, and the processor call itself.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.trace import Span, Tracer

from ticket_relay import __version__
from ticket_relay.config import Settings, get_settings

logger = logging.getLogger(__name__)

_tracer: Tracer | None = None


def setup_tracing(
    settings: Settings | None = None,
    enable_console_export: bool = False,
) -> Tracer:
    """
    Install a tracer provider and return the relay tracer.

    With `otel_enabled` off, spans are still created (so code paths are the
    same) but nothing is exported.

    Args:
        settings: Optional settings override.
        enable_console_export: Also print finished spans to stdout.
    """
    global _tracer

    settings = settings or get_settings()
    provider = TracerProvider(
        resource=Resource.create(
            {
                "service.name": settings.otel_service_name,
                "service.version": __version__,
                "relay.namespace": settings.queue_namespace,
            }
        )
    )

    if settings.otel_enabled:
        try:
            exporter = OTLPSpanExporter(
                endpoint=settings.otel_exporter_otlp_endpoint,
                insecure=True,
            )
        except Exception as e:
            logger.warning(
                "OTLP exporter unavailable, spans will not be exported",
                extra={"endpoint": settings.otel_exporter_otlp_endpoint, "error": str(e)},
            )
        else:
            provider.add_span_processor(BatchSpanProcessor(exporter))

    if enable_console_export:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    _tracer = trace.get_tracer(settings.otel_service_name)
    return _tracer


def instrument_fastapi(app: Any) -> None:
    """Attach request spans to a FastAPI app."""
    FastAPIInstrumentor.instrument_app(app)


def get_tracer() -> Tracer:
    """Return the relay tracer, setting tracing up on first use."""
    global _tracer
    if _tracer is None:
        _tracer = setup_tracing()
    return _tracer


@contextmanager
def job_span(name: str, job_id: str | None = None, **attributes: Any) -> Iterator[Span]:
    """
    Open a span for one step of a job's life.

    Args:
        name: Span name, one of the SPAN_* constants.
        job_id: Job identity, when already known.
        **attributes: Extra attributes; None values are skipped.
    """
    with get_tracer().start_as_current_span(name) as span:
        if job_id is not None:
            span.set_attribute("job_id", job_id)
        for key, value in attributes.items():
            if value is not None:
                span.set_attribute(key, value)
        yield span
