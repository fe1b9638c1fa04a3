"""
Observability module.
Contains logging, metrics, and tracing setup.
"""

from ticket_relay.observability.logging import job_log_context, setup_logging
from ticket_relay.observability.metrics import (
    MetricsCollector,
    get_metrics,
    setup_metrics,
)
from ticket_relay.observability.tracing import get_tracer, job_span, setup_tracing

__all__ = [
    "setup_logging",
    "job_log_context",
    "setup_metrics",
    "get_metrics",
    "MetricsCollector",
    "setup_tracing",
    "get_tracer",
    "job_span",
]
