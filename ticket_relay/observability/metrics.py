"""
Prometheus metrics collection.
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

from ticket_relay.constants import (
    METRIC_API_LATENCY,
    METRIC_API_REQUESTS,
    METRIC_ENTRIES_DISCARDED,
    METRIC_JOB_DURATION,
    METRIC_JOBS_COMPLETED,
    METRIC_JOBS_DEDUPED,
    METRIC_JOBS_ENQUEUED,
    METRIC_LEASE_ACQUIRED,
    METRIC_LEASE_CONTENDED,
    METRIC_QUEUE_DEPTH,
    METRIC_WORKER_KICKS,
)

# Global metrics instance
_metrics: "MetricsCollector | None" = None


class MetricsCollector:
    """
    Prometheus metrics collector for the ticket relay.

    Collects metrics for:
    - Queue depth and discarded entries
    - Job enqueues, dedup hits and completions
    - Job execution duration
    - Lease acquisition and contention
    - Worker kicks and API requests
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        """
        Initialize the metrics collector.

        Args:
            registry: Optional custom registry. Uses default if not provided.
        """
        self._registry = registry or REGISTRY

        self.queue_depth = Gauge(
            METRIC_QUEUE_DEPTH,
            "Number of entries in the queue",
            ["namespace"],
            registry=self._registry,
        )

        self.jobs_enqueued = Counter(
            METRIC_JOBS_ENQUEUED,
            "Total number of jobs enqueued",
            ["namespace"],
            registry=self._registry,
        )

        self.jobs_deduped = Counter(
            METRIC_JOBS_DEDUPED,
            "Total number of submissions suppressed by the completion ledger",
            ["namespace"],
            registry=self._registry,
        )

        self.jobs_completed = Counter(
            METRIC_JOBS_COMPLETED,
            "Total number of jobs finished by a worker",
            ["status"],
            registry=self._registry,
        )

        self.job_duration = Histogram(
            METRIC_JOB_DURATION,
            "Job processing duration in seconds",
            ["status"],
            buckets=(0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0),
            registry=self._registry,
        )

        self.entries_discarded = Counter(
            METRIC_ENTRIES_DISCARDED,
            "Total number of malformed queue entries dropped",
            ["reason"],
            registry=self._registry,
        )

        self.lease_acquired = Counter(
            METRIC_LEASE_ACQUIRED,
            "Total number of leases acquired",
            ["worker_id"],
            registry=self._registry,
        )

        self.lease_contended = Counter(
            METRIC_LEASE_CONTENDED,
            "Total number of jobs skipped because their lease was held",
            ["worker_id"],
            registry=self._registry,
        )

        self.worker_kicks = Counter(
            METRIC_WORKER_KICKS,
            "Total number of best-effort worker kicks",
            ["result"],
            registry=self._registry,
        )

        self.api_requests = Counter(
            METRIC_API_REQUESTS,
            "Total number of API requests",
            ["method", "endpoint", "status"],
            registry=self._registry,
        )

        self.api_latency = Histogram(
            METRIC_API_LATENCY,
            "API request latency in seconds",
            ["method", "endpoint"],
            buckets=(0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
            registry=self._registry,
        )

    def record_job_enqueued(self, namespace: str) -> None:
        """Record a job enqueue."""
        self.jobs_enqueued.labels(namespace=namespace).inc()

    def record_job_deduped(self, namespace: str) -> None:
        """Record a submission suppressed by the ledger."""
        self.jobs_deduped.labels(namespace=namespace).inc()

    def record_job_completed(self, status: str, duration_seconds: float) -> None:
        """Record a job completion."""
        self.jobs_completed.labels(status=status).inc()
        self.job_duration.labels(status=status).observe(duration_seconds)

    def record_entry_discarded(self, reason: str) -> None:
        """Record a dropped queue entry."""
        self.entries_discarded.labels(reason=reason).inc()

    def record_lease_acquired(self, worker_id: str, count: int = 1) -> None:
        """Record lease acquisition."""
        self.lease_acquired.labels(worker_id=worker_id).inc(count)

    def record_lease_contended(self, worker_id: str) -> None:
        """Record a contended lease."""
        self.lease_contended.labels(worker_id=worker_id).inc()

    def record_worker_kick(self, result: str) -> None:
        """Record the result of a worker kick."""
        self.worker_kicks.labels(result=result).inc()

    def update_queue_depth(self, namespace: str, depth: int) -> None:
        """Update queue depth for a namespace."""
        self.queue_depth.labels(namespace=namespace).set(depth)

    def record_api_request(
        self,
        method: str,
        endpoint: str,
        status: int,
        duration_seconds: float,
    ) -> None:
        """Record an API request."""
        self.api_requests.labels(
            method=method,
            endpoint=endpoint,
            status=str(status),
        ).inc()
        self.api_latency.labels(method=method, endpoint=endpoint).observe(
            duration_seconds
        )

    def get_metrics(self) -> bytes:
        """Get all metrics in Prometheus format."""
        return generate_latest(self._registry)

    def get_content_type(self) -> str:
        """Get the content type for metrics response."""
        return CONTENT_TYPE_LATEST


def setup_metrics() -> MetricsCollector:
    """
    Set up and return the metrics collector.

    Returns:
        MetricsCollector: The metrics collector instance.
    """
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics


def get_metrics() -> MetricsCollector:
    """
    Get the metrics collector instance.

    Returns:
        MetricsCollector: The metrics collector instance.
    """
    if _metrics is None:
        return setup_metrics()
    return _metrics
