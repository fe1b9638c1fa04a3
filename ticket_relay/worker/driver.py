"""
Bounded drain of the relay queue.

Each drain is an independent unit of work: it may run alongside other drains
in other processes, coordinating only through the store. A drain pops up to
`max_jobs` entries, processes each one under its lease, and records success
in the completion ledger. A job that fails is logged and dropped, not
requeued.
"""

import logging
import os
import time
from typing import Any

from ticket_relay.config import Settings, get_settings
from ticket_relay.constants import (
    SPAN_ACQUIRE_LEASE,
    SPAN_EXECUTE_JOB,
    SPAN_RELEASE_LEASE,
    JobOutcome,
)
from ticket_relay.observability.logging import job_log_context
from ticket_relay.observability.metrics import get_metrics
from ticket_relay.observability.tracing import job_span
from ticket_relay.queue.facade import RelayQueue
from ticket_relay.types.job import DrainResult, Job
from ticket_relay.worker.processors import ProcessJob, process_job

logger = logging.getLogger(__name__)


def clamp_max_jobs(
    value: Any,
    lower: int,
    upper: int,
    default: int = 1,
) -> int:
    """
    Coerce a requested batch size into [lower, upper].

    Accepts None, ints and numeric strings (query parameters). Anything that
    doesn't parse falls back to `default`.
    """
    try:
        requested = int(float(value)) if value not in (None, "") else default
    except (TypeError, ValueError, OverflowError):
        requested = default
    return max(lower, min(upper, requested))


class WorkerDriver:
    """
    Pulls jobs, leases them, and hands them to the processor.

    Holds no state across drains beyond its configuration.
    """

    def __init__(
        self,
        relay: RelayQueue,
        processor: ProcessJob = process_job,
        settings: Settings | None = None,
        worker_id: str | None = None,
    ):
        """
        Initialize the driver.

        Args:
            relay: Queue, lease and ledger facade.
            processor: Async callable run for each leased job.
            settings: Optional settings override.
            worker_id: Identifier used in logs and metrics. Defaults to hostname + PID.
        """
        settings = settings or get_settings()

        self.relay = relay
        self.processor = processor
        self.worker_id = worker_id or f"{os.uname().nodename}-{os.getpid()}"
        self.lease_ttl = settings.lease_ttl_seconds
        self.done_ttl = settings.done_ttl_seconds
        self.min_jobs = settings.worker_min_jobs
        self.max_jobs = settings.worker_max_jobs
        self.default_jobs = settings.worker_default_jobs
        self._metrics = get_metrics()

    async def drain(self, max_jobs: Any = None) -> DrainResult:
        """
        Process up to `max_jobs` queued jobs.

        Args:
            max_jobs: Requested batch size, clamped to the configured range.

        Returns:
            DrainResult whose `processed` list holds the job_ids that succeeded.
        """
        limit = clamp_max_jobs(max_jobs, self.min_jobs, self.max_jobs, self.default_jobs)
        result = DrainResult()

        for _ in range(limit):
            job = await self.relay.dequeue()
            if job is None:
                result.empty = True
                break

            with job_log_context(job.job_id, self.worker_id):
                outcome = await self._run_one(job)

            if outcome is JobOutcome.PROCESSED:
                result.processed.append(job.job_id)
            elif outcome is JobOutcome.CONTENDED:
                result.skipped.append(job.job_id)
            else:
                result.failed.append(job.job_id)

        logger.info(
            "Drain finished",
            extra={
                "worker_id": self.worker_id,
                "limit": limit,
                "processed": len(result.processed),
                "skipped": len(result.skipped),
                "failed": len(result.failed),
            },
        )
        return result

    async def _run_one(self, job: Job) -> JobOutcome:
        """
        Run a single dequeued job under its lease.

        The lease is released whatever the outcome. A failure is not requeued.
        """
        job_id = job.job_id

        with job_span(SPAN_ACQUIRE_LEASE, job_id):
            locked = await self.relay.acquire_lock(job_id, self.lease_ttl)

        if not locked:
            # Someone else is processing this identity
            self._metrics.record_lease_contended(self.worker_id)
            return JobOutcome.CONTENDED

        self._metrics.record_lease_acquired(self.worker_id)
        start_time = time.time()

        try:
            with job_span(SPAN_EXECUTE_JOB, job_id, worker_id=self.worker_id):
                await self.processor(job)

            await self.relay.mark_done(job_id, self.done_ttl)

            duration = time.time() - start_time
            logger.info(
                "Job completed successfully",
                extra={"job_id": job_id, "duration": f"{duration:.2f}s"},
            )
            self._metrics.record_job_completed(JobOutcome.PROCESSED.value, duration)
            return JobOutcome.PROCESSED

        except Exception as e:
            duration = time.time() - start_time
            logger.exception(
                "Worker job failed",
                extra={"job_id": job_id, "error": str(e)},
            )
            self._metrics.record_job_completed(JobOutcome.FAILED.value, duration)
            return JobOutcome.FAILED

        finally:
            with job_span(SPAN_RELEASE_LEASE, job_id):
                await self.relay.release_lock(job_id)
