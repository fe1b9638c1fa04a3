"""
Job processor registry and built-in processors.

A processor receives a dequeued Job and either returns or raises. The worker
only cares which of the two happened. Processors must tolerate being run
again for the same job_id once a lease has expired.
"""

import logging
from collections.abc import Awaitable, Callable

import httpx

from ticket_relay.config import get_settings
from ticket_relay.types.job import Job

logger = logging.getLogger(__name__)

# Type alias for job processor functions
ProcessJob = Callable[[Job], Awaitable[None]]

# Processor registry
_processors: dict[str, ProcessJob] = {}


def register_processor(job_type: str) -> Callable[[ProcessJob], ProcessJob]:
    """
    Decorator to register a job processor.

    Args:
        job_type: The `job_type` attribute value this processor handles.

    Returns:
        Decorator function.

    Example:
        @register_processor("post_note")
        async def post_note(job: Job) -> None:
            ...
    """
    def decorator(processor: ProcessJob) -> ProcessJob:
        _processors[job_type] = processor
        logger.info(f"Registered processor for job type: {job_type}")
        return processor
    return decorator


def get_processor(job_type: str) -> ProcessJob | None:
    """
    Get the processor for a job type.

    Args:
        job_type: The job type.

    Returns:
        The processor function or None if not found.
    """
    return _processors.get(job_type)


def list_processors() -> list[str]:
    """List all registered job types."""
    return list(_processors.keys())


# ============================================================================
# Built-in processors
# ============================================================================


@register_processor("log")
async def process_log(job: Job) -> None:
    """Log the job and succeed. Useful as a dry-run target."""
    logger.info(
        "Processing job",
        extra={"job_id": job.job_id, "attributes": sorted(job.attributes)},
    )


@register_processor("webhook")
async def process_webhook(job: Job) -> None:
    """
    Forward the job to the configured downstream URL.

    Raises:
        RuntimeError: If no downstream URL is configured.
        httpx.HTTPStatusError: On a non-2xx response.
    """
    settings = get_settings()
    url = settings.processor_webhook_url
    if not url:
        raise RuntimeError("processor_webhook_url is not configured")

    async with httpx.AsyncClient(timeout=settings.processor_timeout_seconds) as client:
        response = await client.post(url, json=job.model_dump(mode="json"))
        response.raise_for_status()

    logger.info(
        "Forwarded job",
        extra={"job_id": job.job_id, "status_code": response.status_code},
    )


async def process_job(job: Job) -> None:
    """
    Process a job with the processor named by its `job_type` attribute.

    Args:
        job: The dequeued job.

    Raises:
        LookupError: If no processor is registered for the job type.
        Exception: Whatever the processor raises.
    """
    job_type = job.attributes.get("job_type") or get_settings().default_processor

    processor = get_processor(job_type)
    if processor is None:
        raise LookupError(f"No processor registered for job type: {job_type}")

    await processor(job)
