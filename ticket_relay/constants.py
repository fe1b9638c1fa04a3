"""
Application constants.
Centralized location for all constant values used across the application.
"""

from enum import StrEnum


class DiscardReason(StrEnum):
    """Why a popped queue entry was dropped instead of returned."""

    NOT_A_STRING = "not_a_string"
    INVALID_JSON = "invalid_json"
    NOT_A_MAPPING = "not_a_mapping"
    INVALID_JOB = "invalid_job"


class JobOutcome(StrEnum):
    """Per-job result of one drain iteration."""

    PROCESSED = "processed"
    FAILED = "failed"
    CONTENDED = "contended"


# Default values
DEFAULT_QUEUE_NAMESPACE = "fs:guru"
DEFAULT_LEASE_TTL_SECONDS = 180
DEFAULT_DONE_TTL_SECONDS = 6 * 3600
DEFAULT_DEQUEUE_MAX_ATTEMPTS = 10
MIN_JOBS_PER_DRAIN = 1
MAX_JOBS_PER_DRAIN = 5

# Key layout
QUEUE_KEY_SUFFIX = "queue"
LOCK_KEY_SEGMENT = "lock"
DONE_KEY_SEGMENT = "done"
SENTINEL_VALUE = "1"

# Identity key in queue entries, and the camel-case spelling also accepted
JOB_ID_FIELD = "job_id"
JOB_ID_ALIAS = "jobId"

# Length of raw entry kept in discard logs
ENTRY_PREVIEW_LENGTH = 200

# API constants
API_V1_PREFIX = "/v1"
BRIDGE_KEY_HEADER = "X-Bridge-Key"
WORKER_KEY_HEADER = "X-Worker-Key"
REQUEST_ID_HEADER = "X-Request-ID"
CRON_HEADER = "X-Vercel-Cron"
CRON_USER_AGENT = "vercel-cron/1.0"

# Metrics names
METRIC_QUEUE_DEPTH = "job_queue_depth"
METRIC_JOBS_ENQUEUED = "jobs_enqueued_total"
METRIC_JOBS_DEDUPED = "jobs_deduped_total"
METRIC_JOBS_COMPLETED = "jobs_completed_total"
METRIC_JOB_DURATION = "job_duration_seconds"
METRIC_ENTRIES_DISCARDED = "queue_entries_discarded_total"
METRIC_LEASE_ACQUIRED = "lease_acquired_total"
METRIC_LEASE_CONTENDED = "lease_contended_total"
METRIC_WORKER_KICKS = "worker_kicks_total"
METRIC_API_REQUESTS = "api_requests_total"
METRIC_API_LATENCY = "api_request_latency_seconds"

# Trace span names
SPAN_ENQUEUE_JOB = "enqueue_job"
SPAN_DEQUEUE_JOB = "dequeue_job"
SPAN_ACQUIRE_LEASE = "acquire_lease"
SPAN_EXECUTE_JOB = "execute_job"
SPAN_RELEASE_LEASE = "release_lease"
