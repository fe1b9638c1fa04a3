"""
Worker module.
Contains the drain driver, job processors, and the scheduled worker process.
"""

from ticket_relay.worker.driver import WorkerDriver, clamp_max_jobs
from ticket_relay.worker.processors import (
    ProcessJob,
    get_processor,
    list_processors,
    process_job,
    register_processor,
)

__all__ = [
    "WorkerDriver",
    "clamp_max_jobs",
    "ProcessJob",
    "process_job",
    "register_processor",
    "get_processor",
    "list_processors",
]
