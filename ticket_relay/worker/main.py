"""
Worker process for draining the relay queue on a schedule.

Replaces the hosted cron trigger: every poll interval the worker runs one
bounded drain. A drain that fills its whole batch is followed immediately by
another, so a backlog is worked down without waiting for the next tick.
"""

import asyncio
import logging
import signal

from ticket_relay.config import get_settings
from ticket_relay.observability.logging import setup_logging
from ticket_relay.queue.facade import RelayQueue
from ticket_relay.store import close_store, init_store
from ticket_relay.worker.driver import WorkerDriver

logger = logging.getLogger(__name__)


class Worker:
    """
    Scheduled drain loop.

    Features:
    - One bounded drain per tick
    - Back-to-back drains while the queue stays full
    - Graceful shutdown on SIGTERM/SIGINT
    """

    def __init__(
        self,
        driver: WorkerDriver,
        poll_interval: float | None = None,
        batch_size: int | None = None,
    ):
        """
        Initialize the worker.

        Args:
            driver: The drain driver.
            poll_interval: Seconds between drains when the queue is idle.
            batch_size: Jobs requested per drain. Defaults to the configured maximum.
        """
        settings = get_settings()

        self.driver = driver
        self.poll_interval = (
            settings.worker_poll_interval_seconds if poll_interval is None else poll_interval
        )
        self.batch_size = settings.worker_max_jobs if batch_size is None else batch_size

        self._running = False
        self._wakeup = asyncio.Event()

    async def start(self) -> None:
        """Start the worker."""
        logger.info(
            "Worker starting",
            extra={"worker_id": self.driver.worker_id, "batch_size": self.batch_size},
        )

        self._running = True

        while self._running:
            try:
                result = await self.driver.drain(self.batch_size)

                # A full batch may mean more work is waiting
                if not result.empty and result.attempted >= self.batch_size:
                    continue

            except Exception as e:
                logger.exception(
                    f"Error in worker loop: {e}",
                    extra={"worker_id": self.driver.worker_id},
                )

            await self._sleep()

        logger.info("Worker stopped", extra={"worker_id": self.driver.worker_id})

    async def stop(self) -> None:
        """Stop the worker gracefully."""
        logger.info("Worker stopping", extra={"worker_id": self.driver.worker_id})
        self._running = False
        self._wakeup.set()

    async def _sleep(self) -> None:
        try:
            await asyncio.wait_for(self._wakeup.wait(), timeout=self.poll_interval)
        except asyncio.TimeoutError:
            pass


async def run_async() -> None:
    """Run the worker asynchronously."""
    setup_logging()
    settings = get_settings()
    store = await init_store()

    worker = Worker(WorkerDriver(RelayQueue.from_settings(store, settings)))

    # Handle shutdown signals
    loop = asyncio.get_running_loop()

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(
            sig,
            lambda: asyncio.create_task(worker.stop())
        )

    try:
        await worker.start()
    finally:
        await close_store()


def run() -> None:
    """Run the worker."""
    asyncio.run(run_async())


if __name__ == "__main__":
    run()
