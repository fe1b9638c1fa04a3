"""
FastAPI dependencies for the queue facade, drain driver and kicker.
"""

from typing import Annotated

from fastapi import Depends

from ticket_relay.config import get_settings
from ticket_relay.producer.kick import WorkerKicker
from ticket_relay.queue.facade import RelayQueue
from ticket_relay.store import KeyValueStore, get_store
from ticket_relay.worker.driver import WorkerDriver


def get_relay(store: Annotated[KeyValueStore, Depends(get_store)]) -> RelayQueue:
    """Queue facade over the active store."""
    return RelayQueue.from_settings(store, get_settings())


def get_driver(relay: Annotated[RelayQueue, Depends(get_relay)]) -> WorkerDriver:
    """Drain driver for one request."""
    return WorkerDriver(relay)


def get_kicker() -> WorkerKicker:
    """Best-effort worker kicker."""
    return WorkerKicker()


Relay = Annotated[RelayQueue, Depends(get_relay)]
Driver = Annotated[WorkerDriver, Depends(get_driver)]
Kicker = Annotated[WorkerKicker, Depends(get_kicker)]
