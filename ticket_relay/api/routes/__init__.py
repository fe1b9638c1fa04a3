"""
API routes module.
"""

from ticket_relay.api.routes.health import router as health_router
from ticket_relay.api.routes.tickets import router as tickets_router
from ticket_relay.api.routes.worker import router as worker_router

__all__ = ["tickets_router", "worker_router", "health_router"]
