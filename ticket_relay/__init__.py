"""
Ticket Relay

Accepts help-desk ticket webhooks, stores them in a shared key-value queue,
and drains them with TTL leases and a completion ledger so each ticket is
processed at most once per lease window across concurrent workers.
"""

__version__ = "1.0.0"
