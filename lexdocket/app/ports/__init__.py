"""Port interfaces for the lexdocket application layer.

These protocol interfaces define contracts for adapters.
Domain logic depends on these ports, never on concrete implementations.
"""

__all__ = [
    "AuditRecord",
    "DeliveryChannel",
    "LedgerPort",
    "NotificationPort",
    "RecordStorePort",
]

from lexdocket.app.ports.ledger import AuditRecord, LedgerPort
from lexdocket.app.ports.notification import DeliveryChannel, NotificationPort
from lexdocket.app.ports.record_store import RecordStorePort
