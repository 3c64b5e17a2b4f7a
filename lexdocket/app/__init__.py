"""Application layer: ports, adapters and services wiring the domain together."""

from lexdocket.app.audit_service import AuditService
from lexdocket.app.docket_service import DocketService
from lexdocket.app.reminder_service import ReminderDispatchService, SweepReport

__all__ = [
    "AuditService",
    "DocketService",
    "ReminderDispatchService",
    "SweepReport",
]
