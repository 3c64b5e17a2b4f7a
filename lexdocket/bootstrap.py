"""Application bootstrap wiring ports, adapters, and services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any

from lexdocket.app import AuditService, DocketService, ReminderDispatchService
from lexdocket.app.adapters import JSONLRecordStore, LogNotifier
from lexdocket.app.ports import LedgerPort, NotificationPort, RecordStorePort
from lexdocket.audit.ledger import AuditLedger
from lexdocket.calendar import DEFAULT_CALENDAR, CalendarEngine
from lexdocket.config import Settings, get_settings
from lexdocket.domain import DeadlineLifecycle, HearingLifecycle, ReminderRule, ReminderScheduler
from lexdocket.domain.transitions import Clock
from lexdocket.rules import RulesEngine


@dataclass(slots=True)
class ApplicationContainer:
    """Aggregates wired services and adapters for the CLI layer."""

    settings: Settings
    calendar: CalendarEngine
    clock: Clock
    store: RecordStorePort
    notifier: NotificationPort
    ledger_port: LedgerPort
    docket_service: DocketService
    reminder_service: ReminderDispatchService
    audit_service: AuditService
    rules_engine: RulesEngine
    reminder_rules: list[ReminderRule]


class NoOpLedger:
    """Ledger implementation that drops all writes."""

    def log(self, *args: Any, **kwargs: Any) -> None:
        return None

    def read_all(self) -> list[Any]:
        return []

    def verify(self) -> tuple[bool, str | None]:
        return (True, None)


def zone_clock(zone: tzinfo) -> Clock:
    """Clock returning the current moment in ``zone``."""

    def now() -> datetime:
        return datetime.now(zone)

    return now


def default_reminder_rules(settings: Settings) -> list[ReminderRule]:
    return [
        ReminderRule(offset_days=offset, channel=settings.default_reminder_channel)
        for offset in settings.default_reminder_offsets
    ]


def bootstrap_application(
    settings: Settings | None = None,
    *,
    store: RecordStorePort | None = None,
    notifier: NotificationPort | None = None,
    clock: Clock | None = None,
) -> ApplicationContainer:
    """Create the application container with default adapters.

    ``store``, ``notifier`` and ``clock`` replace the defaults when given.
    """
    active_settings = settings or get_settings()
    calendar = DEFAULT_CALENDAR
    active_clock = clock or zone_clock(active_settings.get_tzinfo())
    reminder_rules = default_reminder_rules(active_settings)

    ledger: LedgerPort
    if active_settings.audit_enabled:
        ledger = AuditLedger(active_settings.get_audit_path())
    else:
        ledger = NoOpLedger()

    record_store = store or JSONLRecordStore(active_settings.get_store_path())
    active_notifier = notifier or LogNotifier()
    scheduler = ReminderScheduler()

    hearings = HearingLifecycle(
        calendar,
        scheduler,
        clock=active_clock,
        followup_working_days=active_settings.discussion_followup_working_days,
        revival_days=active_settings.revival_days,
        reminder_rules=reminder_rules,
    )
    deadlines = DeadlineLifecycle(scheduler, clock=active_clock)

    docket_service = DocketService(
        store=record_store,
        hearings=hearings,
        deadlines=deadlines,
        ledger=ledger,
        calendar=calendar,
        clock=active_clock,
        urgent_threshold_days=active_settings.urgent_threshold_days,
    )
    reminder_service = ReminderDispatchService(
        store=record_store,
        notifier=active_notifier,
        ledger=ledger,
        scheduler=scheduler,
        clock=active_clock,
    )

    return ApplicationContainer(
        settings=active_settings,
        calendar=calendar,
        clock=active_clock,
        store=record_store,
        notifier=active_notifier,
        ledger_port=ledger,
        docket_service=docket_service,
        reminder_service=reminder_service,
        audit_service=AuditService(ledger if active_settings.audit_enabled else None),
        rules_engine=RulesEngine(active_settings.get_rules_dir(), calendar),
        reminder_rules=reminder_rules,
    )
