"""Reminder dispatch sweep."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from lexdocket.app.ports import DeliveryChannel, LedgerPort, NotificationPort, RecordStorePort
from lexdocket.domain import Deadline, Reminder, ReminderScheduler
from lexdocket.domain.transitions import Clock, utc_now

logger = logging.getLogger(__name__)

FAN_OUT_CHANNELS: tuple[DeliveryChannel, ...] = ("email", "sms", "notification")


@dataclass(slots=True)
class SweepReport:
    """Outcome of one reminder sweep."""

    sent: int = 0
    failed: int = 0
    deadline_ids: list[str] = field(default_factory=list)
    # Delivered, but the sent flags could not be saved; resent next sweep.
    unrecorded: list[str] = field(default_factory=list)


def render_message(deadline: Deadline, now: datetime) -> str:
    due = f"{deadline.due_date:%d/%m/%Y}"
    if deadline.due_time:
        due = f"{due} {deadline.due_time}"
    days_left = (deadline.due_date - now.date()).days
    return f"Deadline '{deadline.name}' is due {due} ({days_left} day(s) left)"


@dataclass(slots=True)
class ReminderDispatchService:
    """Send reminders that have come due and record which ones were delivered.

    Dispatch happens first; a reminder is marked sent only after the
    transport confirmed it. Failed reminders stay unsent and are retried by
    the next sweep.
    """

    store: RecordStorePort
    notifier: NotificationPort
    ledger: LedgerPort
    scheduler: ReminderScheduler = field(default_factory=ReminderScheduler)
    clock: Clock = utc_now

    def sweep(self, now: datetime | None = None) -> SweepReport:
        now = now or self.clock()
        today = now.date()
        report = SweepReport()

        for deadline in self.store.list_deadlines():
            if not deadline.is_open():
                continue
            if not self.scheduler.due(deadline.reminders, today):
                continue

            reminders: list[Reminder] = []
            changed = False
            for reminder in deadline.reminders:
                if reminder.sent or reminder.scheduled_date > today:
                    reminders.append(reminder)
                    continue
                delivered = self._dispatch(deadline, reminder, now)
                if delivered:
                    report.sent += 1
                    changed = True
                else:
                    report.failed += 1
                reminders.append(self.scheduler.mark_sent(reminder, delivered, now))

            if changed:
                updated = deadline.model_copy(update={"reminders": reminders}, deep=True)
                try:
                    self.store.save(updated)
                except Exception as exc:
                    logger.warning(
                        "Reminders for deadline %s were sent but not recorded: %s",
                        deadline.id,
                        exc,
                    )
                    report.unrecorded.append(deadline.id)
                    continue
                report.deadline_ids.append(deadline.id)

        logger.info("Reminder sweep for %s: %d sent, %d failed", today, report.sent, report.failed)
        if report.sent or report.failed:
            self.ledger.log(
                operation="reminders.sweep",
                inputs=list(report.deadline_ids),
                outputs=[],
                args={
                    "date": today.isoformat(),
                    "sent": report.sent,
                    "failed": report.failed,
                    "unrecorded": list(report.unrecorded),
                },
            )
        return report

    def _dispatch(self, deadline: Deadline, reminder: Reminder, now: datetime) -> bool:
        recipient = deadline.assigned_to[0] if deadline.assigned_to else deadline.client_id
        message = render_message(deadline, now)
        channels = FAN_OUT_CHANNELS if reminder.channel == "all" else (reminder.channel,)

        delivered = True
        for channel in channels:
            try:
                ok = self.notifier.send(channel, recipient, message)
            except Exception as exc:
                logger.warning(
                    "Reminder for deadline %s via %s raised: %s", deadline.id, channel, exc
                )
                ok = False
            if not ok:
                logger.warning(
                    "Reminder for deadline %s via %s was not delivered", deadline.id, channel
                )
                delivered = False
        return delivered
