"""Reminder fire-date computation and sent/unsent bookkeeping."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime

from lexdocket.domain.models import Reminder, ReminderChannel, ReminderRule
from lexdocket.errors import ValidationError


class ReminderScheduler:
    """Compute absolute reminder dates from days-before offsets.

    Offsets are plain calendar days. A reminder that has been sent is history
    and is never rescheduled.
    """

    def schedule(self, due_date: date, rules: Iterable[ReminderRule]) -> list[Reminder]:
        """Create unsent reminders for ``due_date``, one per rule."""
        return [
            Reminder.for_due_date(due_date, rule.offset_days, rule.channel) for rule in rules
        ]

    def recompute(self, reminders: Sequence[Reminder], new_due_date: date) -> list[Reminder]:
        """Move every unsent reminder relative to ``new_due_date``.

        Sent reminders are returned as they are.
        """
        recomputed: list[Reminder] = []
        for reminder in reminders:
            if reminder.sent:
                recomputed.append(reminder)
                continue
            recomputed.append(
                Reminder.for_due_date(new_due_date, reminder.offset_days, reminder.channel)
            )
        return recomputed

    def add(
        self,
        reminders: Sequence[Reminder],
        due_date: date,
        offset_days: int,
        channel: ReminderChannel,
    ) -> list[Reminder]:
        """Return ``reminders`` with a new unsent reminder appended."""
        if offset_days < 0:
            raise ValidationError(f"Reminder offset must be zero or positive, got {offset_days}")
        return [*reminders, Reminder.for_due_date(due_date, offset_days, channel)]

    def due(self, reminders: Iterable[Reminder], today: date) -> list[Reminder]:
        """Unsent reminders whose fire date has arrived."""
        return [r for r in reminders if not r.sent and r.scheduled_date <= today]

    def mark_sent(self, reminder: Reminder, delivered: bool, now: datetime) -> Reminder:
        """Record the outcome of a dispatch attempt.

        Only a confirmed delivery flips ``sent``; a failed attempt leaves the
        reminder unsent so the next sweep retries it. Call this after the
        transport returned, never before.
        """
        if reminder.sent or not delivered:
            return reminder
        return reminder.model_copy(update={"sent": True, "sent_at": now})
