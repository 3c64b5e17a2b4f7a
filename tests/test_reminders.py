"""Tests for reminder scheduling and sent/unsent bookkeeping."""

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from lexdocket.domain import Reminder, ReminderRule, ReminderScheduler
from lexdocket.errors import ValidationError

NOW = datetime(2025, 6, 13, 9, 0, tzinfo=UTC)


@pytest.fixture()
def scheduler() -> ReminderScheduler:
    return ReminderScheduler()


def test_schedule_computes_fire_dates(scheduler: ReminderScheduler) -> None:
    reminders = scheduler.schedule(
        date(2025, 6, 20),
        [ReminderRule(offset_days=7), ReminderRule(offset_days=1, channel="email")],
    )

    assert [r.scheduled_date for r in reminders] == [date(2025, 6, 13), date(2025, 6, 19)]
    assert [r.channel for r in reminders] == ["notification", "email"]
    assert not any(r.sent for r in reminders)


def test_recompute_moves_only_unsent(scheduler: ReminderScheduler) -> None:
    sent = Reminder(
        offset_days=7,
        scheduled_date=date(2025, 6, 13),
        sent=True,
        sent_at=NOW,
    )
    unsent = Reminder.for_due_date(date(2025, 6, 20), 1, "sms")

    recomputed = scheduler.recompute([sent, unsent], date(2025, 6, 30))

    assert recomputed[0] == sent
    assert recomputed[1].scheduled_date == date(2025, 6, 29)
    assert recomputed[1].channel == "sms"
    assert not recomputed[1].sent


def test_add_appends_reminder(scheduler: ReminderScheduler) -> None:
    reminders = scheduler.add([], date(2025, 6, 20), 3, "all")

    assert len(reminders) == 1
    assert reminders[0].scheduled_date == date(2025, 6, 17)
    assert reminders[0].channel == "all"


def test_add_rejects_negative_offset(scheduler: ReminderScheduler) -> None:
    with pytest.raises(ValidationError):
        scheduler.add([], date(2025, 6, 20), -1, "email")


def test_due_returns_unsent_reminders_that_have_arrived(scheduler: ReminderScheduler) -> None:
    reminders = scheduler.schedule(
        date(2025, 6, 20),
        [ReminderRule(offset_days=7), ReminderRule(offset_days=3), ReminderRule(offset_days=1)],
    )
    reminders[0] = scheduler.mark_sent(reminders[0], True, NOW)

    due = scheduler.due(reminders, date(2025, 6, 17))

    assert [r.offset_days for r in due] == [3]


def test_mark_sent_only_after_confirmed_delivery(scheduler: ReminderScheduler) -> None:
    reminder = Reminder.for_due_date(date(2025, 6, 20), 7, "email")

    failed = scheduler.mark_sent(reminder, False, NOW)
    delivered = scheduler.mark_sent(reminder, True, NOW)

    assert not failed.sent
    assert failed.sent_at is None
    assert delivered.sent
    assert delivered.sent_at == NOW
    assert not reminder.sent


def test_mark_sent_keeps_first_delivery_time(scheduler: ReminderScheduler) -> None:
    reminder = scheduler.mark_sent(Reminder.for_due_date(date(2025, 6, 20), 7, "sms"), True, NOW)
    later = datetime(2025, 6, 14, 9, 0, tzinfo=UTC)

    assert scheduler.mark_sent(reminder, True, later).sent_at == NOW
