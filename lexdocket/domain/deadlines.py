"""Procedural deadline state machine with extension history and recurrence."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from dateutil.relativedelta import relativedelta

from lexdocket.domain.models import Deadline, Extension, ReminderChannel
from lexdocket.domain.reminders import ReminderScheduler
from lexdocket.domain.transitions import Clock, Transition, utc_now
from lexdocket.errors import InvalidTransitionError, ValidationError

TERMINAL_STATUSES = frozenset({"completed", "cancelled"})


def advance(due_date: date, pattern: str, interval: int) -> date:
    """Shift ``due_date`` by one recurrence step.

    Calendar arithmetic; monthly and yearly steps clamp to the end of shorter
    months (31 January + 1 month = 28/29 February).
    """
    if pattern == "daily":
        return due_date + timedelta(days=interval)
    if pattern == "weekly":
        return due_date + timedelta(weeks=interval)
    if pattern == "monthly":
        return due_date + relativedelta(months=interval)
    if pattern == "yearly":
        return due_date + relativedelta(years=interval)
    raise ValidationError(f"Unknown recurrence pattern: {pattern!r}")


class DeadlineLifecycle:
    """Transitions over a :class:`Deadline` record.

    ``completed`` and ``cancelled`` are terminal. ``extended`` behaves like
    ``pending`` for further verbs, and so does the derived ``overdue``.
    """

    def __init__(
        self,
        scheduler: ReminderScheduler | None = None,
        *,
        clock: Clock = utc_now,
    ) -> None:
        self.scheduler = scheduler or ReminderScheduler()
        self.clock = clock

    def _require_open(self, deadline: Deadline, action: str) -> None:
        if deadline.status in TERMINAL_STATUSES:
            raise InvalidTransitionError("deadline", deadline.id, deadline.status, action)

    def complete(self, deadline: Deadline, by: str | None) -> Transition:
        """Mark the deadline completed; a recurring deadline spawns its next occurrence."""
        self._require_open(deadline, "complete")
        now = self.clock()

        completed = deadline.model_copy(
            update={
                "status": "completed",
                "completed_by": by,
                "completed_at": now,
                "last_modified_by": by,
            },
            deep=True,
        )

        creates: tuple[Deadline, ...] = ()
        recurrence = completed.recurrence
        if recurrence.enabled and recurrence.next_occurrence_id is None:
            following = self.create_next_occurrence(completed, now=now)
            if following is not None:
                recurrence.next_occurrence_id = following.id
                recurrence.next_occurrence_date = following.due_date
                creates = (following,)

        return Transition(operation="deadline.complete", primary=completed, creates=creates)

    def extend(
        self,
        deadline: Deadline,
        new_date: date,
        reason: str,
        by: str | None,
    ) -> Transition:
        """Move the due date, recording the change in the extension history.

        Unsent reminders follow the new due date; sent ones stay as they were.
        """
        self._require_open(deadline, "extend")
        if not reason or not reason.strip():
            raise ValidationError("An extension reason is required")

        extension = Extension(
            original_date=deadline.due_date,
            new_date=new_date,
            reason=reason,
            extended_by=by,
            extended_at=self.clock(),
        )
        extended = deadline.model_copy(
            update={
                "extensions": [*deadline.extensions, extension],
                "due_date": new_date,
                "status": "extended",
                "reminders": self.scheduler.recompute(deadline.reminders, new_date),
                "last_modified_by": by,
            },
            deep=True,
        )
        return Transition(operation="deadline.extend", primary=extended)

    def cancel(self, deadline: Deadline, by: str | None, reason: str | None = None) -> Transition:
        self._require_open(deadline, "cancel")

        notes = deadline.notes
        if reason:
            notes = f"{notes}\nCancelled: {reason}" if notes else f"Cancelled: {reason}"

        cancelled = deadline.model_copy(
            update={"status": "cancelled", "notes": notes, "last_modified_by": by}, deep=True
        )
        return Transition(operation="deadline.cancel", primary=cancelled)

    def add_reminder(
        self,
        deadline: Deadline,
        offset_days: int,
        channel: ReminderChannel,
        by: str | None,
    ) -> Transition:
        self._require_open(deadline, "add a reminder to")
        updated = deadline.model_copy(
            update={
                "reminders": self.scheduler.add(
                    deadline.reminders, deadline.due_date, offset_days, channel
                ),
                "last_modified_by": by,
            },
            deep=True,
        )
        return Transition(operation="deadline.add_reminder", primary=updated)

    def create_next_occurrence(
        self,
        deadline: Deadline,
        *,
        now: datetime | None = None,
    ) -> Deadline | None:
        """Build the next deadline of a recurrence chain, or None when the chain is exhausted.

        The chain ends when recurrence is disabled, the end date has passed
        (strictly before today) or no occurrences remain. The caller records
        the returned id on the source deadline.
        """
        recurrence = deadline.recurrence
        if not recurrence.enabled or recurrence.pattern is None:
            return None

        today = (now or self.clock()).date()
        if recurrence.end_date is not None and today > recurrence.end_date:
            return None
        if recurrence.occurrences_remaining is not None and recurrence.occurrences_remaining <= 0:
            return None

        next_date = advance(deadline.due_date, recurrence.pattern, recurrence.interval)
        return Deadline.next_occurrence_from(deadline, next_date)
