"""Court hearing state machine.

``pending`` is the only state that accepts a verb; ``discussed``,
``postponed`` and ``cancelled`` are terminal for the row. The case continues
through rows spawned by the transition (a continuation hearing or a
follow-up deadline).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, timedelta

from lexdocket.calendar import DEFAULT_CALENDAR, CalendarEngine
from lexdocket.domain.models import (
    AutomaticDeadlineConfig,
    Deadline,
    Hearing,
    HearingResult,
    ReminderRule,
)
from lexdocket.domain.reminders import ReminderScheduler
from lexdocket.domain.transitions import Clock, Transition, utc_now
from lexdocket.errors import InvalidTransitionError, ValidationError

ADDITION_REBUTTAL = "addition/rebuttal"
CASE_REVIVAL = "case revival"


class HearingLifecycle:
    """Transitions over a :class:`Hearing` record."""

    def __init__(
        self,
        calendar: CalendarEngine = DEFAULT_CALENDAR,
        scheduler: ReminderScheduler | None = None,
        *,
        clock: Clock = utc_now,
        followup_working_days: int = 5,
        revival_days: int = 90,
        reminder_rules: Sequence[ReminderRule] = (),
    ) -> None:
        """Initialize the hearing lifecycle.

        Args:
            calendar: Working-day calendar for the discussion follow-up
            scheduler: Reminder scheduler for cascaded deadlines
            clock: Returns the current moment
            followup_working_days: Working days after a discussed hearing
            revival_days: Calendar days after a cancellation
            reminder_rules: Reminders attached to every cascaded deadline
        """
        self.calendar = calendar
        self.scheduler = scheduler or ReminderScheduler()
        self.clock = clock
        self.followup_working_days = followup_working_days
        self.revival_days = revival_days
        self.reminder_rules = list(reminder_rules)

    def _require_pending(self, hearing: Hearing, action: str) -> None:
        if hearing.status != "pending":
            raise InvalidTransitionError("hearing", hearing.id, hearing.status, action)

    def _cascade_deadline(
        self,
        hearing: Hearing,
        *,
        name: str,
        due_date: date,
        priority: str,
        by: str | None,
        notes: str,
        category: str = "other",
    ) -> Deadline:
        return Deadline(
            client_id=hearing.client_id,
            hearing_id=hearing.id,
            name=name,
            due_date=due_date,
            priority=priority,
            category=category,
            reminders=self.scheduler.schedule(due_date, self.reminder_rules),
            notes=notes,
            created_by=by,
        )

    def discuss(
        self,
        hearing: Hearing,
        by: str | None,
        *,
        result: HearingResult | None = None,
    ) -> Transition:
        """Mark the hearing as discussed and open the addition/rebuttal deadline.

        The deadline falls ``followup_working_days`` working days after the
        hearing date.
        """
        self._require_pending(hearing, "discuss")
        now = self.clock()

        update: dict[str, object] = {
            "status": "discussed",
            "discussed_by": by,
            "discussed_at": now,
            "last_modified_by": by,
        }
        if result is not None:
            update["result"] = result
        discussed = hearing.model_copy(update=update, deep=True)

        followup = self._cascade_deadline(
            hearing,
            name=ADDITION_REBUTTAL,
            due_date=self.calendar.add_working_days(
                hearing.hearing_date, self.followup_working_days
            ),
            priority="high",
            category="addition_rebuttal",
            by=by,
            notes=f"Automatic deadline after the discussion of {hearing.case_title}",
        )
        return Transition(operation="hearing.discuss", primary=discussed, creates=(followup,))

    def postpone(
        self,
        hearing: Hearing,
        new_date: date,
        reason: str,
        by: str | None,
    ) -> Transition:
        """Freeze the hearing as postponed and spawn its continuation at ``new_date``.

        The original row keeps its hearing date and gains a forward reference;
        the continuation row advances the discussion round.
        """
        self._require_pending(hearing, "postpone")
        if not reason or not reason.strip():
            raise ValidationError("A postponement reason is required")

        continuation = hearing.continued_at(new_date, reason=reason, by=by)
        postponed = hearing.model_copy(
            update={
                "status": "postponed",
                "postponement_reason": reason,
                "new_hearing_date": new_date,
                "next_hearing_id": continuation.id,
                "last_modified_by": by,
            },
            deep=True,
        )
        return Transition(operation="hearing.postpone", primary=postponed, creates=(continuation,))

    def cancel(self, hearing: Hearing, by: str | None) -> Transition:
        """Cancel the hearing and open a case revival deadline.

        The revival deadline counts plain calendar days from today.
        """
        self._require_pending(hearing, "cancel")
        today = self.clock().date()

        cancelled = hearing.model_copy(
            update={"status": "cancelled", "last_modified_by": by}, deep=True
        )
        revival = self._cascade_deadline(
            hearing,
            name=CASE_REVIVAL,
            due_date=today + timedelta(days=self.revival_days),
            priority="medium",
            by=by,
            notes=f"Revival deadline for cancelled {hearing.case_title}",
        )
        return Transition(operation="hearing.cancel", primary=cancelled, creates=(revival,))

    def create_automatic_deadlines(
        self,
        hearing: Hearing,
        configs: Iterable[AutomaticDeadlineConfig],
        by: str | None,
    ) -> Transition:
        """Create one deadline per config, ``days_before`` calendar days before the hearing.

        Configs already tracked on the hearing as created are skipped, so
        repeating the call never duplicates deadlines.
        """
        tracked = [config.model_copy() for config in hearing.automatic_deadlines]
        by_key = {config.key(): config for config in tracked}
        created: list[Deadline] = []

        for config in configs:
            entry = by_key.get(config.key())
            if entry is None:
                entry = config.model_copy()
                tracked.append(entry)
                by_key[entry.key()] = entry
            if entry.created:
                continue

            deadline = self._cascade_deadline(
                hearing,
                name=entry.name,
                due_date=hearing.hearing_date - timedelta(days=entry.days_before),
                priority="high",
                by=by,
                notes=f"Automatic deadline for {hearing.case_title}",
            )
            entry.created = True
            entry.linked_deadline_id = deadline.id
            created.append(deadline)

        updated = hearing.model_copy(update={"automatic_deadlines": tracked}, deep=True)
        if created:
            updated.last_modified_by = by
        return Transition(
            operation="hearing.auto_deadlines", primary=updated, creates=tuple(created)
        )
