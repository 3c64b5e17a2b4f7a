"""Docket orchestration: load, transition, commit, audit."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any

from lexdocket.app.ports import LedgerPort, RecordStorePort
from lexdocket.calendar import DEFAULT_CALENDAR, CalendarEngine
from lexdocket.domain import (
    AutomaticDeadlineConfig,
    Deadline,
    DeadlineLifecycle,
    Hearing,
    HearingLifecycle,
    Transition,
)
from lexdocket.domain.models import PRIORITY_RANK, HearingResult, ReminderChannel
from lexdocket.domain.transitions import Clock, utc_now
from lexdocket.errors import CascadeFailureError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DocketService:
    """Caller-facing surface over hearings and deadlines.

    Every verb loads the record, runs the lifecycle transition, commits the
    primary record with its cascade in one store call and then writes one
    ledger entry. Nothing is logged to the ledger for a failed commit.
    """

    store: RecordStorePort
    hearings: HearingLifecycle
    deadlines: DeadlineLifecycle
    ledger: LedgerPort
    calendar: CalendarEngine = DEFAULT_CALENDAR
    clock: Clock = utc_now
    urgent_threshold_days: int = 3

    def _commit(self, transition: Transition, **args: Any) -> Transition:
        try:
            self.store.commit(transition)
        except Exception as exc:
            raise CascadeFailureError(
                f"{transition.operation} on {transition.primary.id} was not committed: {exc}"
            ) from exc

        created = transition.created_ids()
        logger.info(
            "%s %s committed (%d cascaded record(s))",
            transition.operation,
            transition.primary.id,
            len(created),
        )
        self.ledger.log(
            operation=transition.operation,
            inputs=[transition.primary.id],
            outputs=created,
            args={key: _jsonable(value) for key, value in args.items()},
        )
        return transition

    # ------------------------------------------------------------------#
    # Registration
    # ------------------------------------------------------------------#

    def register_hearing(self, hearing: Hearing) -> Hearing:
        self.store.save(hearing)
        logger.info("Registered hearing %s on %s", hearing.id, hearing.hearing_date)
        self.ledger.log(
            operation="hearing.register",
            inputs=[],
            outputs=[hearing.id],
            args={"hearing_date": hearing.hearing_date.isoformat()},
        )
        return hearing

    def register_deadline(self, deadline: Deadline) -> Deadline:
        self.store.save(deadline)
        logger.info("Registered deadline %s due %s", deadline.id, deadline.due_date)
        self.ledger.log(
            operation="deadline.register",
            inputs=[],
            outputs=[deadline.id],
            args={"due_date": deadline.due_date.isoformat()},
        )
        return deadline

    # ------------------------------------------------------------------#
    # Hearing verbs
    # ------------------------------------------------------------------#

    def discuss_hearing(
        self, hearing_id: str, by: str | None, *, result: HearingResult | None = None
    ) -> Transition:
        hearing = self.store.load_hearing(hearing_id)
        transition = self.hearings.discuss(hearing, by, result=result)
        return self._commit(transition, by=by, result=result)

    def postpone_hearing(
        self, hearing_id: str, new_date: date, reason: str, by: str | None
    ) -> Transition:
        hearing = self.store.load_hearing(hearing_id)
        transition = self.hearings.postpone(hearing, new_date, reason, by)
        return self._commit(transition, by=by, new_date=new_date, reason=reason)

    def cancel_hearing(self, hearing_id: str, by: str | None) -> Transition:
        hearing = self.store.load_hearing(hearing_id)
        transition = self.hearings.cancel(hearing, by)
        return self._commit(transition, by=by)

    def create_automatic_deadlines(
        self,
        hearing_id: str,
        configs: Iterable[AutomaticDeadlineConfig],
        by: str | None,
    ) -> Transition:
        hearing = self.store.load_hearing(hearing_id)
        configs = list(configs)
        transition = self.hearings.create_automatic_deadlines(hearing, configs, by)
        return self._commit(
            transition, by=by, configs=[f"{c.name}:{c.days_before}" for c in configs]
        )

    # ------------------------------------------------------------------#
    # Deadline verbs
    # ------------------------------------------------------------------#

    def complete_deadline(self, deadline_id: str, by: str | None) -> Transition:
        deadline = self.store.load_deadline(deadline_id)
        transition = self.deadlines.complete(deadline, by)
        return self._commit(transition, by=by)

    def extend_deadline(
        self, deadline_id: str, new_date: date, reason: str, by: str | None
    ) -> Transition:
        deadline = self.store.load_deadline(deadline_id)
        transition = self.deadlines.extend(deadline, new_date, reason, by)
        return self._commit(
            transition,
            by=by,
            original_date=deadline.due_date,
            new_date=new_date,
            reason=reason,
        )

    def cancel_deadline(
        self, deadline_id: str, by: str | None, reason: str | None = None
    ) -> Transition:
        deadline = self.store.load_deadline(deadline_id)
        transition = self.deadlines.cancel(deadline, by, reason)
        return self._commit(transition, by=by, reason=reason)

    def add_reminder(
        self,
        deadline_id: str,
        offset_days: int,
        channel: ReminderChannel,
        by: str | None,
    ) -> Transition:
        deadline = self.store.load_deadline(deadline_id)
        transition = self.deadlines.add_reminder(deadline, offset_days, channel, by)
        return self._commit(transition, by=by, offset_days=offset_days, channel=channel)

    # ------------------------------------------------------------------#
    # Queries
    # ------------------------------------------------------------------#

    def today(self) -> date:
        return self.clock().date()

    def upcoming_deadlines(self, days: int = 7) -> list[Deadline]:
        """Pending or extended deadlines due between today and ``days`` from now.

        Sorted by priority (most urgent first), then by due date.
        """
        today = self.today()
        horizon = today + timedelta(days=days)
        upcoming = [
            d
            for d in self.store.list_deadlines()
            if d.status in ("pending", "extended") and today <= d.due_date <= horizon
        ]
        return sorted(upcoming, key=lambda d: (-PRIORITY_RANK[d.priority], d.due_date))

    def overdue_deadlines(self) -> list[Deadline]:
        now = self.clock()
        overdue = [d for d in self.store.list_deadlines() if d.effective_status(now) == "overdue"]
        return sorted(overdue, key=lambda d: d.due_date)

    def urgent_deadlines(self) -> list[Deadline]:
        today = self.today()
        return [
            d
            for d in self.store.list_deadlines()
            if d.due_date >= today
            and d.is_urgent(today, self.calendar, self.urgent_threshold_days)
        ]

    def upcoming_hearings(self, days: int = 30) -> list[Hearing]:
        today = self.today()
        horizon = today + timedelta(days=days)
        upcoming = [
            h
            for h in self.store.list_hearings()
            if h.status == "pending" and today <= h.hearing_date <= horizon
        ]
        return sorted(upcoming, key=lambda h: (h.hearing_date, h.hearing_time or ""))

    def deadline_stats(self) -> dict[str, Any]:
        """Counts of deadlines by effective status, priority and category."""
        now = self.clock()
        deadlines = self.store.list_deadlines()
        return {
            "total": len(deadlines),
            "by_status": dict(Counter(d.effective_status(now) for d in deadlines)),
            "by_priority": dict(Counter(d.priority for d in deadlines)),
            "by_category": dict(Counter(d.category for d in deadlines)),
        }

    def hearing_chain(self, hearing_id: str) -> list[Hearing]:
        """Every row of a postponement chain, oldest first."""
        hearing = self.store.load_hearing(hearing_id)
        seen = {hearing.id}
        while hearing.previous_hearing_id and hearing.previous_hearing_id not in seen:
            hearing = self.store.load_hearing(hearing.previous_hearing_id)
            seen.add(hearing.id)

        chain = [hearing]
        visited = {hearing.id}
        while chain[-1].next_hearing_id and chain[-1].next_hearing_id not in visited:
            following = self.store.load_hearing(chain[-1].next_hearing_id)
            visited.add(following.id)
            chain.append(following)
        return chain


def _jsonable(value: Any) -> Any:
    if isinstance(value, date):
        return value.isoformat()
    return value
