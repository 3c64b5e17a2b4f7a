"""Hearing and deadline records.

Records are plain Pydantic models. Lifecycle transitions never mutate them in
place; they return updated copies plus any cascaded records (see
:mod:`lexdocket.domain.transitions`).
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import TYPE_CHECKING, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:  # pragma: no cover
    from lexdocket.calendar import CalendarEngine

HearingStatus = Literal["pending", "discussed", "postponed", "cancelled"]
HearingResult = Literal["won", "lost", "partially_won", "settlement", "withdrawn", "pending"]
DiscussionRound = Literal["Α′", "Β′", "Γ′", "Δ′", "Ε′", "other"]
OpponentKind = Literal["individual", "company", "public_entity"]

DeadlineStatus = Literal["pending", "completed", "extended", "cancelled", "overdue"]
Priority = Literal["low", "medium", "high", "urgent"]
DeadlineCategory = Literal[
    "filing",
    "addition_rebuttal",
    "legal_remedy",
    "administrative",
    "contractual",
    "judicial",
    "other",
]
ReminderChannel = Literal["email", "sms", "notification", "all"]
RecurrencePattern = Literal["daily", "weekly", "monthly", "yearly"]

DISCUSSION_ROUNDS: tuple[DiscussionRound, ...] = ("Α′", "Β′", "Γ′", "Δ′", "Ε′")
PRIORITY_RANK: dict[str, int] = {"low": 0, "medium": 1, "high": 2, "urgent": 3}

_TIME_PATTERN = r"^([01]?\d|2[0-3]):[0-5]\d$"


def new_record_id() -> str:
    """Opaque record identifier."""
    return uuid4().hex


def next_round(current: DiscussionRound) -> DiscussionRound:
    """Successor discussion round: Α′ → Β′ → Γ′ → Δ′ → Ε′ → other (other stays other)."""
    if current not in DISCUSSION_ROUNDS:
        return "other"
    index = DISCUSSION_ROUNDS.index(current)
    if index == len(DISCUSSION_ROUNDS) - 1:
        return "other"
    return DISCUSSION_ROUNDS[index + 1]


def parse_clock_time(value: str) -> time:
    hour, minute = value.split(":", 1)
    return time(int(hour), int(minute))


# ---------------------------------------------------------------------------
# Hearings
# ---------------------------------------------------------------------------


class CourtDescriptor(BaseModel):
    """Court degree, composition and seat."""

    degree: str = Field(..., min_length=1, description="e.g. Πρωτοδικείο, Εφετείο")
    composition: str = Field(..., min_length=1, description="e.g. Μονομελές, Πολυμελές")
    city: str = Field(..., min_length=1)
    department: str | None = None
    room: str | None = None

    def full_name(self) -> str:
        return f"{self.composition} {self.degree} {self.city}"


class Opponent(BaseModel):
    """Opposing party."""

    name: str = Field(..., min_length=1)
    kind: OpponentKind = "individual"
    lawyer: str | None = None


class AutomaticDeadlineConfig(BaseModel):
    """Tracking entry for a deadline generated ahead of a hearing."""

    name: str = Field(..., min_length=1)
    days_before: int = Field(..., ge=0)
    created: bool = False
    linked_deadline_id: str | None = None

    def key(self) -> tuple[str, int]:
        return (self.name, self.days_before)


class Hearing(BaseModel):
    """One scheduled appearance of a case before a court.

    A postponement never moves this row to a new date: the row is frozen as
    ``postponed`` and a continuation row is created (:meth:`continued_at`).
    """

    id: str = Field(default_factory=new_record_id)
    client_id: str
    court: CourtDescriptor
    case_type: str = Field(..., min_length=1)
    case_number: str | None = None
    hearing_date: date
    hearing_time: str | None = Field(default=None, pattern=_TIME_PATTERN)
    discussion_round: DiscussionRound = "Α′"
    opponent: Opponent
    status: HearingStatus = "pending"
    result: HearingResult = "pending"
    decision_number: str | None = None
    postponement_reason: str | None = None
    new_hearing_date: date | None = None
    next_hearing_id: str | None = None
    previous_hearing_id: str | None = None
    automatic_deadlines: list[AutomaticDeadlineConfig] = Field(default_factory=list)
    notes: str = Field(default="", max_length=2000)
    created_by: str | None = None
    last_modified_by: str | None = None
    discussed_by: str | None = None
    discussed_at: datetime | None = None

    @property
    def court_full_name(self) -> str:
        return self.court.full_name()

    @property
    def case_title(self) -> str:
        if self.case_number:
            return f"{self.case_type} ({self.case_number})"
        return self.case_type

    def days_until_hearing(self, today: date) -> int | None:
        """Calendar days until the hearing, None unless the hearing is pending."""
        if self.status != "pending":
            return None
        return (self.hearing_date - today).days

    def is_overdue(self, today: date) -> bool:
        """A pending hearing whose date has passed without being resolved."""
        return self.status == "pending" and self.hearing_date < today

    def continued_at(self, new_date: date, *, reason: str, by: str | None) -> Hearing:
        """Build the continuation row for a postponement to ``new_date``."""
        return Hearing(
            client_id=self.client_id,
            court=self.court.model_copy(),
            case_type=self.case_type,
            case_number=self.case_number,
            hearing_date=new_date,
            hearing_time=self.hearing_time,
            discussion_round=next_round(self.discussion_round),
            opponent=self.opponent.model_copy(),
            status="pending",
            previous_hearing_id=self.id,
            notes=f"Postponed from {self.hearing_date:%d/%m/%Y}. Reason: {reason}",
            created_by=by,
        )


# ---------------------------------------------------------------------------
# Deadlines
# ---------------------------------------------------------------------------


class ReminderRule(BaseModel):
    """Offset/channel pair from which a reminder is scheduled."""

    offset_days: int = Field(..., ge=0)
    channel: ReminderChannel = "notification"


class Reminder(BaseModel):
    """A reminder fire date derived from its deadline's due date."""

    offset_days: int = Field(..., ge=0)
    channel: ReminderChannel = "notification"
    scheduled_date: date
    sent: bool = False
    sent_at: datetime | None = None

    @classmethod
    def for_due_date(cls, due_date: date, offset_days: int, channel: ReminderChannel) -> Reminder:
        return cls(
            offset_days=offset_days,
            channel=channel,
            scheduled_date=due_date - timedelta(days=offset_days),
        )


class Extension(BaseModel):
    """Immutable record of one due-date change."""

    model_config = ConfigDict(frozen=True)

    original_date: date
    new_date: date
    reason: str
    extended_by: str | None = None
    extended_at: datetime


class Recurrence(BaseModel):
    """Recurrence settings for a repeating deadline."""

    enabled: bool = False
    pattern: RecurrencePattern | None = None
    interval: int = Field(default=1, ge=1)
    end_date: date | None = None
    occurrences_remaining: int | None = None
    next_occurrence_id: str | None = None
    next_occurrence_date: date | None = None


class Deadline(BaseModel):
    """A procedural due-date obligation, optionally tied to a hearing.

    ``overdue`` is never written by the engine: it is derived from the stored
    ``pending`` status and the due moment through :meth:`effective_status`.
    """

    id: str = Field(default_factory=new_record_id)
    client_id: str
    hearing_id: str | None = None
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    due_date: date
    due_time: str | None = Field(default=None, pattern=_TIME_PATTERN)
    priority: Priority = "medium"
    status: DeadlineStatus = "pending"
    category: DeadlineCategory = "other"
    working_days_only: bool = True
    tags: list[str] = Field(default_factory=list)
    assigned_to: list[str] = Field(default_factory=list)
    reminders: list[Reminder] = Field(default_factory=list)
    extensions: list[Extension] = Field(default_factory=list)
    recurrence: Recurrence = Field(default_factory=Recurrence)
    parent_deadline_id: str | None = None
    notes: str = ""
    completed_by: str | None = None
    completed_at: datetime | None = None
    created_by: str | None = None
    last_modified_by: str | None = None

    def is_past_due(self, now: datetime) -> bool:
        """True once the due moment lies before ``now``.

        Without a due time the whole due date counts, so the deadline is only
        past due from the following day.
        """
        if self.due_time is None:
            return self.due_date < now.date()
        due_moment = datetime.combine(
            self.due_date, parse_clock_time(self.due_time), tzinfo=now.tzinfo
        )
        return due_moment < now

    def effective_status(self, now: datetime) -> DeadlineStatus:
        if self.status == "pending" and self.is_past_due(now):
            return "overdue"
        return self.status

    def is_open(self) -> bool:
        """Still awaiting action (pending, extended or legacy overdue)."""
        return self.status in ("pending", "extended", "overdue")

    def days_until_due(self, today: date) -> int | None:
        if self.status != "pending":
            return None
        return (self.due_date - today).days

    def working_days_until_due(self, today: date, calendar: CalendarEngine) -> int | None:
        if self.status != "pending":
            return None
        if not self.working_days_only:
            return self.days_until_due(today)
        return calendar.count_working_days(today, self.due_date)

    def is_urgent(self, today: date, calendar: CalendarEngine, threshold: int = 3) -> bool:
        """Pending and due within ``threshold`` (working) days."""
        remaining = self.working_days_until_due(today, calendar)
        return remaining is not None and remaining <= threshold

    @classmethod
    def next_occurrence_from(cls, source: Deadline, next_date: date) -> Deadline:
        """Build the next deadline of a recurrence chain.

        Copies identity-independent fields, resets every reminder to unsent at
        its offset from ``next_date`` and points ``parent_deadline_id`` at the
        chain root.
        """
        remaining = source.recurrence.occurrences_remaining
        recurrence = source.recurrence.model_copy(
            update={
                "occurrences_remaining": remaining - 1 if remaining is not None else None,
                "next_occurrence_id": None,
                "next_occurrence_date": None,
            }
        )
        return cls(
            client_id=source.client_id,
            hearing_id=source.hearing_id,
            name=source.name,
            description=source.description,
            due_date=next_date,
            due_time=source.due_time,
            priority=source.priority,
            category=source.category,
            working_days_only=source.working_days_only,
            tags=list(source.tags),
            assigned_to=list(source.assigned_to),
            reminders=[
                Reminder.for_due_date(next_date, reminder.offset_days, reminder.channel)
                for reminder in source.reminders
            ],
            recurrence=recurrence,
            parent_deadline_id=source.parent_deadline_id or source.id,
            notes=f"Recurring deadline from: {source.name}",
            created_by=source.created_by,
        )


Record = Hearing | Deadline
