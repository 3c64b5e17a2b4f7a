"""Rules engine computing procedural deadlines from triggering events."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from lexdocket.calendar import DEFAULT_CALENDAR, CalendarEngine
from lexdocket.domain import Deadline, ReminderRule, ReminderScheduler
from lexdocket.domain.models import DeadlineCategory, Priority
from lexdocket.errors import ValidationError

Unit = Literal["working", "calendar"]
Direction = Literal["after", "before"]


class OffsetSpec(BaseModel):
    """Relative offset configuration for a deadline."""

    days: int = Field(default=0, ge=0)
    unit: Unit = "working"
    direction: Direction = "after"
    court_date: bool = Field(
        default=False,
        description="Roll the result forward to the next court date (working day outside recess)",
    )


class DeadlineSpec(BaseModel):
    """Single deadline entry associated with a triggering event."""

    name: str
    category: DeadlineCategory = "other"
    priority: Priority = "high"
    offset: OffsetSpec = Field(default_factory=OffsetSpec)
    cite: str = ""
    notes: str = ""


class EventSpec(BaseModel):
    """Rule pack event containing one or more deadlines."""

    description: str = ""
    deadlines: list[DeadlineSpec] = Field(default_factory=list)


class RulePack(BaseModel):
    """Serialised rule pack including provenance metadata."""

    country: str
    schema_version: str = "1.0"
    date_created: str
    last_updated: str
    source: str = "Code of Civil Procedure"
    note: str | None = None
    events: dict[str, EventSpec] = Field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class RulePackRecord:
    """Typed wrapper pairing a pack with its source path."""

    pack: RulePack
    path: Path


def load_rule_pack(path: Path) -> RulePackRecord:
    """Read and validate a YAML rule pack.

    Raises:
        FileNotFoundError: If the pack does not exist
        ValueError: If the pack is empty or malformed
    """
    path = path.resolve()
    if not path.exists():
        raise FileNotFoundError(f"Rules pack not found: {path}")

    with path.open("r", encoding="utf-8") as handle:
        data: dict[str, Any] | None = yaml.safe_load(handle)

    if data is None:
        raise ValueError(f"Rules pack is empty: {path}")

    try:
        pack = RulePack.model_validate(data)
    except PydanticValidationError as exc:
        raise ValueError(f"Invalid rules pack at {path}: {exc}") from exc

    return RulePackRecord(pack=pack, path=path)


class RulesEngine:
    """Deadline calculator over a working-day calendar and a YAML rule pack."""

    def __init__(
        self,
        rules_dir: Path,
        calendar: CalendarEngine = DEFAULT_CALENDAR,
        *,
        pack_name: str = "gr.yaml",
    ) -> None:
        self._rules_dir = rules_dir
        self._calendar = calendar
        self._record = load_rule_pack(rules_dir / pack_name)

    @property
    def pack(self) -> RulePack:
        return self._record.pack

    def events(self) -> list[str]:
        return sorted(self.pack.events)

    def _event(self, event: str) -> EventSpec:
        spec = self.pack.events.get(event)
        if spec is None:
            known = ", ".join(self.events())
            raise ValidationError(f"Unknown event: {event} (known: {known})")
        return spec

    def calculate_deadline(
        self,
        event: str,
        base_date: date,
        explain: bool = False,
    ) -> dict[str, Any]:
        """Calculate deadlines for ``event`` with provenance."""
        event_spec = self._event(event)
        pack = self.pack

        results: dict[str, Any] = {
            "event": event,
            "base_date": base_date.isoformat(),
            "schema_version": pack.schema_version,
            "source": pack.source,
            "metadata": {
                "country": pack.country,
                "date_created": pack.date_created,
                "last_updated": pack.last_updated,
                "note": pack.note,
                "pack_path": str(self._record.path),
            },
            "deadlines": {},
        }

        for spec in event_spec.deadlines:
            deadline_date = self._compute_deadline(base_date, spec.offset)
            results["deadlines"][spec.name] = {
                "date": deadline_date.isoformat(),
                "category": spec.category,
                "priority": spec.priority,
                "cite": spec.cite,
                "notes": spec.notes,
                "trace": self._compute_trace(base_date, spec.offset, deadline_date)
                if explain
                else None,
            }

        return results

    def build_deadlines(
        self,
        event: str,
        base_date: date,
        client_id: str,
        *,
        hearing_id: str | None = None,
        reminder_rules: list[ReminderRule] | None = None,
        created_by: str | None = None,
    ) -> list[Deadline]:
        """Turn the deadlines of ``event`` into unsaved :class:`Deadline` records."""
        event_spec = self._event(event)
        scheduler = ReminderScheduler()
        deadlines: list[Deadline] = []
        for spec in event_spec.deadlines:
            due_date = self._compute_deadline(base_date, spec.offset)
            deadlines.append(
                Deadline(
                    client_id=client_id,
                    hearing_id=hearing_id,
                    name=spec.name,
                    description=spec.notes or None,
                    due_date=due_date,
                    priority=spec.priority,
                    category=spec.category,
                    working_days_only=spec.offset.unit == "working",
                    reminders=scheduler.schedule(due_date, reminder_rules or []),
                    notes=f"{event} on {base_date:%d/%m/%Y}",
                    created_by=created_by,
                )
            )
        return deadlines

    def _compute_deadline(self, base_date: date, offset: OffsetSpec) -> date:
        """Apply the offset in working or calendar days, then the court-date roll."""
        if offset.unit == "working":
            if offset.direction == "after":
                current = self._calendar.add_working_days(base_date, offset.days)
            else:
                current = self._calendar.subtract_working_days(base_date, offset.days)
        else:
            delta = timedelta(days=offset.days)
            current = base_date + delta if offset.direction == "after" else base_date - delta

        if offset.court_date:
            current = self._calendar.next_court_date(current)
        return current

    @staticmethod
    def _compute_trace(base_date: date, offset: OffsetSpec, deadline_date: date) -> str:
        """Generate a human-readable explanation of the calculation."""
        sign = "+" if offset.direction == "after" else "-"
        parts = [f"Base {base_date.isoformat()}", f"{sign}{offset.days} {offset.unit} days"]
        if offset.court_date:
            parts.append("roll to next court date")
        parts.append(f"-> {deadline_date.isoformat()}")
        return " ".join(parts)
