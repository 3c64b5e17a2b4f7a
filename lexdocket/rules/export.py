"""ICS calendar export for computed deadlines and deadline records."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime, time
from pathlib import Path
from typing import Any

from ics import Calendar, Event

from lexdocket.domain import Deadline
from lexdocket.domain.models import parse_clock_time


def _event(name: str, day: date, description: str, at: time | None = None) -> Event:
    begin = datetime.combine(day, at or time())
    event = Event(
        name=name,
        begin=begin,
        description=description,
        categories=["Legal", "Deadline"],
    )
    if at is None:
        event.make_all_day()
    return event


def _write(calendar: Calendar, output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(calendar.serialize(), encoding="utf-8")


def export_deadlines_to_ics(deadlines: dict[str, Any], output_path: Path) -> None:
    """Serialize a :meth:`RulesEngine.calculate_deadline` result to an ICS file."""
    calendar = Calendar()

    for name, info in deadlines.get("deadlines", {}).items():
        date_value = info.get("date")
        if date_value is None:
            continue

        description_parts = [info.get("cite", ""), info.get("notes", "")]
        calendar.events.add(
            _event(
                f"{deadlines.get('event')}: {name}",
                date.fromisoformat(date_value),
                "\n".join(part for part in description_parts if part),
            )
        )

    _write(calendar, output_path)


def export_records_to_ics(records: Iterable[Deadline], output_path: Path) -> int:
    """Write open deadline records to an ICS file and return how many were written."""
    calendar = Calendar()
    count = 0
    for deadline in records:
        if not deadline.is_open():
            continue
        at = parse_clock_time(deadline.due_time) if deadline.due_time else None
        description = deadline.description or deadline.notes
        calendar.events.add(_event(deadline.name, deadline.due_date, description, at))
        count += 1

    _write(calendar, output_path)
    return count
