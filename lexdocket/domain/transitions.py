"""Cascade descriptors returned by lifecycle transitions."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from lexdocket.domain.models import Record

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class Transition:
    """Outcome of one lifecycle transition.

    ``primary`` is the updated copy of the record the verb was applied to;
    ``creates`` holds records spawned as a direct consequence. The caller
    commits all of them as one unit of work or none at all.
    """

    operation: str
    primary: Record
    creates: tuple[Record, ...] = ()

    @property
    def records(self) -> tuple[Record, ...]:
        return (self.primary, *self.creates)

    def created_ids(self) -> list[str]:
        return [record.id for record in self.creates]
