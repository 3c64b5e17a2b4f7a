"""In-memory record store adapter."""

from __future__ import annotations

from collections.abc import Iterable

from lexdocket.app.ports import RecordStorePort
from lexdocket.domain import Deadline, Hearing, Record, Transition
from lexdocket.errors import RecordNotFoundError


class InMemoryRecordStore(RecordStorePort):
    """Dictionary-backed store.

    Records are copied on the way in and on the way out, so callers never
    hold a reference to stored state. A batch is applied to a staged copy
    of the index and swapped in only once every record is in place.
    """

    def __init__(self, records: Iterable[Record] = ()) -> None:
        self._records: dict[str, Record] = {}
        self.create_many(records)

    def load_hearing(self, hearing_id: str) -> Hearing:
        record = self._records.get(hearing_id)
        if not isinstance(record, Hearing):
            raise RecordNotFoundError("hearing", hearing_id)
        return record.model_copy(deep=True)

    def load_deadline(self, deadline_id: str) -> Deadline:
        record = self._records.get(deadline_id)
        if not isinstance(record, Deadline):
            raise RecordNotFoundError("deadline", deadline_id)
        return record.model_copy(deep=True)

    def list_hearings(self) -> list[Hearing]:
        return [
            r.model_copy(deep=True) for r in self._records.values() if isinstance(r, Hearing)
        ]

    def list_deadlines(self) -> list[Deadline]:
        return [
            r.model_copy(deep=True) for r in self._records.values() if isinstance(r, Deadline)
        ]

    def save(self, record: Record) -> None:
        self.create_many([record])

    def create_many(self, records: Iterable[Record]) -> None:
        staged = dict(self._records)
        for record in records:
            staged[record.id] = record.model_copy(deep=True)
        self._records = staged

    def commit(self, transition: Transition) -> None:
        self.create_many(transition.records)
