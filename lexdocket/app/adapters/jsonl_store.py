"""JSONL-backed record store adapter."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from lexdocket.app.ports import RecordStorePort
from lexdocket.domain import Deadline, Hearing, Record, Transition
from lexdocket.errors import CorruptDataError, RecordNotFoundError
from lexdocket.utils.jsonl import atomic_write_jsonl, read_jsonl

logger = logging.getLogger(__name__)

_KINDS: dict[str, type[Hearing] | type[Deadline]] = {
    "hearing": Hearing,
    "deadline": Deadline,
}


def _kind_of(record: Record) -> str:
    return "hearing" if isinstance(record, Hearing) else "deadline"


def encode_record(record: Record) -> dict[str, Any]:
    """Serialize a record to a JSON-ready mapping tagged with its kind."""
    payload = record.model_dump(mode="json")
    payload["kind"] = _kind_of(record)
    return payload


def decode_record(payload: dict[str, Any]) -> Record:
    """Rebuild a record from a mapping produced by :func:`encode_record`."""
    data = dict(payload)
    kind = data.pop("kind", None)
    model = _KINDS.get(kind) if isinstance(kind, str) else None
    if model is None:
        raise ValueError(f"Unknown record kind: {kind!r}")
    return model.model_validate(data)


class JSONLRecordStore(RecordStorePort):
    """Record store keeping every hearing and deadline in one JSONL file.

    Each write rewrites the whole file through :func:`atomic_write_jsonl`, so
    a batch is either fully on disk or not at all. Single writer; no locking.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def _load(self) -> dict[str, Record]:
        if not self.path.exists():
            return {}
        records: dict[str, Record] = {}
        try:
            for payload in read_jsonl(self.path):
                record = decode_record(payload)
                records[record.id] = record
        except ValueError as exc:
            raise CorruptDataError(f"Cannot read record store {self.path}: {exc}") from exc
        return records

    def load_hearing(self, hearing_id: str) -> Hearing:
        record = self._load().get(hearing_id)
        if not isinstance(record, Hearing):
            raise RecordNotFoundError("hearing", hearing_id)
        return record

    def load_deadline(self, deadline_id: str) -> Deadline:
        record = self._load().get(deadline_id)
        if not isinstance(record, Deadline):
            raise RecordNotFoundError("deadline", deadline_id)
        return record

    def list_hearings(self) -> list[Hearing]:
        return [r for r in self._load().values() if isinstance(r, Hearing)]

    def list_deadlines(self) -> list[Deadline]:
        return [r for r in self._load().values() if isinstance(r, Deadline)]

    def save(self, record: Record) -> None:
        self.create_many([record])

    def create_many(self, records: Iterable[Record]) -> None:
        batch = list(records)
        current = self._load()
        for record in batch:
            current[record.id] = record
        atomic_write_jsonl(self.path, (encode_record(r) for r in current.values()))
        logger.debug("Wrote %d record(s) to %s", len(batch), self.path)

    def commit(self, transition: Transition) -> None:
        self.create_many(transition.records)
