"""Tests for the record store adapters."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from lexdocket.app.adapters import InMemoryRecordStore, JSONLRecordStore
from lexdocket.app.adapters.jsonl_store import decode_record, encode_record
from lexdocket.domain import Deadline, Hearing, HearingLifecycle
from lexdocket.errors import CorruptDataError, RecordNotFoundError


@pytest.fixture(params=["jsonl", "memory"])
def record_store(request, temp_dir: Path):
    if request.param == "jsonl":
        return JSONLRecordStore(temp_dir / "records.jsonl")
    return InMemoryRecordStore()


def test_save_and_load(record_store, hearing: Hearing, deadline: Deadline) -> None:
    record_store.save(hearing)
    record_store.save(deadline)

    assert record_store.load_hearing(hearing.id) == hearing
    assert record_store.load_deadline(deadline.id) == deadline
    assert [h.id for h in record_store.list_hearings()] == [hearing.id]
    assert [d.id for d in record_store.list_deadlines()] == [deadline.id]


def test_missing_records(record_store, hearing: Hearing) -> None:
    record_store.save(hearing)

    with pytest.raises(RecordNotFoundError):
        record_store.load_hearing("nope")
    with pytest.raises(RecordNotFoundError):
        record_store.load_deadline(hearing.id)


def test_commit_writes_primary_and_cascade(record_store, clock_at, hearing: Hearing) -> None:
    record_store.save(hearing)
    transition = HearingLifecycle(clock=clock_at(2025, 6, 10)).postpone(
        hearing, date(2025, 10, 14), "strike", None
    )

    record_store.commit(transition)

    assert record_store.load_hearing(hearing.id).status == "postponed"
    assert len(record_store.list_hearings()) == 2


def test_loaded_records_are_copies(record_store, deadline: Deadline) -> None:
    record_store.save(deadline)

    loaded = record_store.load_deadline(deadline.id)
    loaded.tags.append("mutated")

    assert record_store.load_deadline(deadline.id).tags == []


def test_jsonl_lines_are_tagged_by_kind(
    temp_dir: Path, hearing: Hearing, deadline: Deadline
) -> None:
    path = temp_dir / "records.jsonl"
    store = JSONLRecordStore(path)
    store.create_many([hearing, deadline])

    kinds = [json.loads(line)["kind"] for line in path.read_text(encoding="utf-8").splitlines()]
    assert kinds == ["hearing", "deadline"]

    reopened = JSONLRecordStore(path)
    assert reopened.load_hearing(hearing.id).court_full_name == hearing.court_full_name


def test_encode_decode_keeps_kind(hearing: Hearing, deadline: Deadline) -> None:
    assert isinstance(decode_record(encode_record(hearing)), Hearing)
    assert isinstance(decode_record(encode_record(deadline)), Deadline)

    with pytest.raises(ValueError):
        decode_record({"kind": "invoice"})


def test_jsonl_failed_write_leaves_previous_file(
    temp_dir: Path, monkeypatch: pytest.MonkeyPatch, clock_at, hearing: Hearing
) -> None:
    path = temp_dir / "records.jsonl"
    store = JSONLRecordStore(path)
    store.save(hearing)
    before = path.read_text(encoding="utf-8")

    def fail_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr("lexdocket.utils.jsonl.os.replace", fail_replace)
    transition = HearingLifecycle(clock=clock_at(2025, 6, 10)).discuss(hearing, None)

    with pytest.raises(OSError):
        store.commit(transition)

    assert path.read_text(encoding="utf-8") == before
    assert [p.name for p in temp_dir.iterdir()] == ["records.jsonl"]


def test_jsonl_unreadable_file_raises_corrupt_data(temp_dir: Path) -> None:
    path = temp_dir / "records.jsonl"
    path.write_text('{"kind": "invoice", "id": "x"}\n', encoding="utf-8")

    with pytest.raises(CorruptDataError, match="Cannot read record store"):
        JSONLRecordStore(path).list_deadlines()
