"""Tests for audit ledger functionality."""

import json
from pathlib import Path

import pytest

from lexdocket.app import AuditService
from lexdocket.audit.ledger import GENESIS_HASH, AuditLedger, LedgerEntry
from lexdocket.errors import CorruptDataError


def _entry(**overrides) -> LedgerEntry:
    fields = {
        "timestamp": "2025-06-10T09:00:00+00:00",
        "operation": "hearing.discuss",
        "inputs": ["h1"],
        "outputs": ["d1"],
        "args": {"by": "lawyer-1"},
        "sequence": 1,
    }
    fields.update(overrides)
    return LedgerEntry(**fields)


def test_entry_hash_is_deterministic():
    """Identical entries produce identical SHA-256 hashes."""
    first = _entry()
    second = _entry()

    assert first.entry_hash is not None
    assert len(first.entry_hash) == 64
    assert first.entry_hash == second.entry_hash
    assert first.entry_hash == first.compute_hash()


def test_entry_hash_covers_content():
    assert _entry().entry_hash != _entry(outputs=["d2"]).entry_hash
    assert _entry().entry_hash != _entry(previous_hash="f" * 64).entry_hash


def test_log_chains_entries(temp_dir: Path):
    ledger = AuditLedger(temp_dir / "audit.jsonl")

    first = ledger.log("hearing.register", inputs=["h1"])
    second = ledger.log("hearing.discuss", inputs=["h1"], outputs=["d1"], args={"by": None})

    assert (first.sequence, second.sequence) == (1, 2)
    assert first.previous_hash == GENESIS_HASH
    assert second.previous_hash == first.entry_hash
    assert ledger.verify() == (True, None)


def test_reopened_ledger_continues_chain(temp_dir: Path):
    path = temp_dir / "audit.jsonl"
    first = AuditLedger(path).log("deadline.register", inputs=["d1"])

    reopened = AuditLedger(path)
    second = reopened.log("deadline.complete", inputs=["d1"])

    assert second.sequence == 2
    assert second.previous_hash == first.entry_hash
    assert reopened.verify() == (True, None)


def test_queries(temp_dir: Path):
    ledger = AuditLedger(temp_dir / "audit.jsonl")
    ledger.log("hearing.register", inputs=["h1"])
    ledger.log("hearing.postpone", inputs=["h1"], outputs=["h2"])
    ledger.log("deadline.register", inputs=["d1"])

    assert len(ledger.read_all()) == 3
    assert [e.operation for e in ledger.get_by_operation("hearing.postpone")] == [
        "hearing.postpone"
    ]
    assert [e.sequence for e in ledger.get_by_record("h2")] == [2]
    assert [e.sequence for e in ledger.get_by_record("h1")] == [1, 2]


def test_tampered_entry_is_detected(temp_dir: Path):
    path = temp_dir / "audit.jsonl"
    ledger = AuditLedger(path)
    ledger.log("deadline.extend", inputs=["d1"], args={"new_due_date": "2025-06-27"})
    ledger.log("deadline.complete", inputs=["d1"])

    lines = path.read_text(encoding="utf-8").splitlines()
    data = json.loads(lines[0])
    data["args"]["new_due_date"] = "2025-12-31"
    lines[0] = json.dumps(data)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")

    valid, error = AuditLedger(path).verify()

    assert not valid
    assert "Entry 1" in error


def test_removed_entry_is_detected(temp_dir: Path):
    path = temp_dir / "audit.jsonl"
    ledger = AuditLedger(path)
    for operation in ("hearing.register", "hearing.discuss", "deadline.complete"):
        ledger.log(operation)

    lines = path.read_text(encoding="utf-8").splitlines()
    path.write_text("\n".join([lines[0], lines[2]]) + "\n", encoding="utf-8")

    valid, error = AuditLedger(path).verify()

    assert not valid
    assert "sequence" in error


def test_corrupt_line_fails_verification(temp_dir: Path):
    path = temp_dir / "audit.jsonl"
    AuditLedger(path).log("hearing.register")
    with open(path, "a", encoding="utf-8") as fh:
        fh.write("{not json\n")

    with pytest.raises(CorruptDataError):
        AuditLedger(path)


def test_audit_service_history(temp_dir: Path):
    ledger = AuditLedger(temp_dir / "audit.jsonl")
    ledger.log("hearing.register", inputs=["h1"])
    ledger.log("hearing.cancel", inputs=["h1"], outputs=["d9"])
    ledger.log("deadline.register", inputs=["d1"])
    service = AuditService(ledger)

    assert service.is_enabled()
    assert [e.operation for e in service.history("d9")] == ["hearing.cancel"]
    assert len(service.get_entries()) == 3
    assert service.verify() == (True, None)


def test_disabled_audit_service():
    service = AuditService(None)

    assert not service.is_enabled()
    assert service.get_entries() == []
    assert service.verify() == (True, None)
