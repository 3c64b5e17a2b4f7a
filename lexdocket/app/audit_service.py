"""Audit ledger orchestration services."""

from __future__ import annotations

from dataclasses import dataclass

from lexdocket.app.ports import AuditRecord, LedgerPort


@dataclass(slots=True)
class AuditService:
    """Expose read/verify operations over the audit ledger."""

    ledger: LedgerPort | None

    def is_enabled(self) -> bool:
        return self.ledger is not None

    def get_entries(self) -> list[AuditRecord]:
        """Return all ledger entries (empty list when auditing is disabled)."""
        if self.ledger is None:
            return []
        return [
            AuditRecord.model_validate(entry, from_attributes=True)
            for entry in self.ledger.read_all()
        ]

    def history(self, record_id: str) -> list[AuditRecord]:
        """Entries that touched ``record_id``, oldest first."""
        return [
            entry
            for entry in self.get_entries()
            if record_id in entry.inputs or record_id in entry.outputs
        ]

    def verify(self) -> tuple[bool, str | None]:
        """Verify ledger integrity, treating a disabled ledger as valid."""
        if self.ledger is None:
            return True, None
        return self.ledger.verify()
