"""Append-only, hash-chained audit ledger for hearing and deadline transitions."""

from __future__ import annotations

import hashlib
import json
import os
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from lexdocket import __version__
from lexdocket.errors import CorruptDataError

GENESIS_HASH = "0" * 64


class LedgerEntry(BaseModel):
    """Single ledger entry linked to its predecessor by hash."""

    timestamp: str = Field(..., description="ISO 8601 timestamp in UTC")
    operation: str = Field(..., description="Operation name (e.g., hearing.postpone)")
    inputs: list[str] = Field(default_factory=list, description="Ids of records read")
    outputs: list[str] = Field(default_factory=list, description="Ids of records created")
    args: dict[str, Any] = Field(default_factory=dict, description="Operation parameters")
    version: str = Field(default=__version__, description="lexdocket version")
    sequence: int = Field(..., ge=1, description="Monotonic sequence number starting at 1")
    previous_hash: str = Field(default=GENESIS_HASH, description="Hash of the previous entry")
    entry_hash: str | None = Field(default=None, description="SHA-256 of this entry's content")

    def compute_hash(self) -> str:
        """SHA-256 over the canonical JSON of every field except ``entry_hash``."""
        data = self.model_dump(mode="json", exclude={"entry_hash"})
        content = json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
        return hashlib.sha256(content.encode("utf-8")).hexdigest()

    def model_post_init(self, __context: Any) -> None:
        if self.entry_hash is None:
            self.entry_hash = self.compute_hash()


class AuditLedger:
    """JSONL ledger; one entry per committed transition.

    Entries are appended with fsync and never rewritten. :meth:`verify`
    re-derives every hash and link, so an edited or removed line is detected.
    """

    def __init__(self, ledger_path: Path) -> None:
        self.ledger_path = ledger_path
        self.ledger_path.parent.mkdir(parents=True, exist_ok=True)

        entries = self._read_entries()
        self._last_sequence = entries[-1].sequence if entries else 0
        self._last_hash = (entries[-1].entry_hash or GENESIS_HASH) if entries else GENESIS_HASH

    def _read_entries(self) -> list[LedgerEntry]:
        if not self.ledger_path.exists():
            return []

        entries: list[LedgerEntry] = []
        with open(self.ledger_path, encoding="utf-8") as fh:
            for line_num, raw_line in enumerate(fh, 1):
                line = raw_line.strip()
                if not line:
                    continue
                try:
                    entries.append(LedgerEntry.model_validate_json(line))
                except ValueError as exc:
                    raise CorruptDataError(
                        f"Invalid entry at line {line_num} in {self.ledger_path}: {exc}"
                    ) from exc
        return entries

    def log(
        self,
        operation: str,
        inputs: list[str] | None = None,
        outputs: list[str] | None = None,
        args: dict[str, Any] | None = None,
    ) -> LedgerEntry:
        """Append an entry for ``operation`` and return it.

        Args:
            operation: Operation name
            inputs: Ids of records the operation started from
            outputs: Ids of records the operation created
            args: Operation arguments and parameters
        """
        entry = LedgerEntry(
            timestamp=datetime.now(UTC).isoformat(),
            operation=operation,
            inputs=inputs or [],
            outputs=outputs or [],
            args=args or {},
            sequence=self._last_sequence + 1,
            previous_hash=self._last_hash,
        )

        with open(self.ledger_path, "a", encoding="utf-8") as fh:
            fh.write(entry.model_dump_json() + "\n")
            fh.flush()
            os.fsync(fh.fileno())

        self._last_sequence = entry.sequence
        self._last_hash = entry.entry_hash or GENESIS_HASH
        return entry

    def read_all(self) -> list[LedgerEntry]:
        """Return all entries in append order."""
        return self._read_entries()

    def get_by_operation(self, operation: str) -> list[LedgerEntry]:
        return [entry for entry in self._read_entries() if entry.operation == operation]

    def get_by_record(self, record_id: str) -> list[LedgerEntry]:
        """Entries that read or created ``record_id``."""
        return [
            entry
            for entry in self._read_entries()
            if record_id in entry.inputs or record_id in entry.outputs
        ]

    def verify(self) -> tuple[bool, str | None]:
        """Check hashes, chain links and sequence numbers.

        Returns:
            Tuple of (is_valid, error_message). error_message is None if valid.
        """
        try:
            entries = self._read_entries()
        except ValueError as exc:
            return False, str(exc)

        previous_hash = GENESIS_HASH
        for idx, entry in enumerate(entries, 1):
            if entry.sequence != idx:
                return False, f"Entry {idx} sequence mismatch (got {entry.sequence})."
            if entry.entry_hash != entry.compute_hash():
                return False, f"Entry {idx} has invalid hash; ledger was modified."
            if entry.previous_hash != previous_hash:
                return False, f"Entry {idx} breaks hash chain."
            previous_hash = entry.entry_hash

        return True, None
