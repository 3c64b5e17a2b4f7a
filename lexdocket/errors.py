"""Error kinds surfaced by the hearing and deadline engine."""

from __future__ import annotations


class LexDocketError(Exception):
    """Base class for every error raised by lexdocket."""


class ValidationError(LexDocketError, ValueError):
    """Missing or malformed input (negative day counts, empty reasons, ...)."""


class InvalidTransitionError(LexDocketError):
    """A lifecycle transition was requested from a state that does not allow it."""

    def __init__(self, record_kind: str, record_id: str, status: str, action: str) -> None:
        self.record_kind = record_kind
        self.record_id = record_id
        self.status = status
        self.action = action
        super().__init__(f"Cannot {action} {record_kind} {record_id} in status '{status}'")


class CascadeFailureError(LexDocketError):
    """The primary record and its cascaded records could not be committed together.

    Nothing was persisted; the whole operation may be retried.
    """


class RecordNotFoundError(LexDocketError, KeyError):
    """No hearing or deadline exists with the requested id."""

    def __init__(self, record_kind: str, record_id: str) -> None:
        self.record_kind = record_kind
        self.record_id = record_id
        super().__init__(f"{record_kind.capitalize()} not found: {record_id}")

    def __str__(self) -> str:
        return str(self.args[0])


class CorruptDataError(LexDocketError, ValueError):
    """A persisted record store or audit ledger could not be read back."""
