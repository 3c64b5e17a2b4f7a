"""Ledger port interface for audit trail operations."""

from typing import Any, Protocol

from pydantic import BaseModel, Field


class AuditRecord(BaseModel):
    """Normalized view of an audit ledger entry."""

    timestamp: str = Field(..., description="ISO-8601 timestamp")
    operation: str = Field(..., description="Operation name recorded in the ledger")
    inputs: list[str] = Field(default_factory=list, description="Record ids the operation read")
    outputs: list[str] = Field(default_factory=list, description="Record ids the operation wrote")
    args: dict[str, Any] = Field(default_factory=dict, description="Additional parameters")


class LedgerPort(Protocol):
    """Port interface for audit ledger operations.

    Adapters implementing this port must provide:
    - Append-only audit logging
    - Hash chain verification

    Side effects: Writes to audit ledger.
    """

    def log(
        self,
        operation: str,
        inputs: list[str],
        outputs: list[str],
        args: dict[str, Any],
    ) -> Any:
        """Log an operation to the audit ledger.

        Args:
            operation: Operation name (e.g., "hearing.postpone")
            inputs: Ids of records the operation started from
            outputs: Ids of records the operation created
            args: Additional arguments/metadata
        """
        ...

    def verify(self) -> tuple[bool, str | None]:
        """Verify audit ledger integrity.

        Returns:
            Tuple of (is_valid, error_message)
        """
        ...

    def read_all(self) -> list[Any]:
        """Read all audit entries in order."""
        ...
