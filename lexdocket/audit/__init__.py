"""Audit trail for committed transitions."""

from lexdocket.audit.ledger import GENESIS_HASH, AuditLedger, LedgerEntry

__all__ = ["GENESIS_HASH", "AuditLedger", "LedgerEntry"]
