"""
Ledger Exceptions

Every validation error is raised synchronously by the operation that
detects it, before any state is touched. The caller (UI) decides how
to present it.
"""

from typing import Any, Optional


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class NotFoundError(LedgerError):
    """Referenced entity is not in the ledger."""

    def __init__(self, entity_type: str, key: Any, message: Optional[str] = None):
        self.entity_type = entity_type
        self.key = key
        super().__init__(message or f"{entity_type.capitalize()} not found: {key}")


class SnapshotNotFoundError(NotFoundError):
    """History snapshot id is not in the log."""

    def __init__(self, snapshot_id: Any):
        super().__init__("snapshot", snapshot_id)


class UnknownCurrencyError(LedgerError):
    """Currency code is not registered in the currency table."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Unknown currency: {code}")


class DuplicateCurrencyCodeError(LedgerError):
    """A currency with this code already exists."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Currency already exists: {code}")


class CannotDeleteMainCurrencyError(LedgerError):
    """The main currency cannot be removed."""

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Cannot delete the main currency: {code}")


class InvalidTargetError(LedgerError):
    """Bad target account when moving transactions off a deleted account."""
    pass


class InvariantViolationError(LedgerError):
    """Operation would break a consistency rule of the ledger."""
    pass


class InvalidDocumentError(LedgerError):
    """Import payload could not be parsed or validated."""

    def __init__(self, message: str, issues: Optional[list] = None):
        self.issues = issues or []
        super().__init__(message)
