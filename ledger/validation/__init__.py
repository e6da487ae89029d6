"""Import document validation package."""

from ledger.validation.validator import DocumentValidator

__all__ = ["DocumentValidator"]
