"""
Data Models Package

This package contains all Pydantic models used by the ledger core.
All data owned by the ledger must conform to these schemas.
"""

from ledger.models.entities import (
    Account,
    AccountCreate,
    AccountType,
    Category,
    CategoryCreate,
    CategoryType,
    Currency,
    LedgerState,
    RecurringUnit,
    Subcategory,
    Transaction,
    TransactionCreate,
    TransactionType,
)
from ledger.models.history import (
    ActionType,
    EntityType,
    HistoryEntry,
    HistoryEntryBuilder,
    HistorySnapshot,
)
from ledger.models.document import (
    DOCUMENT_VERSION,
    LedgerDocument,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    # Entity models
    "Account",
    "AccountCreate",
    "AccountType",
    "Category",
    "CategoryCreate",
    "CategoryType",
    "Currency",
    "LedgerState",
    "RecurringUnit",
    "Subcategory",
    "Transaction",
    "TransactionCreate",
    "TransactionType",
    # History models
    "ActionType",
    "EntityType",
    "HistoryEntry",
    "HistoryEntryBuilder",
    "HistorySnapshot",
    # Document models
    "DOCUMENT_VERSION",
    "LedgerDocument",
    "ValidationIssue",
    "ValidationResult",
]
