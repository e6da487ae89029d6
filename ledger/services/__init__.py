"""Services package."""

from ledger.services.storage import (
    InMemoryLedgerStorage,
    JsonFileLedgerStorage,
    LedgerStorageInterface,
    StorageError,
)

__all__ = [
    # Storage services
    "InMemoryLedgerStorage",
    "JsonFileLedgerStorage",
    "LedgerStorageInterface",
    "StorageError",
]
