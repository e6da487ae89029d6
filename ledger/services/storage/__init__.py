"""
Storage Services Package

Provides the abstract document storage interface and its implementations.
Currently implements a local JSON file and an in-memory backend.
"""

from ledger.services.storage.interface import (
    LedgerStorageInterface,
    StorageError,
)
from ledger.services.storage.json_file import JsonFileLedgerStorage
from ledger.services.storage.memory import InMemoryLedgerStorage

__all__ = [
    # Interfaces
    "LedgerStorageInterface",
    # Exceptions
    "StorageError",
    # Implementations
    "InMemoryLedgerStorage",
    "JsonFileLedgerStorage",
]
