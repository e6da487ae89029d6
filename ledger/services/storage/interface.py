"""
Abstract Storage Interface

DESIGN DECISION: The ledger core never writes bytes itself. It hands a
complete serialized document to a storage backend and gets a complete
one back. This allows us to:
1. Keep the core synchronous and deterministic
2. Use in-memory storage for testing
3. Swap the local file for platform storage without touching the core

The interface is intentionally tiny: one document in, one document out.
No partial or streaming contract.
"""

from abc import ABC, abstractmethod
from typing import Optional


class LedgerStorageInterface(ABC):
    """
    Abstract interface for ledger document storage.

    Any storage implementation (local file, platform key-value store,
    etc.) must implement these methods.
    """

    @property
    @abstractmethod
    def location(self) -> str:
        """Human-readable description of where documents go (for logs)."""
        pass

    @abstractmethod
    async def write_document(self, document: str) -> bool:
        """
        Persist a serialized ledger document, replacing any previous one.

        Args:
            document: JSON text produced by Ledger.export_data()

        Returns:
            True if written successfully

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def read_document(self) -> Optional[str]:
        """
        Read the last persisted document.

        Returns:
            The JSON text, or None if nothing was saved yet

        Raises:
            StorageError: If the read fails
        """
        pass

    @abstractmethod
    async def clear(self) -> bool:
        """
        Remove the persisted document.

        Returns:
            True if something was removed
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass
