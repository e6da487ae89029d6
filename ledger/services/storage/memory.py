"""In-memory ledger storage, for tests and throwaway sessions."""

from typing import Optional

from ledger.services.storage.interface import LedgerStorageInterface


class InMemoryLedgerStorage(LedgerStorageInterface):
    """Keeps the last written document in memory."""

    def __init__(self, document: Optional[str] = None):
        self._document = document
        self.write_count = 0

    @property
    def location(self) -> str:
        return "memory"

    async def write_document(self, document: str) -> bool:
        self._document = document
        self.write_count += 1
        return True

    async def read_document(self) -> Optional[str]:
        return self._document

    async def clear(self) -> bool:
        had_document = self._document is not None
        self._document = None
        return had_document
