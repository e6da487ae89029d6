"""
JSON File Storage Implementation

Stores the ledger document as a single JSON file on local disk.

DESIGN DECISION: Writes go to a temporary file next to the target and
are then moved over it, so a crash mid-write never leaves a truncated
document behind. File I/O runs in a worker thread to keep the async
boundary honest.

TRADEOFFS:
- One document, rewritten on every save (fine for personal data sizes)
- No locking: the app is the single writer
"""

import asyncio
import os
from pathlib import Path
from typing import Optional, Union

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ledger.config import get_settings
from ledger.services.storage.interface import LedgerStorageInterface, StorageError


class JsonFileLedgerStorage(LedgerStorageInterface):
    """
    Local file implementation of ledger storage.

    The document is written as UTF-8 text exactly as the ledger
    exported it.
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        retry_attempts: Optional[int] = None,
    ):
        settings = get_settings().storage
        self._path = Path(path or settings.path)
        self._attempts = retry_attempts or settings.retry_attempts

    @property
    def path(self) -> Path:
        return self._path

    @property
    def location(self) -> str:
        return str(self._path)

    def _retrying(self, func):
        return retry(
            stop=stop_after_attempt(self._attempts),
            wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )(func)

    def _write(self, document: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self._path.with_name(self._path.name + ".tmp")
        temp_path.write_text(document, encoding="utf-8")
        os.replace(temp_path, self._path)

    def _read(self) -> Optional[str]:
        if not self._path.exists():
            return None
        return self._path.read_text(encoding="utf-8")

    async def write_document(self, document: str) -> bool:
        try:
            await asyncio.to_thread(self._retrying(self._write), document)
        except OSError as e:
            raise StorageError(f"Failed to write ledger document to {self._path}: {e}")
        return True

    async def read_document(self) -> Optional[str]:
        try:
            return await asyncio.to_thread(self._retrying(self._read))
        except OSError as e:
            raise StorageError(f"Failed to read ledger document from {self._path}: {e}")

    async def clear(self) -> bool:
        if not self._path.exists():
            return False
        try:
            await asyncio.to_thread(self._path.unlink)
        except OSError as e:
            raise StorageError(f"Failed to remove ledger document {self._path}: {e}")
        return True
