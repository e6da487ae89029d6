"""Tests for the ledger document storage backends."""

import asyncio

import pytest

from ledger.services.storage import (
    InMemoryLedgerStorage,
    JsonFileLedgerStorage,
    StorageError,
)


class TestJsonFileStorage:
    """Tests for the local JSON file backend."""

    def test_write_then_read(self, tmp_path):
        """Test that a written document reads back unchanged."""
        storage = JsonFileLedgerStorage(tmp_path / "ledger.json")
        assert asyncio.run(storage.write_document('{"accounts": []}')) is True
        assert asyncio.run(storage.read_document()) == '{"accounts": []}'
        assert not (tmp_path / "ledger.json.tmp").exists()

    def test_read_missing_file(self, tmp_path):
        """Test that reading before any write returns None."""
        storage = JsonFileLedgerStorage(tmp_path / "missing.json")
        assert asyncio.run(storage.read_document()) is None

    def test_creates_parent_directories(self, tmp_path):
        """Test writing into a directory that does not exist yet."""
        storage = JsonFileLedgerStorage(tmp_path / "nested" / "dir" / "ledger.json")
        asyncio.run(storage.write_document("{}"))
        assert storage.path.exists()

    def test_clear(self, tmp_path):
        """Test removing the stored document."""
        storage = JsonFileLedgerStorage(tmp_path / "ledger.json")
        asyncio.run(storage.write_document("{}"))
        assert asyncio.run(storage.clear()) is True
        assert asyncio.run(storage.clear()) is False

    def test_write_failure_raises_storage_error(self, tmp_path):
        """Test that an unwritable target surfaces as StorageError after retries."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        storage = JsonFileLedgerStorage(blocker / "ledger.json", retry_attempts=2)
        with pytest.raises(StorageError):
            asyncio.run(storage.write_document("{}"))

    def test_path_from_settings(self, monkeypatch, tmp_path):
        """Test that the default path comes from configuration."""
        from ledger.config import get_settings

        monkeypatch.setenv("LEDGER_STORAGE_PATH", str(tmp_path / "configured.json"))
        get_settings.cache_clear()
        assert JsonFileLedgerStorage().location == str(tmp_path / "configured.json")


class TestInMemoryStorage:
    """Tests for the in-memory backend."""

    def test_round_trip(self):
        """Test write, read and clear."""
        storage = InMemoryLedgerStorage()
        assert asyncio.run(storage.read_document()) is None
        asyncio.run(storage.write_document("{}"))
        assert asyncio.run(storage.read_document()) == "{}"
        assert storage.write_count == 1
        assert asyncio.run(storage.clear()) is True
        assert asyncio.run(storage.read_document()) is None
