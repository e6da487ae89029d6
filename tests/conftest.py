"""Shared fixtures for the ledger tests."""

from decimal import Decimal

import pytest

from ledger.config import get_settings
from ledger.models import AccountCreate, TransactionCreate, TransactionType
from ledger.orchestrator import Ledger
from ledger.services.storage import InMemoryLedgerStorage
from ledger.store import EntityStore


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Every test starts from default configuration."""
    for name in (
        "LEDGER_HISTORY_LIMIT",
        "LEDGER_STORAGE_PATH",
        "LEDGER_STORAGE_RETRY_ATTEMPTS",
        "LEDGER_DEFAULT_MAIN_CURRENCY",
        "LEDGER_SEED_DEFAULT_CURRENCIES",
        "LEDGER_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def store():
    return EntityStore()


@pytest.fixture
def storage():
    return InMemoryLedgerStorage()


@pytest.fixture
def ledger(storage):
    return Ledger(storage=storage)


def account_data(name="Checking", currency="USD", balance="0"):
    return AccountCreate(name=name, currency=currency, balance=Decimal(balance))


def income(account_id, amount="100", **kwargs):
    return TransactionCreate(
        type=TransactionType.INCOME,
        amount=Decimal(amount),
        currency=kwargs.pop("currency", "USD"),
        account_id=account_id,
        **kwargs,
    )


def expense(account_id, amount="40", **kwargs):
    return TransactionCreate(
        type=TransactionType.EXPENSE,
        amount=Decimal(amount),
        currency=kwargs.pop("currency", "USD"),
        account_id=account_id,
        **kwargs,
    )


def transfer(account_id, to_account_id, amount="50", **kwargs):
    return TransactionCreate(
        type=TransactionType.TRANSFER,
        amount=Decimal(amount),
        currency=kwargs.pop("currency", "USD"),
        account_id=account_id,
        to_account_id=to_account_id,
        **kwargs,
    )
