"""Tests for read-side ledger queries."""

from datetime import datetime
from decimal import Decimal

import pytest

from conftest import account_data, expense, income, transfer
from ledger.models import TransactionType
from ledger.queries import LedgerQueries


@pytest.fixture
def populated(store):
    usd = store.add_account(account_data("USD Account", "USD", "100"))
    eur = store.add_account(account_data("EUR Account", "EUR", "85"))
    store.add_transaction(income(usd.id, "50", category="Salary", date=datetime(2024, 1, 10)))
    store.add_transaction(expense(usd.id, "20", category="Food", date=datetime(2024, 1, 15)))
    store.add_transaction(expense(eur.id, "17", currency="EUR", is_paid=False, date=datetime(2024, 2, 1)))
    store.add_transaction(transfer(usd.id, eur.id, "10", date=datetime(2024, 2, 5)))
    return store, usd, eur


class TestLookups:
    """Tests for lookups and filters."""

    def test_account_name(self, populated):
        """Test name lookup with an unknown fallback."""
        store, usd, _ = populated
        queries = LedgerQueries(store.state)
        assert queries.account_name(usd.id) == "USD Account"
        assert queries.find_account(usd.id) is not None

    def test_filter_by_account_includes_transfer_legs(self, populated):
        """Test that account filtering matches both transfer legs."""
        store, _, eur = populated
        queries = LedgerQueries(store.state)
        types = [t.type for t in queries.transactions_for_account(eur.id)]
        assert types == [TransactionType.EXPENSE, TransactionType.TRANSFER]

    def test_filter_combined(self, populated):
        """Test combining type, paid status and date filters."""
        store, _, _ = populated
        queries = LedgerQueries(store.state)
        assert len(queries.filter_transactions(type=TransactionType.EXPENSE)) == 2
        assert len(queries.filter_transactions(type=TransactionType.EXPENSE, is_paid=True)) == 1
        january = queries.filter_transactions(
            date_from=datetime(2024, 1, 1),
            date_to=datetime(2024, 1, 31),
        )
        assert [t.category for t in january] == ["Salary", "Food"]

    def test_recent_transactions_newest_first(self, populated):
        """Test ordering and limit of recent transactions."""
        store, _, _ = populated
        recent = LedgerQueries(store.state).recent_transactions(limit=2)
        assert [t.date for t in recent] == [datetime(2024, 2, 5), datetime(2024, 2, 1)]

    def test_category_usage(self, populated):
        """Test counting transactions by category name."""
        store, _, _ = populated
        queries = LedgerQueries(store.state)
        assert queries.category_usage("Food") == 1
        assert queries.category_usage("Rent") == 0


class TestAggregates:
    """Tests for totals in the main currency."""

    def test_total_balance_converts(self, populated):
        """Test that balances are converted to the main currency."""
        store, usd, eur = populated
        # USD: 100 + 50 - 20 - 10 = 120; EUR: 85 + 10 = 95 -> 95 / 0.85 USD
        queries = LedgerQueries(store.state)
        expected = Decimal("120") + Decimal("95") * (Decimal("1.0") / Decimal("0.85"))
        assert queries.total_balance() == expected

    def test_cash_flow_excludes_transfers(self, populated):
        """Test paid/unpaid income and expense totals."""
        store, _, _ = populated
        summary = LedgerQueries(store.state).cash_flow_summary()
        assert summary.currency == "USD"
        assert summary.paid_income == Decimal("50")
        assert summary.paid_expenses == Decimal("20")
        assert summary.unpaid_expenses == Decimal("17") * (Decimal("1.0") / Decimal("0.85"))
        assert summary.net_paid == Decimal("30")

    def test_unknown_currency_counts_at_face_value(self, populated):
        """Test the fallback for a currency that was deleted."""
        store, _, eur = populated
        store.delete_currency("EUR")
        queries = LedgerQueries(store.state)
        assert queries.to_main_currency(Decimal("95"), "EUR") == Decimal("95")
        assert queries.total_balance() == Decimal("215")
