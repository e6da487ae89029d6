"""
Ledger Queries

Read-only views over a ledger state: lookups, filters and the totals
the dashboard shows.

DESIGN DECISION: Queries are DETERMINISTIC and never mutate. They take
the state as it is and compute; nothing is cached, so they can never
disagree with the store.

Totals are converted to the main currency. An amount whose currency is
no longer registered is counted at face value as if it were in the main
currency, and the fallback is logged.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from ledger.audit import AuditLogger
from ledger.currency import CurrencyTable
from ledger.errors import UnknownCurrencyError
from ledger.models.entities import (
    Account,
    Category,
    LedgerState,
    Transaction,
    TransactionType,
)


class CashFlowSummary(BaseModel):
    """Income and expense totals in the main currency."""

    currency: str
    paid_income: Decimal = Decimal("0")
    paid_expenses: Decimal = Decimal("0")
    unpaid_income: Decimal = Decimal("0")
    unpaid_expenses: Decimal = Decimal("0")

    @property
    def net_paid(self) -> Decimal:
        return self.paid_income - self.paid_expenses


class LedgerQueries:
    """
    Lookups and aggregates over one ledger state.

    GUARANTEES:
    - Only reads the state it was given
    - Never raises for unknown currencies in aggregates
    """

    def __init__(self, state: LedgerState, audit_logger: Optional[AuditLogger] = None):
        self._state = state
        self._table = CurrencyTable(state.currencies)
        self._audit_logger = audit_logger

    @property
    def main_currency_code(self) -> Optional[str]:
        main = self._table.main_currency
        return main.code if main else None

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def find_account(self, account_id: UUID) -> Optional[Account]:
        return next((a for a in self._state.accounts if a.id == account_id), None)

    def find_transaction(self, transaction_id: UUID) -> Optional[Transaction]:
        return next((t for t in self._state.transactions if t.id == transaction_id), None)

    def find_category_by_name(self, name: str) -> Optional[Category]:
        return next((c for c in self._state.categories if c.name == name), None)

    def account_name(self, account_id: UUID) -> str:
        account = self.find_account(account_id)
        return account.name if account else "Unknown Account"

    # -------------------------------------------------------------------------
    # Filters
    # -------------------------------------------------------------------------

    def filter_transactions(
        self,
        type: Optional[TransactionType] = None,
        account_id: Optional[UUID] = None,
        category: Optional[str] = None,
        is_paid: Optional[bool] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> list[Transaction]:
        """
        Transactions matching every given filter.

        `account_id` matches either leg of a transfer. Date bounds are
        inclusive.
        """
        results = []
        for transaction in self._state.transactions:
            if type is not None and transaction.type != type:
                continue
            if account_id is not None and not transaction.references_account(account_id):
                continue
            if category is not None and transaction.category != category:
                continue
            if is_paid is not None and transaction.is_paid != is_paid:
                continue
            if date_from is not None and transaction.date < date_from:
                continue
            if date_to is not None and transaction.date > date_to:
                continue
            results.append(transaction)
        return results

    def transactions_for_account(self, account_id: UUID) -> list[Transaction]:
        return self.filter_transactions(account_id=account_id)

    def recent_transactions(self, limit: int = 10) -> list[Transaction]:
        """Newest first."""
        ordered = sorted(self._state.transactions, key=lambda t: t.date, reverse=True)
        return ordered[:limit]

    def category_usage(self, name: str) -> int:
        """Number of transactions that reference a category name."""
        return sum(1 for t in self._state.transactions if t.category == name)

    # -------------------------------------------------------------------------
    # Aggregates
    # -------------------------------------------------------------------------

    def to_main_currency(self, amount: Decimal, code: str) -> Decimal:
        main_code = self.main_currency_code
        if main_code is None:
            return amount
        try:
            return self._table.convert(amount, code, main_code)
        except UnknownCurrencyError:
            if self._audit_logger:
                self._audit_logger.log_conversion_fallback(code, main_code)
            return amount

    def total_balance(self) -> Decimal:
        """Sum of all account balances in the main currency."""
        return sum(
            (self.to_main_currency(a.balance, a.currency) for a in self._state.accounts),
            Decimal("0"),
        )

    def cash_flow_summary(self) -> CashFlowSummary:
        """Paid and unpaid income/expense totals. Transfers are not counted."""
        summary = CashFlowSummary(currency=self.main_currency_code or "")
        for transaction in self._state.transactions:
            if transaction.type == TransactionType.TRANSFER:
                continue
            amount = self.to_main_currency(transaction.amount, transaction.currency)
            if transaction.type == TransactionType.INCOME:
                if transaction.is_paid:
                    summary.paid_income += amount
                else:
                    summary.unpaid_income += amount
            else:
                if transaction.is_paid:
                    summary.paid_expenses += amount
                else:
                    summary.unpaid_expenses += amount
        return summary
