"""Read-side query package."""

from ledger.queries.summary import CashFlowSummary, LedgerQueries

__all__ = ["CashFlowSummary", "LedgerQueries"]
