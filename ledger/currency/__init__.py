"""Currency table package."""

from ledger.currency.table import (
    DEFAULT_CURRENCIES,
    CurrencyTable,
    default_currencies,
)

__all__ = ["DEFAULT_CURRENCIES", "CurrencyTable", "default_currencies"]
