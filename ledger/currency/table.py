"""
Currency Table

Holds the registered currencies and resolves conversions between them.
Every rate is expressed against one common base (base rate = 1), so a
conversion between any two registered currencies goes through the base:

    amount_in_to = amount_in_from * rate(to) / rate(from)

The table works on the currency list it is given, in place. The entity
store hands it the list it owns, so table mutations are store mutations.
Each operation checks its preconditions before touching the list.
"""

from decimal import Decimal
from typing import Optional

from ledger.errors import (
    CannotDeleteMainCurrencyError,
    DuplicateCurrencyCodeError,
    UnknownCurrencyError,
)
from ledger.models.entities import Currency


DEFAULT_CURRENCIES: tuple[tuple[str, str, str, str], ...] = (
    ("USD", "US Dollar", "$", "1.0"),
    ("EUR", "Euro", "€", "0.85"),
    ("GBP", "British Pound", "£", "0.73"),
    ("JPY", "Japanese Yen", "¥", "110.0"),
    ("CAD", "Canadian Dollar", "C$", "1.25"),
    ("AUD", "Australian Dollar", "A$", "1.35"),
    ("CHF", "Swiss Franc", "CHF", "0.92"),
    ("CNY", "Chinese Yuan", "¥", "6.45"),
    ("INR", "Indian Rupee", "₹", "74.5"),
    ("LKR", "Sri Lankan Rupee", "Rs", "200.0"),
)


def default_currencies(main_code: str = "USD") -> list[Currency]:
    """
    Build the built-in currency list with `main_code` as main.

    Falls back to the first entry if `main_code` is not in the list.
    """
    main_code = main_code.strip().upper()
    codes = [code for code, _, _, _ in DEFAULT_CURRENCIES]
    if main_code not in codes:
        main_code = codes[0]
    return [
        Currency(
            code=code,
            name=name,
            symbol=symbol,
            rate=Decimal(rate),
            is_main=(code == main_code),
        )
        for code, name, symbol, rate in DEFAULT_CURRENCIES
    ]


class CurrencyTable:
    """
    Registered currencies and their exchange rates.

    Invariant: once any currency exists, exactly one has `is_main` set.
    """

    def __init__(self, currencies: Optional[list[Currency]] = None):
        self._currencies = currencies if currencies is not None else []

    @property
    def currencies(self) -> list[Currency]:
        return self._currencies

    @property
    def codes(self) -> list[str]:
        return [c.code for c in self._currencies]

    @property
    def main_currency(self) -> Optional[Currency]:
        for currency in self._currencies:
            if currency.is_main:
                return currency
        return None

    def get(self, code: str) -> Optional[Currency]:
        code = code.strip().upper()
        for currency in self._currencies:
            if currency.code == code:
                return currency
        return None

    def require(self, code: str) -> Currency:
        """Get a currency or raise UnknownCurrencyError."""
        currency = self.get(code)
        if currency is None:
            raise UnknownCurrencyError(code)
        return currency

    def __contains__(self, code: str) -> bool:
        return self.get(code) is not None

    def __len__(self) -> int:
        return len(self._currencies)

    # -------------------------------------------------------------------------
    # Conversion
    # -------------------------------------------------------------------------

    def get_exchange_rate(self, from_code: str, to_code: str) -> Decimal:
        """
        Factor such that amount_in_to = amount_in_from * factor.

        Identical codes return exactly 1 without a lookup.

        Raises:
            UnknownCurrencyError: If either code is not registered
        """
        if from_code.strip().upper() == to_code.strip().upper():
            return Decimal(1)
        source = self.require(from_code)
        target = self.require(to_code)
        return target.rate / source.rate

    def convert(self, amount: Decimal, from_code: str, to_code: str) -> Decimal:
        return amount * self.get_exchange_rate(from_code, to_code)

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_currency(self, currency: Currency) -> Currency:
        """
        Register a new currency.

        New currencies are never main, except the first one added to an
        empty table.

        Raises:
            DuplicateCurrencyCodeError: If the code is already registered
        """
        if currency.code in self:
            raise DuplicateCurrencyCodeError(currency.code)

        added = currency.model_copy(update={"is_main": not self._currencies})
        self._currencies.append(added)
        return added

    def update_currency(self, currency: Currency) -> Currency:
        """
        Replace name, symbol and rate of the currency with the same code.

        The code is the lookup key and cannot change. `is_main` is kept
        as-is; use set_main_currency to move it.

        Raises:
            UnknownCurrencyError: If the code is not registered
        """
        existing = self.require(currency.code)
        index = self._currencies.index(existing)
        updated = currency.model_copy(update={"is_main": existing.is_main})
        self._currencies[index] = updated
        return updated

    def delete_currency(self, code: str) -> Currency:
        """
        Remove a currency.

        Transactions denominated in it keep their stored code; later
        conversions for that code fail with UnknownCurrencyError.

        Raises:
            UnknownCurrencyError: If the code is not registered
            CannotDeleteMainCurrencyError: If it is the main currency
        """
        existing = self.require(code)
        if existing.is_main:
            raise CannotDeleteMainCurrencyError(existing.code)
        self._currencies.remove(existing)
        return existing

    def set_main_currency(self, code: str) -> Currency:
        """
        Make `code` the main currency, clearing the previous main.

        Raises:
            UnknownCurrencyError: If the code is not registered
        """
        target = self.require(code)
        self._currencies[:] = [
            c.model_copy(update={"is_main": c.code == target.code})
            for c in self._currencies
        ]
        return self.require(code)
