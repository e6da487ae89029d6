"""
Entity Store

Owns the four collections of the ledger (accounts, categories,
currencies, transactions) and is the only code that mutates them.

RULES:
1. Every operation validates completely before it mutates anything.
   A raised error means the state is exactly as it was.
2. Account balances are running totals. They change only through the
   balance effects of paid transactions (see ledger.store.balance).
3. The store knows nothing about history. The Ledger façade records a
   snapshot after each successful call.
"""

from decimal import Decimal
from typing import Optional, Union
from uuid import UUID

from ledger.config import get_settings
from ledger.currency import CurrencyTable, default_currencies
from ledger.errors import InvariantViolationError, NotFoundError
from ledger.models.entities import (
    Account,
    AccountCreate,
    Category,
    CategoryCreate,
    Currency,
    LedgerState,
    Subcategory,
    Transaction,
    TransactionCreate,
)
from ledger.store.balance import combine_effects
from ledger.store.cascade import (
    AccountDeletionMode,
    referencing_transactions,
    repoint_transaction,
    validate_move_target,
)


def _find(records: list, record_id: UUID):
    for record in records:
        if record.id == record_id:
            return record
    return None


def _copy(record):
    return record.model_copy(deep=True) if record is not None else None


def new_ledger_state() -> LedgerState:
    """Empty ledger, seeded with the default currencies if configured."""
    settings = get_settings().app
    currencies = []
    if settings.seed_default_currencies:
        currencies = default_currencies(settings.default_main_currency)
    return LedgerState(currencies=currencies)


class EntityStore:
    """
    The single mutable root of ledger data.

    Callers hold an explicit handle to a store; there is no global
    instance. Records never leave the store by reference: lookups and
    operation results are deep copies, and records passed in are copied
    before they are stored. `state` is the live root, for the Ledger
    façade and the history engine only.
    """

    def __init__(self, state: Optional[LedgerState] = None):
        self._state = state if state is not None else new_ledger_state()

    # -------------------------------------------------------------------------
    # State access
    # -------------------------------------------------------------------------

    @property
    def state(self) -> LedgerState:
        return self._state

    @property
    def accounts(self) -> list[Account]:
        return [a.model_copy(deep=True) for a in self._state.accounts]

    @property
    def transactions(self) -> list[Transaction]:
        return [t.model_copy(deep=True) for t in self._state.transactions]

    @property
    def categories(self) -> list[Category]:
        return [c.model_copy(deep=True) for c in self._state.categories]

    @property
    def currencies(self) -> list[Currency]:
        return [c.model_copy(deep=True) for c in self._state.currencies]

    @property
    def currency_table(self) -> CurrencyTable:
        return CurrencyTable(self._state.currencies)

    def snapshot(self) -> LedgerState:
        """Deep copy of the current state."""
        return self._state.copy_state()

    def replace_state(self, state: LedgerState) -> None:
        """Swap in a whole state (undo/redo/restore/import). No validation."""
        self._state = state.copy_state()

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    def get_account(self, account_id: UUID) -> Optional[Account]:
        return _copy(_find(self._state.accounts, account_id))

    def get_transaction(self, transaction_id: UUID) -> Optional[Transaction]:
        return _copy(_find(self._state.transactions, transaction_id))

    def get_category(self, category_id: UUID) -> Optional[Category]:
        return _copy(_find(self._state.categories, category_id))

    def find_categories_by_name(self, name: str) -> list[Category]:
        name = name.strip()
        return [c.model_copy(deep=True) for c in self._state.categories if c.name == name]

    def require_account(self, account_id: UUID) -> Account:
        return self._account(account_id).model_copy(deep=True)

    def require_transaction(self, transaction_id: UUID) -> Transaction:
        return self._transaction(transaction_id).model_copy(deep=True)

    def require_category(self, category_id: UUID) -> Category:
        return self._category(category_id).model_copy(deep=True)

    # Live records, for mutation inside the store only

    def _account(self, account_id: UUID) -> Account:
        account = _find(self._state.accounts, account_id)
        if account is None:
            raise NotFoundError("account", account_id)
        return account

    def _transaction(self, transaction_id: UUID) -> Transaction:
        transaction = _find(self._state.transactions, transaction_id)
        if transaction is None:
            raise NotFoundError("transaction", transaction_id)
        return transaction

    def _category(self, category_id: UUID) -> Category:
        category = _find(self._state.categories, category_id)
        if category is None:
            raise NotFoundError("category", category_id)
        return category

    # -------------------------------------------------------------------------
    # Accounts
    # -------------------------------------------------------------------------

    def add_account(self, data: AccountCreate) -> Account:
        """
        Open an account with a fresh id.

        Raises:
            UnknownCurrencyError: If the account currency is not registered
        """
        self.currency_table.require(data.currency)
        account = Account(**data.model_dump(exclude={"id"}))
        self._state.accounts.append(account)
        return account.model_copy(deep=True)

    def update_account(self, account: Account) -> Account:
        """
        Replace an account record.

        Historical transactions are not touched.

        Raises:
            NotFoundError: If the account does not exist
            InvariantViolationError: If the currency code was changed
        """
        existing = self._account(account.id)
        if account.currency != existing.currency:
            raise InvariantViolationError(
                f"Account currency cannot change ({existing.currency} -> {account.currency})"
            )
        stored = account.model_copy(deep=True)
        index = self._state.accounts.index(existing)
        self._state.accounts[index] = stored
        return stored.model_copy(deep=True)

    def delete_account(
        self,
        account_id: UUID,
        mode: Union[AccountDeletionMode, str] = AccountDeletionMode.DELETE,
        target_account_id: Optional[UUID] = None,
    ) -> Account:
        """
        Delete an account and resolve its transactions.

        delete: every transaction referencing the account on either leg is
                removed; the surviving leg of a paid transfer is reversed.
        move:   every reference is re-pointed to the target account; no
                balance is recomputed, the moved effects are assumed to
                already be reflected in both running balances.

        Raises:
            NotFoundError: If the account does not exist
            InvalidTargetError: On a bad move target
        """
        account = self._account(account_id)
        mode = AccountDeletionMode(mode)

        if mode == AccountDeletionMode.MOVE:
            target_id = validate_move_target(self._state, account_id, target_account_id)
            self._state.transactions = [
                repoint_transaction(t, account_id, target_id)
                if t.references_account(account_id) else t
                for t in self._state.transactions
            ]
        else:
            doomed = referencing_transactions(self._state, account_id)
            deltas: dict[UUID, Decimal] = {}
            for transaction in doomed:
                for other_id, amount in combine_effects(reverse=transaction).items():
                    if other_id != account_id:
                        deltas[other_id] = deltas.get(other_id, Decimal("0")) + amount
            doomed_ids = {t.id for t in doomed}
            self._state.transactions = [
                t for t in self._state.transactions if t.id not in doomed_ids
            ]
            self._apply_deltas(deltas)

        self._state.accounts.remove(account)
        return account

    # -------------------------------------------------------------------------
    # Transactions
    # -------------------------------------------------------------------------

    def add_transaction(self, data: TransactionCreate) -> Transaction:
        """
        Record a transaction with a fresh id and apply its balance effect.

        Raises:
            NotFoundError: If an account does not exist
            UnknownCurrencyError: If the currency is not registered
            InvariantViolationError: If the category type does not fit
        """
        self._check_transaction(data)
        transaction = Transaction(**data.model_dump(exclude={"id"}))
        deltas = combine_effects(apply=transaction)
        self._apply_deltas(deltas)
        self._state.transactions.append(transaction)
        return transaction.model_copy(deep=True)

    def update_transaction(self, transaction: Transaction) -> Transaction:
        """
        Replace a transaction: reverse the old effect, apply the new one.

        Raises:
            NotFoundError: If the transaction or an account does not exist
            UnknownCurrencyError: If a changed currency is not registered
            InvariantViolationError: If the category type does not fit
        """
        old = self._transaction(transaction.id)
        stored = transaction.model_copy(deep=True)
        self._check_transaction(stored, check_currency=stored.currency != old.currency)
        deltas = combine_effects(apply=stored, reverse=old)
        self._apply_deltas(deltas)
        index = self._state.transactions.index(old)
        self._state.transactions[index] = stored
        return stored.model_copy(deep=True)

    def delete_transaction(self, transaction_id: UUID) -> Transaction:
        """
        Remove a transaction, reversing its balance effect.

        Raises:
            NotFoundError: If the transaction does not exist
        """
        transaction = self._transaction(transaction_id)
        self._apply_deltas(combine_effects(reverse=transaction))
        self._state.transactions.remove(transaction)
        return transaction

    def toggle_transaction_paid_status(self, transaction_id: UUID) -> Transaction:
        """
        Flip is_paid, applying or reversing exactly one balance effect.

        Raises:
            NotFoundError: If the transaction does not exist
        """
        old = self._transaction(transaction_id)
        toggled = old.model_copy(update={"is_paid": not old.is_paid}, deep=True)
        self._apply_deltas(combine_effects(apply=toggled, reverse=old))
        index = self._state.transactions.index(old)
        self._state.transactions[index] = toggled
        return toggled.model_copy(deep=True)

    def _check_transaction(
        self,
        transaction: TransactionCreate,
        check_currency: bool = True,
    ) -> None:
        self._account(transaction.account_id)
        if transaction.to_account_id is not None:
            self._account(transaction.to_account_id)

        if check_currency:
            self.currency_table.require(transaction.currency)

        # Category references are by name. An unknown name is accepted as
        # free text; a known name must have a category of the same type.
        if transaction.category is not None:
            named = self.find_categories_by_name(transaction.category)
            if named and not any(c.type.value == transaction.type.value for c in named):
                raise InvariantViolationError(
                    f"Category '{transaction.category}' cannot be used "
                    f"for {transaction.type.value} transactions"
                )

    def _apply_deltas(self, deltas: dict[UUID, Decimal]) -> None:
        accounts = [(self._account(account_id), delta) for account_id, delta in deltas.items()]
        for account, delta in accounts:
            account.balance = account.balance + delta

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    def add_category(self, data: CategoryCreate) -> Category:
        category = Category(**data.model_dump(exclude={"id"}))
        self._state.categories.append(category)
        return category.model_copy(deep=True)

    def update_category(self, category: Category) -> Category:
        """
        Replace a category record.

        Transactions keep the category name they were saved with; a
        rename is not propagated.

        Raises:
            NotFoundError: If the category does not exist
        """
        existing = self._category(category.id)
        stored = category.model_copy(deep=True)
        index = self._state.categories.index(existing)
        self._state.categories[index] = stored
        return stored.model_copy(deep=True)

    def delete_category(self, category_id: UUID) -> Category:
        """
        Remove a category. Transactions referencing its name are kept as-is.

        Raises:
            NotFoundError: If the category does not exist
        """
        category = self._category(category_id)
        self._state.categories.remove(category)
        return category

    def add_subcategory(
        self,
        category_id: UUID,
        name: str,
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> Subcategory:
        category = self._category(category_id)
        subcategory = Subcategory(name=name, color=color, icon=icon)
        self._replace_subcategories(category, category.subcategories + [subcategory])
        return subcategory.model_copy()

    def update_subcategory(self, category_id: UUID, subcategory: Subcategory) -> Subcategory:
        category = self._category(category_id)
        if category.get_subcategory(subcategory.id) is None:
            raise NotFoundError("subcategory", subcategory.id)
        stored = subcategory.model_copy()
        self._replace_subcategories(
            category,
            [stored if s.id == stored.id else s for s in category.subcategories],
        )
        return stored.model_copy()

    def delete_subcategory(self, category_id: UUID, subcategory_id: UUID) -> Subcategory:
        category = self._category(category_id)
        subcategory = category.get_subcategory(subcategory_id)
        if subcategory is None:
            raise NotFoundError("subcategory", subcategory_id)
        self._replace_subcategories(
            category,
            [s for s in category.subcategories if s.id != subcategory_id],
        )
        return subcategory

    def _replace_subcategories(self, category: Category, subcategories: list[Subcategory]) -> None:
        index = self._state.categories.index(category)
        self._state.categories[index] = category.model_copy(update={"subcategories": subcategories})

    # -------------------------------------------------------------------------
    # Currencies
    # -------------------------------------------------------------------------

    def add_currency(self, currency: Currency) -> Currency:
        return self.currency_table.add_currency(currency).model_copy()

    def update_currency(self, currency: Currency) -> Currency:
        return self.currency_table.update_currency(currency).model_copy()

    def delete_currency(self, code: str) -> Currency:
        return self.currency_table.delete_currency(code)

    def set_main_currency(self, code: str) -> Currency:
        return self.currency_table.set_main_currency(code).model_copy()

    def get_exchange_rate(self, from_code: str, to_code: str) -> Decimal:
        return self.currency_table.get_exchange_rate(from_code, to_code)
