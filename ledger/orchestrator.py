"""
Ledger Façade

This module ties together the entity store, the history engine, the
audit logger and (optionally) a storage backend, and exposes the one
operation surface the UI talks to.

Mutation flow:
1. Store validates and applies the change (or raises, state untouched)
2. History records a snapshot of the resulting state
3. Audit logger writes a structured line

DESIGN DECISION: There is no global ledger. The app builds one with
create_ledger() and passes the handle to whatever needs it. Everything
goes through the handle, which keeps a single writer for the history
engine to rely on.
"""

from decimal import Decimal
from typing import Callable, Optional, TypeVar, Union
from uuid import UUID

from ledger.audit import AuditLogger, configure_logging
from ledger.errors import InvalidDocumentError, LedgerError
from ledger.history import HistoryEngine
from ledger.models.document import LedgerDocument
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
from ledger.models.history import (
    ActionType,
    HistoryEntry,
    HistoryEntryBuilder,
    HistorySnapshot,
)
from ledger.queries import LedgerQueries
from ledger.services.storage import (
    JsonFileLedgerStorage,
    LedgerStorageInterface,
    StorageError,
)
from ledger.store import (
    AccountDeletionMode,
    AccountDeletionPlan,
    EntityStore,
    plan_account_deletion,
)
from ledger.validation import DocumentValidator
from ledger.validation.validator import Payload


T = TypeVar("T")


class Ledger:
    """
    The core operation surface.

    Every mutating call either succeeds completely and yields exactly
    one history snapshot, or raises and changes nothing.
    """

    def __init__(
        self,
        store: Optional[EntityStore] = None,
        history: Optional[HistoryEngine] = None,
        audit_logger: Optional[AuditLogger] = None,
        storage: Optional[LedgerStorageInterface] = None,
        validator: Optional[DocumentValidator] = None,
    ):
        self._store = store or EntityStore()
        self._history = history or HistoryEngine()
        self._audit_logger = audit_logger or AuditLogger()
        self._storage = storage
        self._validator = validator or DocumentValidator()

    # =========================================================================
    # Read access
    # =========================================================================

    @property
    def state(self) -> LedgerState:
        """A deep copy of the current state. Change it only through this class."""
        return self._store.snapshot()

    @property
    def accounts(self) -> list[Account]:
        return self._store.accounts

    @property
    def transactions(self) -> list[Transaction]:
        return self._store.transactions

    @property
    def categories(self) -> list[Category]:
        return self._store.categories

    @property
    def currencies(self) -> list[Currency]:
        return self._store.currencies

    @property
    def main_currency(self) -> Optional[Currency]:
        main = self._store.currency_table.main_currency
        return main.model_copy() if main is not None else None

    @property
    def queries(self) -> LedgerQueries:
        return LedgerQueries(self._store.snapshot(), self._audit_logger)

    def get_account(self, account_id: UUID) -> Optional[Account]:
        return self._store.get_account(account_id)

    def get_transaction(self, transaction_id: UUID) -> Optional[Transaction]:
        return self._store.get_transaction(transaction_id)

    def get_category(self, category_id: UUID) -> Optional[Category]:
        return self._store.get_category(category_id)

    def get_exchange_rate(self, from_code: str, to_code: str) -> Decimal:
        return self._store.get_exchange_rate(from_code, to_code)

    def plan_account_deletion(self, account_id: UUID) -> AccountDeletionPlan:
        """What deleting this account involves, before choosing a mode."""
        return plan_account_deletion(self._store.state, account_id)

    # =========================================================================
    # Accounts
    # =========================================================================

    def add_account(self, data: AccountCreate) -> Account:
        return self._mutate(
            "add_account",
            lambda: self._store.add_account(data),
            HistoryEntryBuilder.account_added,
        )

    def update_account(self, account: Account) -> Account:
        return self._mutate(
            "update_account",
            lambda: self._store.update_account(account),
            HistoryEntryBuilder.account_updated,
        )

    def delete_account(
        self,
        account_id: UUID,
        mode: Union[AccountDeletionMode, str] = AccountDeletionMode.DELETE,
        target_account_id: Optional[UUID] = None,
    ) -> Account:
        moved_to = None
        if AccountDeletionMode(mode) == AccountDeletionMode.MOVE and target_account_id is not None:
            moved_to = self._store.get_account(target_account_id)
        return self._mutate(
            "delete_account",
            lambda: self._store.delete_account(account_id, mode, target_account_id),
            lambda account: HistoryEntryBuilder.account_deleted(account, moved_to),
        )

    # =========================================================================
    # Transactions
    # =========================================================================

    def add_transaction(self, data: TransactionCreate) -> Transaction:
        return self._mutate(
            "add_transaction",
            lambda: self._store.add_transaction(data),
            HistoryEntryBuilder.transaction_added,
        )

    def update_transaction(self, transaction: Transaction) -> Transaction:
        return self._mutate(
            "update_transaction",
            lambda: self._store.update_transaction(transaction),
            HistoryEntryBuilder.transaction_updated,
        )

    def delete_transaction(self, transaction_id: UUID) -> Transaction:
        return self._mutate(
            "delete_transaction",
            lambda: self._store.delete_transaction(transaction_id),
            HistoryEntryBuilder.transaction_deleted,
        )

    def toggle_transaction_paid_status(self, transaction_id: UUID) -> Transaction:
        return self._mutate(
            "toggle_transaction_paid_status",
            lambda: self._store.toggle_transaction_paid_status(transaction_id),
            HistoryEntryBuilder.transaction_paid_toggled,
        )

    # =========================================================================
    # Categories
    # =========================================================================

    def add_category(self, data: CategoryCreate) -> Category:
        return self._mutate(
            "add_category",
            lambda: self._store.add_category(data),
            HistoryEntryBuilder.category_added,
        )

    def update_category(self, category: Category) -> Category:
        return self._mutate(
            "update_category",
            lambda: self._store.update_category(category),
            HistoryEntryBuilder.category_updated,
        )

    def delete_category(self, category_id: UUID) -> Category:
        return self._mutate(
            "delete_category",
            lambda: self._store.delete_category(category_id),
            HistoryEntryBuilder.category_deleted,
        )

    def add_subcategory(
        self,
        category_id: UUID,
        name: str,
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> Subcategory:
        return self._mutate(
            "add_subcategory",
            lambda: self._store.add_subcategory(category_id, name, color, icon),
            lambda sub: self._subcategory_entry(ActionType.CREATE, category_id, sub),
        )

    def update_subcategory(self, category_id: UUID, subcategory: Subcategory) -> Subcategory:
        return self._mutate(
            "update_subcategory",
            lambda: self._store.update_subcategory(category_id, subcategory),
            lambda sub: self._subcategory_entry(ActionType.UPDATE, category_id, sub),
        )

    def delete_subcategory(self, category_id: UUID, subcategory_id: UUID) -> Subcategory:
        return self._mutate(
            "delete_subcategory",
            lambda: self._store.delete_subcategory(category_id, subcategory_id),
            lambda sub: self._subcategory_entry(ActionType.DELETE, category_id, sub),
        )

    def _subcategory_entry(
        self,
        action_type: ActionType,
        category_id: UUID,
        subcategory: Subcategory,
    ) -> HistoryEntry:
        category = self._store.require_category(category_id)
        return HistoryEntryBuilder.subcategory_changed(action_type, category, subcategory)

    # =========================================================================
    # Currencies
    # =========================================================================

    def add_currency(self, currency: Currency) -> Currency:
        return self._mutate(
            "add_currency",
            lambda: self._store.add_currency(currency),
            HistoryEntryBuilder.currency_added,
        )

    def update_currency(self, currency: Currency) -> Currency:
        return self._mutate(
            "update_currency",
            lambda: self._store.update_currency(currency),
            HistoryEntryBuilder.currency_updated,
        )

    def delete_currency(self, code: str) -> Currency:
        return self._mutate(
            "delete_currency",
            lambda: self._store.delete_currency(code),
            lambda currency: HistoryEntryBuilder.currency_deleted(currency.code),
        )

    def set_main_currency(self, code: str) -> Currency:
        return self._mutate(
            "set_main_currency",
            lambda: self._store.set_main_currency(code),
            lambda currency: HistoryEntryBuilder.main_currency_set(currency.code),
        )

    # =========================================================================
    # History
    # =========================================================================

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    @property
    def history_snapshots(self) -> list[HistorySnapshot]:
        return [s.model_copy(deep=True) for s in self._history.snapshots]

    def undo(self) -> bool:
        """Step back one change. Returns False if there was nothing to undo."""
        state = self._history.undo()
        if state is None:
            self._audit_logger.log_undo(None)
            return False
        self._store.replace_state(state)
        self._audit_logger.log_undo(self._history.current)
        return True

    def redo(self) -> bool:
        """Step forward one change. Returns False if there was nothing to redo."""
        state = self._history.redo()
        if state is None:
            self._audit_logger.log_redo(None)
            return False
        self._store.replace_state(state)
        self._audit_logger.log_redo(self._history.current)
        return True

    def restore_to_snapshot(self, snapshot_id: UUID) -> None:
        """
        Replace the live state with any snapshot in the log.

        Raises:
            SnapshotNotFoundError: If the id is not in the log
        """
        try:
            state = self._history.restore(snapshot_id)
        except LedgerError as e:
            self._audit_logger.log_operation_failed("restore_to_snapshot", e)
            raise
        self._store.replace_state(state)
        self._audit_logger.log_restore(self._history.current)

    def clear_history(self) -> None:
        """Forget all snapshots. The live state stays as it is."""
        count = len(self._history.snapshots)
        self._history.clear()
        self._audit_logger.log_history_cleared(count)

    # =========================================================================
    # Export / import
    # =========================================================================

    def export_data(self) -> str:
        """Serialize the full ledger to a JSON document."""
        state = self._store.state
        document = LedgerDocument.from_state(state)
        self._audit_logger.log_export(len(state.accounts), len(state.transactions))
        return document.model_dump_json(indent=2)

    def import_data(self, payload: Payload) -> None:
        """
        Replace the whole ledger with an exported document.

        The document is validated completely first. Records one
        `import` snapshot.

        Raises:
            InvalidDocumentError: If the payload cannot be parsed/validated
        """
        self._mutate(
            "import_data",
            lambda: self._install(self._parse_document(payload)),
            HistoryEntryBuilder.data_imported,
        )

    def _parse_document(self, payload: Payload) -> LedgerState:
        result = self._validator.validate(payload)
        if not result.is_valid:
            issues = [issue.model_dump(mode="json") for issue in result.issues]
            self._audit_logger.log_import_rejected(issues)
            raise InvalidDocumentError("Invalid backup file format", issues=result.issues)
        return result.document.to_state()

    def _install(self, state: LedgerState) -> LedgerState:
        self._store.replace_state(state)
        return self._store.state

    # =========================================================================
    # Persistence
    # =========================================================================

    async def save(self) -> bool:
        """
        Write the exported document to the configured storage.

        Raises:
            StorageError: If no storage is configured or the write fails
        """
        storage = self._require_storage()
        document = self.export_data()
        try:
            result = await storage.write_document(document)
        except StorageError:
            self._audit_logger.log_storage_event("write", storage.location, success=False)
            raise
        self._audit_logger.log_storage_event("write", storage.location, success=True)
        return result

    async def load(self) -> bool:
        """
        Replace the live state with the stored document (startup load).

        Unlike import_data, this records no snapshot and starts a fresh
        history. Returns False if nothing was stored yet.

        Raises:
            StorageError: If no storage is configured or the read fails
            InvalidDocumentError: If the stored document is invalid
        """
        storage = self._require_storage()
        try:
            document = await storage.read_document()
        except StorageError:
            self._audit_logger.log_storage_event("read", storage.location, success=False)
            raise
        if document is None:
            return False

        self._install(self._parse_document(document))
        self._history.clear()
        self._audit_logger.log_storage_event("read", storage.location, success=True)
        return True

    def _require_storage(self) -> LedgerStorageInterface:
        if self._storage is None:
            raise StorageError("No storage configured for this ledger")
        return self._storage

    # =========================================================================
    # Internals
    # =========================================================================

    def _mutate(
        self,
        operation: str,
        action: Callable[[], T],
        describe: Callable[[T], HistoryEntry],
    ) -> T:
        previous = self._store.snapshot() if self._history.is_empty else None
        try:
            result = action()
        except LedgerError as e:
            self._audit_logger.log_operation_failed(operation, e)
            raise

        snapshot = self._history.record(describe(result), self._store.state, previous)
        self._audit_logger.log_snapshot(snapshot)
        return result


def create_ledger(
    use_storage: bool = False,
    storage_path: Optional[str] = None,
) -> Ledger:
    """
    Factory function to create a ready-to-use ledger.

    Args:
        use_storage: Whether to attach the local JSON file storage.
                     Leave False for tests and throwaway sessions.
        storage_path: Overrides the configured document path.

    Returns:
        A new Ledger seeded per configuration
    """
    configure_logging()
    storage = JsonFileLedgerStorage(storage_path) if use_storage else None
    return Ledger(storage=storage)
