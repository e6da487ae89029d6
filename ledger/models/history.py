"""
History Models for Personal Ledger

Every mutation of the ledger produces one history snapshot. A snapshot
holds a full copy of the state after the mutation plus a small
descriptor used by the history screen ("Added account: Wallet").

DESIGN DECISION: Snapshots are full-state copies rather than command
objects. Restoring is then a plain replace, and undo can never get out
of sync with the operations that produced the state.
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from ledger.models.entities import (
    Account,
    Category,
    Currency,
    LedgerState,
    Subcategory,
    Transaction,
)


class ActionType(str, Enum):
    """What kind of mutation produced a snapshot."""
    INITIAL = "initial"  # baseline captured before the first recorded change
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    IMPORT = "import"


class EntityType(str, Enum):
    """Which collection a mutation touched."""
    ACCOUNT = "account"
    TRANSACTION = "transaction"
    CATEGORY = "category"
    SUBCATEGORY = "subcategory"
    CURRENCY = "currency"
    LEDGER = "ledger"


class HistoryEntry(BaseModel):
    """
    Descriptor of a single mutation.

    Built before the snapshot itself so the store operation and the
    history record agree on what happened.
    """

    action_type: ActionType
    entity_type: EntityType
    entity_name: Optional[str] = None
    description: str = Field(
        ...,
        description="Human-readable description of what happened"
    )


class HistorySnapshot(HistoryEntry):
    """
    A point in the history log.

    The log is append-only between clears; undo/redo only move a cursor
    over it.
    """

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique snapshot identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the snapshot was taken (UTC)"
    )
    state: LedgerState = Field(
        ...,
        description="Full ledger state after the mutation"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.

        The captured state is summarized, not dumped.
        """
        return {
            "snapshot_id": str(self.id),
            "timestamp": self.timestamp.isoformat(),
            "action_type": self.action_type.value,
            "entity_type": self.entity_type.value,
            "entity_name": self.entity_name,
            "description": self.description,
            "accounts": len(self.state.accounts),
            "transactions": len(self.state.transactions),
            "categories": len(self.state.categories),
            "currencies": len(self.state.currencies),
        }


class HistoryEntryBuilder:
    """
    Helper class to build history descriptors for each operation.

    Usage:
        entry = HistoryEntryBuilder.account_added(account)
        entry = HistoryEntryBuilder.transaction_deleted(transaction)
    """

    @staticmethod
    def initial() -> HistoryEntry:
        return HistoryEntry(
            action_type=ActionType.INITIAL,
            entity_type=EntityType.LEDGER,
            description="Initial state",
        )

    # Accounts

    @staticmethod
    def account_added(account: Account) -> HistoryEntry:
        return HistoryEntry(
            action_type=ActionType.CREATE,
            entity_type=EntityType.ACCOUNT,
            entity_name=account.name,
            description=f"Added account: {account.name}",
        )

    @staticmethod
    def account_updated(account: Account) -> HistoryEntry:
        return HistoryEntry(
            action_type=ActionType.UPDATE,
            entity_type=EntityType.ACCOUNT,
            entity_name=account.name,
            description=f"Updated account: {account.name}",
        )

    @staticmethod
    def account_deleted(account: Account, moved_to: Optional[Account] = None) -> HistoryEntry:
        if moved_to is not None:
            description = (
                f"Deleted account: {account.name} "
                f"(transactions moved to {moved_to.name})"
            )
        else:
            description = f"Deleted account: {account.name}"
        return HistoryEntry(
            action_type=ActionType.DELETE,
            entity_type=EntityType.ACCOUNT,
            entity_name=account.name,
            description=description,
        )

    # Transactions

    @staticmethod
    def transaction_added(transaction: Transaction) -> HistoryEntry:
        return HistoryEntry(
            action_type=ActionType.CREATE,
            entity_type=EntityType.TRANSACTION,
            entity_name=transaction.description,
            description=f"Added transaction: {transaction.description or 'New transaction'}",
        )

    @staticmethod
    def transaction_updated(transaction: Transaction) -> HistoryEntry:
        return HistoryEntry(
            action_type=ActionType.UPDATE,
            entity_type=EntityType.TRANSACTION,
            entity_name=transaction.description,
            description=f"Updated transaction: {transaction.label}",
        )

    @staticmethod
    def transaction_paid_toggled(transaction: Transaction) -> HistoryEntry:
        status = "paid" if transaction.is_paid else "unpaid"
        return HistoryEntry(
            action_type=ActionType.UPDATE,
            entity_type=EntityType.TRANSACTION,
            entity_name=transaction.description,
            description=f"Marked transaction as {status}: {transaction.label}",
        )

    @staticmethod
    def transaction_deleted(transaction: Transaction) -> HistoryEntry:
        return HistoryEntry(
            action_type=ActionType.DELETE,
            entity_type=EntityType.TRANSACTION,
            entity_name=transaction.description,
            description=f"Deleted transaction: {transaction.label}",
        )

    # Categories

    @staticmethod
    def category_added(category: Category) -> HistoryEntry:
        return HistoryEntry(
            action_type=ActionType.CREATE,
            entity_type=EntityType.CATEGORY,
            entity_name=category.name,
            description=f"Added category: {category.name}",
        )

    @staticmethod
    def category_updated(category: Category) -> HistoryEntry:
        return HistoryEntry(
            action_type=ActionType.UPDATE,
            entity_type=EntityType.CATEGORY,
            entity_name=category.name,
            description=f"Updated category: {category.name}",
        )

    @staticmethod
    def category_deleted(category: Category) -> HistoryEntry:
        return HistoryEntry(
            action_type=ActionType.DELETE,
            entity_type=EntityType.CATEGORY,
            entity_name=category.name,
            description=f"Deleted category: {category.name}",
        )

    @staticmethod
    def subcategory_changed(
        action_type: ActionType,
        category: Category,
        subcategory: Subcategory,
    ) -> HistoryEntry:
        verb = {
            ActionType.CREATE: "Added",
            ActionType.UPDATE: "Updated",
            ActionType.DELETE: "Deleted",
        }[action_type]
        return HistoryEntry(
            action_type=action_type,
            entity_type=EntityType.SUBCATEGORY,
            entity_name=subcategory.name,
            description=f"{verb} subcategory: {category.name} / {subcategory.name}",
        )

    # Currencies

    @staticmethod
    def currency_added(currency: Currency) -> HistoryEntry:
        return HistoryEntry(
            action_type=ActionType.CREATE,
            entity_type=EntityType.CURRENCY,
            entity_name=currency.code,
            description=f"Added currency: {currency.code}",
        )

    @staticmethod
    def currency_updated(currency: Currency) -> HistoryEntry:
        return HistoryEntry(
            action_type=ActionType.UPDATE,
            entity_type=EntityType.CURRENCY,
            entity_name=currency.code,
            description=f"Updated currency: {currency.code}",
        )

    @staticmethod
    def currency_deleted(code: str) -> HistoryEntry:
        return HistoryEntry(
            action_type=ActionType.DELETE,
            entity_type=EntityType.CURRENCY,
            entity_name=code,
            description=f"Deleted currency: {code}",
        )

    @staticmethod
    def main_currency_set(code: str) -> HistoryEntry:
        return HistoryEntry(
            action_type=ActionType.UPDATE,
            entity_type=EntityType.CURRENCY,
            entity_name=code,
            description=f"Set main currency: {code}",
        )

    # Whole ledger

    @staticmethod
    def data_imported(state: LedgerState) -> HistoryEntry:
        return HistoryEntry(
            action_type=ActionType.IMPORT,
            entity_type=EntityType.LEDGER,
            description=(
                f"Imported data: {len(state.accounts)} accounts, "
                f"{len(state.transactions)} transactions"
            ),
        )
