"""
Cascading Delete Resolver

Decides what happens to the transactions of an account being deleted.

An account with no transactions can simply go. Otherwise the caller has
to pick a strategy up front:

    delete : drop every transaction that references the account
             (both legs of a transfer go, even if only one side matches)
    move   : re-point every reference to another account

The choice is made by the caller before the store runs; the core never
prompts. A wrong choice can only be reverted through history.
"""

from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from ledger.errors import InvalidTargetError, NotFoundError
from ledger.models.entities import LedgerState, Transaction


class AccountDeletionMode(str, Enum):
    """Strategy for transactions of a deleted account."""
    DELETE = "delete"
    MOVE = "move"


class AccountDeletionPlan(BaseModel):
    """What deleting an account would involve, for the UI to act on."""

    account_id: UUID
    transaction_ids: list[UUID] = Field(
        default_factory=list,
        description="Transactions referencing the account on either leg"
    )
    move_targets: list[UUID] = Field(
        default_factory=list,
        description="Accounts the transactions could be moved to"
    )

    @property
    def transaction_count(self) -> int:
        return len(self.transaction_ids)

    @property
    def requires_choice(self) -> bool:
        """Must the user pick delete or move before proceeding?"""
        return self.transaction_count > 0

    @property
    def can_move(self) -> bool:
        """Is there another account to move the transactions to?"""
        return bool(self.move_targets)


def referencing_transactions(state: LedgerState, account_id: UUID) -> list[Transaction]:
    return [t for t in state.transactions if t.references_account(account_id)]


def plan_account_deletion(state: LedgerState, account_id: UUID) -> AccountDeletionPlan:
    """
    Inspect an account before deletion.

    Raises:
        NotFoundError: If the account does not exist
    """
    if not any(a.id == account_id for a in state.accounts):
        raise NotFoundError("account", account_id)

    return AccountDeletionPlan(
        account_id=account_id,
        transaction_ids=[t.id for t in referencing_transactions(state, account_id)],
        move_targets=[a.id for a in state.accounts if a.id != account_id],
    )


def validate_move_target(
    state: LedgerState,
    account_id: UUID,
    target_account_id: Optional[UUID],
) -> UUID:
    """
    Check the target of a move-then-delete.

    Raises:
        InvalidTargetError: If the target is missing, the account itself,
            or not in the ledger
    """
    if target_account_id is None:
        raise InvalidTargetError("Moving transactions requires a target account")
    if target_account_id == account_id:
        raise InvalidTargetError("Cannot move transactions to the account being deleted")
    if not any(a.id == target_account_id for a in state.accounts):
        raise InvalidTargetError(f"Target account not found: {target_account_id}")
    return target_account_id


def repoint_transaction(transaction: Transaction, source_id: UUID, target_id: UUID) -> Transaction:
    """Copy of the transaction with every reference to source moved to target."""
    update = {}
    if transaction.account_id == source_id:
        update["account_id"] = target_id
    if transaction.to_account_id == source_id:
        update["to_account_id"] = target_id
    return transaction.model_copy(update=update)
