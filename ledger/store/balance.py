"""
Balance Effects

A paid transaction moves money on one or two accounts:

    income   : +amount on account_id
    expense  : -amount on account_id
    transfer : -amount on account_id, +amount on to_account_id

Transfers use the same face-value amount on both legs; no currency
conversion happens, even when the two accounts use different currencies.
Unpaid transactions have no effect.

Edits are always "reverse old effect, apply new effect", so a single edit
that changes account, amount, type and paid status stays consistent.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Optional
from uuid import UUID

from ledger.models.entities import TransactionCreate, TransactionType


def balance_effect(transaction: TransactionCreate) -> dict[UUID, Decimal]:
    """Signed amount per account id this transaction contributes."""
    if not transaction.is_paid:
        return {}

    if transaction.type == TransactionType.INCOME:
        return {transaction.account_id: transaction.amount}
    if transaction.type == TransactionType.EXPENSE:
        return {transaction.account_id: -transaction.amount}

    # A move-then-delete can leave a transfer with both legs on one account
    effects: dict[UUID, Decimal] = defaultdict(Decimal)
    effects[transaction.account_id] -= transaction.amount
    effects[transaction.to_account_id] += transaction.amount
    return dict(effects)


def combine_effects(
    apply: Optional[TransactionCreate] = None,
    reverse: Optional[TransactionCreate] = None,
) -> dict[UUID, Decimal]:
    """
    Net balance change of reversing one transaction and applying another.

    Accounts whose net change is zero are left out.
    """
    deltas: dict[UUID, Decimal] = defaultdict(Decimal)
    if reverse is not None:
        for account_id, amount in balance_effect(reverse).items():
            deltas[account_id] -= amount
    if apply is not None:
        for account_id, amount in balance_effect(apply).items():
            deltas[account_id] += amount
    return {account_id: amount for account_id, amount in deltas.items() if amount != 0}
