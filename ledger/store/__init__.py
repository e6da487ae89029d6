"""Entity store package."""

from ledger.store.balance import balance_effect, combine_effects
from ledger.store.cascade import (
    AccountDeletionMode,
    AccountDeletionPlan,
    plan_account_deletion,
    referencing_transactions,
    validate_move_target,
)
from ledger.store.entity_store import EntityStore, new_ledger_state

__all__ = [
    "AccountDeletionMode",
    "AccountDeletionPlan",
    "EntityStore",
    "balance_effect",
    "combine_effects",
    "new_ledger_state",
    "plan_account_deletion",
    "referencing_transactions",
    "validate_move_target",
]
