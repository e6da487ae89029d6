"""
Core Data Models for Personal Ledger

These models define the strict schemas for everything the ledger owns.
They are designed to:
1. Enforce type safety at runtime
2. Reject inconsistent records before they reach the store
3. Be serializable for the export document and history snapshots

DESIGN DECISION: Amounts, balances and rates are Decimal, never float.
Balances are running totals and must not drift.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class AccountType(str, Enum):
    """Kinds of account a user can hold."""
    CHECKING = "checking"
    CASH = "cash"
    CREDIT = "credit"
    INVESTMENT = "investment"
    CRYPTO = "crypto"
    WALLET = "wallet"
    LOAN = "loan"
    SAVINGS = "savings"
    BUSINESS = "business"
    OTHER = "other"


class CategoryType(str, Enum):
    """
    Category kind.

    A category's type decides which transactions may use it:
    income categories for income, expense categories for expenses.
    """
    INCOME = "income"
    EXPENSE = "expense"


class TransactionType(str, Enum):
    """Transaction kind."""
    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class RecurringUnit(str, Enum):
    """Recurrence period. Descriptive only; nothing is auto-generated."""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


def _normalize_code(v: str) -> str:
    return v.strip().upper()


# =============================================================================
# CURRENCY
# =============================================================================

class Currency(BaseModel):
    """
    A registered currency.

    `rate` is expressed relative to the common base (base rate is 1).
    Exactly one currency in a ledger has `is_main` set.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    code: str = Field(
        ...,
        min_length=1,
        max_length=10,
        description="Currency code, e.g. USD (unique, immutable)"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Display name"
    )
    symbol: str = Field(
        ...,
        min_length=1,
        max_length=10,
        description="Display symbol"
    )
    rate: Decimal = Field(
        ...,
        gt=0,
        description="Units of this currency per one unit of the base"
    )
    is_main: bool = Field(
        default=False,
        description="Is this the main (display) currency?"
    )

    @field_validator('code')
    @classmethod
    def normalize_code(cls, v: str) -> str:
        return _normalize_code(v)


# =============================================================================
# ACCOUNTS
# =============================================================================

class AccountCreate(BaseModel):
    """Fields needed to open an account. The store assigns the id."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Account name"
    )
    type: AccountType = Field(
        default=AccountType.CHECKING,
        description="Kind of account"
    )
    balance: Decimal = Field(
        default=Decimal("0"),
        description="Opening balance, in the account currency"
    )
    currency: str = Field(
        ...,
        min_length=1,
        max_length=10,
        description="Currency code (immutable after creation)"
    )
    color: Optional[str] = Field(
        default=None,
        max_length=20,
        description="Display color"
    )
    icon: Optional[str] = Field(
        default=None,
        max_length=50,
        description="Icon reference"
    )

    @field_validator('currency')
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return _normalize_code(v)


class Account(AccountCreate):
    """
    An account in the ledger.

    `balance` is a running total. It is adjusted whenever a paid
    transaction referencing the account is created, edited, deleted
    or toggled.
    """

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique account ID"
    )


# =============================================================================
# CATEGORIES
# =============================================================================

class Subcategory(BaseModel):
    """A named subdivision of a category."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(default_factory=uuid4)
    name: str = Field(..., min_length=1, max_length=100)
    color: Optional[str] = Field(default=None, max_length=20)
    icon: Optional[str] = Field(default=None, max_length=50)


class CategoryCreate(BaseModel):
    """Fields needed to create a category. The store assigns the id."""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Category name (transactions reference this text)"
    )
    type: CategoryType
    color: Optional[str] = Field(default=None, max_length=20)
    icon: Optional[str] = Field(default=None, max_length=50)
    subcategories: list[Subcategory] = Field(default_factory=list)

    @model_validator(mode='after')
    def validate_subcategory_ids(self):
        """Subcategory ids are unique within a category."""
        ids = [sub.id for sub in self.subcategories]
        if len(ids) != len(set(ids)):
            raise ValueError("Subcategory ids must be unique within a category")
        return self


class Category(CategoryCreate):
    """A transaction category."""

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique category ID"
    )

    def get_subcategory(self, subcategory_id: UUID) -> Optional[Subcategory]:
        for sub in self.subcategories:
            if sub.id == subcategory_id:
                return sub
        return None


# =============================================================================
# TRANSACTIONS
# =============================================================================

class TransactionCreate(BaseModel):
    """
    Fields needed to record a transaction. The store assigns the id.

    Shape rules are enforced here, before the store is involved:
    - transfers need a destination account and carry no category
    - income/expense never carry a destination account
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    type: TransactionType
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Positive amount in the transaction currency"
    )
    currency: str = Field(
        ...,
        min_length=1,
        max_length=10,
        description="Currency code of the amount"
    )
    account_id: UUID = Field(
        ...,
        description="Account the transaction is booked on (source for transfers)"
    )
    to_account_id: Optional[UUID] = Field(
        default=None,
        description="Destination account (transfers only)"
    )
    category: Optional[str] = Field(
        default=None,
        max_length=100,
        description="Category name (income/expense only)"
    )
    subcategory: Optional[str] = Field(
        default=None,
        max_length=100,
        description="Subcategory name (income/expense only)"
    )
    date: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the transaction happened"
    )
    description: Optional[str] = Field(
        default=None,
        max_length=500,
        description="Free-text description"
    )
    is_paid: bool = Field(
        default=True,
        description="Only paid transactions affect balances"
    )
    is_recurring: bool = False
    recurring_unit: Optional[RecurringUnit] = None
    recurring_value: Optional[int] = Field(default=None, ge=1)
    receipt_image: Optional[str] = Field(
        default=None,
        description="Reference to a stored receipt image"
    )

    @field_validator('currency')
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return _normalize_code(v)

    @model_validator(mode='after')
    def validate_shape(self):
        """Validate fields that depend on the transaction type."""
        if self.type == TransactionType.TRANSFER:
            if self.to_account_id is None:
                raise ValueError("Transfer requires a destination account")
            if self.category is not None or self.subcategory is not None:
                raise ValueError("Transfer cannot carry a category")
        elif self.to_account_id is not None:
            raise ValueError(f"{self.type.value.capitalize()} cannot have a destination account")

        if self.subcategory is not None and self.category is None:
            raise ValueError("Subcategory requires a category")

        if self.is_recurring and self.recurring_unit is None:
            raise ValueError("Recurring transaction requires a recurring unit")

        return self

    @property
    def label(self) -> str:
        """Human label used in history descriptions."""
        return self.description or "Transaction"


class Transaction(TransactionCreate):
    """A recorded transaction."""

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique transaction ID"
    )

    def references_account(self, account_id: UUID) -> bool:
        return self.account_id == account_id or self.to_account_id == account_id


# =============================================================================
# LEDGER STATE
# =============================================================================

class LedgerState(BaseModel):
    """
    The complete state owned by the ledger.

    This is what history snapshots capture and what the export
    document serializes.
    """

    accounts: list[Account] = Field(default_factory=list)
    transactions: list[Transaction] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    currencies: list[Currency] = Field(default_factory=list)

    def copy_state(self) -> "LedgerState":
        """Deep copy, safe to keep while the live state keeps mutating."""
        return self.model_copy(deep=True)
