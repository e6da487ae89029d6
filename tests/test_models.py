"""
Tests for Personal Ledger models

Test strategy:
1. Unit tests for individual components (models, validators)
2. Integration tests for the Ledger façade (with in-memory storage)
3. No real file system access outside pytest's tmp_path
"""

import pytest
from decimal import Decimal
from uuid import uuid4

from ledger.models import (
    Account,
    AccountCreate,
    AccountType,
    ActionType,
    Category,
    CategoryCreate,
    CategoryType,
    Currency,
    EntityType,
    HistoryEntryBuilder,
    HistorySnapshot,
    LedgerDocument,
    LedgerState,
    RecurringUnit,
    Subcategory,
    Transaction,
    TransactionCreate,
    TransactionType,
    ValidationIssue,
    ValidationResult,
)


class TestAccountModels:
    """Tests for account models."""

    def test_account_creation(self):
        """Test Account model creation with defaults."""
        account = Account(name="Wallet", currency="usd")
        assert account.name == "Wallet"
        assert account.type == AccountType.CHECKING
        assert account.balance == Decimal("0")
        assert account.currency == "USD"
        assert account.id is not None

    def test_account_strips_whitespace(self):
        """Test that whitespace is stripped from account name."""
        account = AccountCreate(name="  Savings  ", currency="EUR")
        assert account.name == "Savings"

    def test_account_rejects_empty_name(self):
        """Test that an empty name is rejected."""
        with pytest.raises(ValueError):
            AccountCreate(name="   ", currency="USD")

    def test_account_allows_negative_balance(self):
        """Test that credit accounts may go negative."""
        account = Account(name="Card", type=AccountType.CREDIT, currency="USD", balance=Decimal("-250"))
        assert account.balance == Decimal("-250")


class TestTransactionModels:
    """Tests for transaction shape rules."""

    def test_income_creation(self):
        """Test TransactionCreate defaults for an income."""
        tx = TransactionCreate(
            type=TransactionType.INCOME,
            amount=Decimal("100.00"),
            currency="usd",
            account_id=uuid4(),
            category="Salary",
        )
        assert tx.is_paid is True
        assert tx.is_recurring is False
        assert tx.currency == "USD"
        assert tx.date is not None

    def test_rejects_non_positive_amount(self):
        """Test that zero and negative amounts are rejected."""
        for amount in ("0", "-5"):
            with pytest.raises(ValueError):
                TransactionCreate(
                    type=TransactionType.EXPENSE,
                    amount=Decimal(amount),
                    currency="USD",
                    account_id=uuid4(),
                )

    def test_accepts_sub_cent_amount(self):
        """Test that amounts are not limited to two decimal places."""
        tx = TransactionCreate(
            type=TransactionType.INCOME,
            amount=Decimal("0.005"),
            currency="USD",
            account_id=uuid4(),
        )
        assert tx.amount == Decimal("0.005")

    def test_long_description_fits_history_entry(self):
        """Test that a maximum-length description still builds a descriptor."""
        tx = Transaction(
            type=TransactionType.INCOME,
            amount=Decimal("1"),
            currency="USD",
            account_id=uuid4(),
            description="x" * 500,
        )
        entry = HistoryEntryBuilder.transaction_paid_toggled(tx)
        assert entry.description.endswith("x" * 500)

    def test_transfer_requires_destination(self):
        """Test that a transfer without to_account_id is rejected."""
        with pytest.raises(ValueError, match="Transfer requires a destination account"):
            TransactionCreate(
                type=TransactionType.TRANSFER,
                amount=Decimal("10"),
                currency="USD",
                account_id=uuid4(),
            )

    def test_transfer_rejects_category(self):
        """Test that a transfer cannot carry a category."""
        with pytest.raises(ValueError, match="Transfer cannot carry a category"):
            TransactionCreate(
                type=TransactionType.TRANSFER,
                amount=Decimal("10"),
                currency="USD",
                account_id=uuid4(),
                to_account_id=uuid4(),
                category="Rent",
            )

    def test_expense_rejects_destination(self):
        """Test that income/expense cannot have a destination account."""
        with pytest.raises(ValueError, match="cannot have a destination account"):
            TransactionCreate(
                type=TransactionType.EXPENSE,
                amount=Decimal("10"),
                currency="USD",
                account_id=uuid4(),
                to_account_id=uuid4(),
            )

    def test_subcategory_requires_category(self):
        """Test that a subcategory without a category is rejected."""
        with pytest.raises(ValueError, match="Subcategory requires a category"):
            TransactionCreate(
                type=TransactionType.EXPENSE,
                amount=Decimal("10"),
                currency="USD",
                account_id=uuid4(),
                subcategory="Bus",
            )

    def test_recurring_requires_unit(self):
        """Test that a recurring transaction needs a unit."""
        with pytest.raises(ValueError, match="recurring unit"):
            TransactionCreate(
                type=TransactionType.EXPENSE,
                amount=Decimal("10"),
                currency="USD",
                account_id=uuid4(),
                is_recurring=True,
            )
        tx = TransactionCreate(
            type=TransactionType.EXPENSE,
            amount=Decimal("10"),
            currency="USD",
            account_id=uuid4(),
            is_recurring=True,
            recurring_unit=RecurringUnit.MONTH,
            recurring_value=1,
        )
        assert tx.recurring_unit == RecurringUnit.MONTH

    def test_references_account(self):
        """Test that both transfer legs count as references."""
        source, target = uuid4(), uuid4()
        tx = Transaction(
            type=TransactionType.TRANSFER,
            amount=Decimal("10"),
            currency="USD",
            account_id=source,
            to_account_id=target,
        )
        assert tx.references_account(source)
        assert tx.references_account(target)
        assert not tx.references_account(uuid4())


class TestCategoryAndCurrencyModels:
    """Tests for category and currency models."""

    def test_category_subcategory_lookup(self):
        """Test Category.get_subcategory."""
        sub = Subcategory(name="Bus")
        category = Category(name="Transport", type=CategoryType.EXPENSE, subcategories=[sub])
        assert category.get_subcategory(sub.id) == sub
        assert category.get_subcategory(uuid4()) is None

    def test_category_rejects_duplicate_subcategory_ids(self):
        """Test that subcategory ids are unique within a category."""
        sub = Subcategory(name="Bus")
        with pytest.raises(ValueError, match="unique"):
            CategoryCreate(name="Transport", type=CategoryType.EXPENSE, subcategories=[sub, sub])

    def test_currency_code_normalized(self):
        """Test that currency codes are upper-cased."""
        currency = Currency(code=" eur ", name="Euro", symbol="€", rate=Decimal("0.85"))
        assert currency.code == "EUR"
        assert currency.is_main is False

    def test_currency_rejects_non_positive_rate(self):
        """Test that rates must be positive."""
        with pytest.raises(ValueError):
            Currency(code="XXX", name="Broken", symbol="X", rate=Decimal("0"))


class TestHistoryModels:
    """Tests for history descriptors and snapshots."""

    def test_builder_transaction_added_without_description(self):
        """Test the fallback label of an undescribed transaction."""
        tx = Transaction(
            type=TransactionType.INCOME,
            amount=Decimal("5"),
            currency="USD",
            account_id=uuid4(),
        )
        entry = HistoryEntryBuilder.transaction_added(tx)
        assert entry.action_type == ActionType.CREATE
        assert entry.entity_type == EntityType.TRANSACTION
        assert entry.description == "Added transaction: New transaction"

    def test_builder_account_deleted_with_move(self):
        """Test that a move-then-delete names the target account."""
        account = Account(name="Old", currency="USD")
        target = Account(name="New", currency="USD")
        entry = HistoryEntryBuilder.account_deleted(account, moved_to=target)
        assert entry.action_type == ActionType.DELETE
        assert "moved to New" in entry.description

    def test_builder_subcategory_changed(self):
        """Test subcategory descriptors."""
        category = Category(name="Transport", type=CategoryType.EXPENSE)
        entry = HistoryEntryBuilder.subcategory_changed(
            ActionType.DELETE, category, Subcategory(name="Bus")
        )
        assert entry.entity_type == EntityType.SUBCATEGORY
        assert entry.description == "Deleted subcategory: Transport / Bus"

    def test_snapshot_to_log_dict(self):
        """Test that the log dict summarizes the state."""
        state = LedgerState(accounts=[Account(name="A", currency="USD")])
        snapshot = HistorySnapshot(
            **HistoryEntryBuilder.initial().model_dump(),
            state=state,
        )
        log_dict = snapshot.to_log_dict()
        assert log_dict["action_type"] == "initial"
        assert log_dict["accounts"] == 1
        assert "state" not in log_dict

    def test_copy_state_is_independent(self):
        """Test that a state copy does not share records."""
        state = LedgerState(accounts=[Account(name="A", currency="USD")])
        copied = state.copy_state()
        copied.accounts[0].balance = Decimal("99")
        assert state.accounts[0].balance == Decimal("0")


class TestDocumentModels:
    """Tests for the export document and validation result."""

    def test_document_from_state(self):
        """Test that a document carries the four collections."""
        state = LedgerState(
            accounts=[Account(name="A", currency="USD")],
            currencies=[Currency(code="USD", name="US Dollar", symbol="$", rate=Decimal("1"), is_main=True)],
        )
        document = LedgerDocument.from_state(state)
        assert document.version == 1
        assert document.to_state().model_dump() == state.model_dump()

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(
            schema_valid=False,
            semantic_valid=False,
            issues=[
                ValidationIssue(
                    field="accounts.0.name",
                    issue_type="invalid",
                    message="Field required",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.error_count == 1
        assert result.is_valid is False

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(
            schema_valid=True,
            semantic_valid=True,
            issues=[
                ValidationIssue(
                    field="accounts.0.currency",
                    issue_type="unknown_currency",
                    message="Unregistered currency",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is False
        assert result.error_count == 0
        assert result.is_valid is True


class TestEnums:
    """Tests for enum values used in the export document."""

    def test_account_types(self):
        """Test that expected account types exist."""
        expected = [
            "checking", "cash", "credit", "investment", "crypto",
            "wallet", "loan", "savings", "business", "other",
        ]
        for value in expected:
            assert AccountType(value) is not None

    def test_transaction_type_values(self):
        """Test transaction type string values."""
        assert TransactionType.TRANSFER.value == "transfer"
        assert CategoryType.INCOME.value == TransactionType.INCOME.value


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
