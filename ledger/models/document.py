"""
Export Document Models

The export document is the only serialization contract the core offers
to a persistence collaborator. It carries the four collections, enough
to rebuild the ledger exactly.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from ledger.models.entities import (
    Account,
    Category,
    Currency,
    LedgerState,
    Transaction,
)


DOCUMENT_VERSION = 1


class LedgerDocument(BaseModel):
    """Serialized form of a complete ledger."""

    version: int = Field(
        default=DOCUMENT_VERSION,
        ge=1,
        description="Document format version"
    )
    exported_at: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the document was produced"
    )
    accounts: list[Account] = Field(default_factory=list)
    transactions: list[Transaction] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    currencies: list[Currency] = Field(default_factory=list)

    @classmethod
    def from_state(cls, state: LedgerState) -> "LedgerDocument":
        copied = state.copy_state()
        return cls(
            accounts=copied.accounts,
            transactions=copied.transactions,
            categories=copied.categories,
            currencies=copied.currencies,
        )

    def to_state(self) -> LedgerState:
        return LedgerState(
            accounts=self.accounts,
            transactions=self.transactions,
            categories=self.categories,
            currencies=self.currencies,
        ).copy_state()


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem found in an import document."""

    field: str = Field(
        ...,
        description="Location of the issue (e.g. 'transactions.3.account_id')"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g. 'invalid', 'duplicate', 'dangling_reference')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    entity_id: Optional[UUID] = None


class ValidationResult(BaseModel):
    """
    Result of the two-stage document validation.

    Stage 1: Schema validation (parsing, types, per-record rules)
    Stage 2: Semantic validation (uniqueness, references, main currency)
    """

    validated_at: datetime = Field(
        default_factory=datetime.utcnow
    )
    schema_valid: bool
    semantic_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)
    document: Optional[LedgerDocument] = Field(
        default=None,
        description="Parsed document, present when schema validation passed"
    )

    @property
    def is_valid(self) -> bool:
        return self.schema_valid and self.semantic_valid

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
