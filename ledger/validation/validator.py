"""
Two-Stage Import Validation

DESIGN DECISION: An import replaces the whole ledger, so the document is
validated completely before anything is touched:

STAGE 1 - SCHEMA VALIDATION:
- The payload parses (JSON text or an already-decoded mapping)
- Every record matches its model (types, required fields, shape rules)
- Missing (or null) currencies fall back to the built-in list

STAGE 2 - SEMANTIC VALIDATION:
- Ids and currency codes are unique
- Exactly one main currency, unless the list is empty
- Every transaction points at accounts present in the document
- Currency codes used by accounts/transactions are registered (warning)

IMPORTANT: Validation NEVER fixes data silently, apart from the
documented currency fallback. It reports issues; the caller rejects.
"""

import json
from collections import Counter
from typing import Any, Mapping, Union

from pydantic import ValidationError

from ledger.config import get_settings
from ledger.currency import default_currencies
from ledger.models.document import (
    LedgerDocument,
    ValidationIssue,
    ValidationResult,
)


Payload = Union[str, bytes, Mapping[str, Any]]


class DocumentValidator:
    """
    Validates an import payload through a two-stage pipeline.

    Stage 2 only runs when stage 1 produced a document.
    """

    def __init__(self, default_main_currency: str = ""):
        self._main_code = default_main_currency or get_settings().app.default_main_currency

    def validate(self, payload: Payload) -> ValidationResult:
        document, issues = self._validate_schema(payload)
        if document is None:
            return ValidationResult(
                schema_valid=False,
                semantic_valid=False,
                issues=issues,
            )

        semantic_issues = self._validate_semantic(document)
        issues.extend(semantic_issues)
        return ValidationResult(
            schema_valid=True,
            semantic_valid=not any(i.severity == "error" for i in semantic_issues),
            issues=issues,
            document=document,
        )

    def _validate_schema(self, payload: Payload) -> tuple[Any, list[ValidationIssue]]:
        """
        Stage 1: parse and model-validate.

        Returns: (document_or_None, list_of_issues)
        """
        issues: list[ValidationIssue] = []

        if isinstance(payload, (str, bytes)):
            try:
                data = json.loads(payload)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                issues.append(ValidationIssue(
                    field="document",
                    issue_type="unparseable",
                    message=f"Document is not valid JSON: {e}",
                    severity="error",
                ))
                return None, issues
        else:
            data = payload

        if not isinstance(data, Mapping):
            issues.append(ValidationIssue(
                field="document",
                issue_type="invalid",
                message="Document must be a JSON object",
                severity="error",
            ))
            return None, issues

        data = dict(data)
        if data.get("currencies") is None:
            data["currencies"] = [
                c.model_dump(mode="json") for c in default_currencies(self._main_code)
            ]
            issues.append(ValidationIssue(
                field="currencies",
                issue_type="defaulted",
                message="Document has no currencies; using the built-in list",
                severity="info",
            ))

        try:
            document = LedgerDocument.model_validate(data)
        except ValidationError as e:
            for error in e.errors():
                issues.append(ValidationIssue(
                    field=".".join(str(part) for part in error["loc"]) or "document",
                    issue_type="invalid",
                    message=error["msg"],
                    severity="error",
                ))
            return None, issues

        return document, issues

    def _validate_semantic(self, document: LedgerDocument) -> list[ValidationIssue]:
        """
        Stage 2: cross-record checks.

        Returns: list_of_issues
        """
        issues: list[ValidationIssue] = []

        for collection, ids in (
            ("accounts", [a.id for a in document.accounts]),
            ("transactions", [t.id for t in document.transactions]),
            ("categories", [c.id for c in document.categories]),
        ):
            for entity_id, count in Counter(ids).items():
                if count > 1:
                    issues.append(ValidationIssue(
                        field=collection,
                        issue_type="duplicate",
                        message=f"Id {entity_id} appears {count} times in {collection}",
                        severity="error",
                        entity_id=entity_id,
                    ))

        codes = Counter(c.code for c in document.currencies)
        for code, count in codes.items():
            if count > 1:
                issues.append(ValidationIssue(
                    field="currencies",
                    issue_type="duplicate",
                    message=f"Currency {code} appears {count} times",
                    severity="error",
                ))

        main_count = sum(1 for c in document.currencies if c.is_main)
        if document.currencies and main_count != 1:
            issues.append(ValidationIssue(
                field="currencies",
                issue_type="main_currency",
                message=f"Exactly one main currency is required, found {main_count}",
                severity="error",
            ))

        account_ids = {a.id for a in document.accounts}
        for index, transaction in enumerate(document.transactions):
            for name in ("account_id", "to_account_id"):
                account_id = getattr(transaction, name)
                if account_id is not None and account_id not in account_ids:
                    issues.append(ValidationIssue(
                        field=f"transactions.{index}.{name}",
                        issue_type="dangling_reference",
                        message=f"Transaction references unknown account {account_id}",
                        severity="error",
                        entity_id=transaction.id,
                    ))

        for index, account in enumerate(document.accounts):
            if account.currency not in codes:
                issues.append(ValidationIssue(
                    field=f"accounts.{index}.currency",
                    issue_type="unknown_currency",
                    message=f"Account '{account.name}' uses unregistered currency {account.currency}",
                    severity="warning",
                    entity_id=account.id,
                ))
        for index, transaction in enumerate(document.transactions):
            if transaction.currency not in codes:
                issues.append(ValidationIssue(
                    field=f"transactions.{index}.currency",
                    issue_type="unknown_currency",
                    message=f"Transaction uses unregistered currency {transaction.currency}",
                    severity="warning",
                    entity_id=transaction.id,
                ))

        return issues
