"""
Plan Validation Boundary

DESIGN DECISION: Invalid plan settings are rejected here, before any
projection runs. Projection functions then assume a valid range.

Transaction records go through two stages:

STAGE 1 - SCHEMA VALIDATION:
- Known (type, subtype) variant
- Required ids for the variant
- Types and bounds (frequency >= 1, month 1-12)

STAGE 2 - SEMANTIC VALIDATION:
- Year inside the plan range (out-of-range records are ignored by the
  engine, so this is only a warning)
- Zero amounts and zero buy/sell quantities

IMPORTANT: Validation NEVER silently fixes issues.
It reports them for human review.
"""

from typing import Any, Union

from pydantic import ValidationError

from lifeplan.errors import InvalidPlanRange
from lifeplan.models.plan import (
    BuyTransaction,
    PlanSettings,
    SellTransaction,
    Transaction,
    ValidationIssue,
    ValidationResult,
    parse_transaction,
)


class PlanValidator:
    """
    Validates plan settings and transaction records.
    """

    def validate_settings(self, settings: Union[PlanSettings, dict[str, Any]]) -> PlanSettings:
        """
        Validate plan settings.

        Returns:
            The parsed PlanSettings

        Raises:
            InvalidPlanRange: If the years are missing, non-positive, or
                              start is not before end
        """
        if not isinstance(settings, PlanSettings):
            if not isinstance(settings, dict):
                raise InvalidPlanRange(None, None, "settings must be an object")
            try:
                settings = PlanSettings.model_validate(settings)
            except ValidationError as e:
                start = settings.get("planStartYear", settings.get("plan_start_year"))
                end = settings.get("planEndYear", settings.get("plan_end_year"))
                raise InvalidPlanRange(start, end, f"unreadable settings ({e.error_count()} errors)") from e

        start, end = settings.plan_start_year, settings.plan_end_year
        if start <= 0 or end <= 0:
            raise InvalidPlanRange(start, end, "years must be positive")
        if start >= end:
            raise InvalidPlanRange(start, end, "start year must be before end year")
        return settings

    def _validate_schema(
        self,
        raw: Any,
    ) -> tuple[Union[Transaction, None], list[ValidationIssue]]:
        """
        Stage 1: Schema validation.

        Returns: (parsed_transaction_or_None, list_of_issues)
        """
        try:
            return parse_transaction(raw), []
        except ValidationError as e:
            issues = []
            for err in e.errors():
                field = ".".join(str(part) for part in err["loc"]) or "record"
                issue_type = "missing" if err["type"] == "missing" else "invalid_value"
                issues.append(ValidationIssue(
                    field=field,
                    issue_type=issue_type,
                    message=err["msg"],
                    severity="error",
                ))
            return None, issues

    def _validate_semantic(
        self,
        transaction: Transaction,
        plan: PlanSettings,
    ) -> list[ValidationIssue]:
        """
        Stage 2: Semantic validation.

        Everything here is a warning: the engine tolerates these records.
        """
        issues = []

        if not plan.contains(transaction.year):
            issues.append(ValidationIssue(
                field="year",
                issue_type="out_of_range",
                message=(
                    f"Year {transaction.year} is outside the plan "
                    f"({plan.plan_start_year}-{plan.plan_end_year}) and will be ignored"
                ),
                severity="warning",
            ))

        if transaction.amount == 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="zero_value",
                message="Amount is zero; this transaction has no effect",
                severity="warning",
            ))

        if transaction.amount < 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="negative_value",
                message="Amount is negative; its sign is ignored, direction comes from the type",
                severity="info",
            ))

        if isinstance(transaction, (BuyTransaction, SellTransaction)) and transaction.quantity == 0:
            issues.append(ValidationIssue(
                field="quantity",
                issue_type="zero_value",
                message=f"{transaction.transaction_subtype.capitalize()} quantity is zero",
                severity="warning",
            ))

        return issues

    def validate_transaction(
        self,
        raw: Any,
        plan: PlanSettings,
    ) -> ValidationResult:
        """
        Run the two-stage pipeline on one transaction record.

        Stage 2 only runs when stage 1 produced a transaction.
        """
        record_id = None
        if isinstance(raw, dict) and raw.get("id") is not None:
            record_id = str(raw["id"])

        transaction, issues = self._validate_schema(raw)
        schema_valid = transaction is not None

        semantic_valid = False
        if transaction is not None:
            record_id = transaction.id
            semantic_issues = self._validate_semantic(transaction, plan)
            issues.extend(semantic_issues)
            semantic_valid = not any(i.severity == "error" for i in semantic_issues)

        warnings = [issue.message for issue in issues if issue.severity == "warning"]

        return ValidationResult(
            record_id=record_id,
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            is_valid=schema_valid and semantic_valid,
            issues=issues,
            warnings=warnings,
        )

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """
        Generate a user-friendly summary of validation results.
        """
        if result.is_valid and not result.warnings:
            return "All checks passed."

        lines = []

        if not result.schema_valid:
            lines.append("This transaction cannot be used in projections:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   - {issue.field}: {issue.message}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   - {warning}")

        return "\n".join(lines)
