"""
Tests for the plan validation boundary.
"""

import pytest

from lifeplan.errors import InvalidPlanRange, ProjectionError
from lifeplan.models import PlanSettings
from lifeplan.validation import PlanValidator


@pytest.fixture
def validator():
    return PlanValidator()


class TestSettingsValidation:
    """Tests for validate_settings."""

    def test_accepts_valid_range(self, validator):
        """Test a valid persisted settings dict is parsed."""
        settings = validator.validate_settings({"planStartYear": 2025, "planEndYear": 2060})
        assert isinstance(settings, PlanSettings)
        assert settings.plan_end_year == 2060

    def test_accepts_model(self, validator, plan):
        """Test an already-parsed PlanSettings is passed through."""
        assert validator.validate_settings(plan) is plan

    def test_rejects_inverted_range(self, validator):
        """Test start after end is rejected."""
        with pytest.raises(InvalidPlanRange) as exc_info:
            validator.validate_settings({"planStartYear": 2060, "planEndYear": 2025})
        assert exc_info.value.start_year == 2060
        assert exc_info.value.end_year == 2025
        assert "2060-2025" in str(exc_info.value)

    def test_rejects_equal_years(self, validator):
        """Test start == end is rejected."""
        with pytest.raises(InvalidPlanRange, match="start year must be before end year"):
            validator.validate_settings({"planStartYear": 2025, "planEndYear": 2025})

    def test_rejects_non_positive_years(self, validator):
        """Test year 0 is rejected."""
        with pytest.raises(InvalidPlanRange, match="years must be positive"):
            validator.validate_settings({"planStartYear": 0, "planEndYear": 2025})

    def test_rejects_unreadable_settings(self, validator):
        """Test missing years are an InvalidPlanRange."""
        with pytest.raises(InvalidPlanRange, match="unreadable settings"):
            validator.validate_settings({"planStartYear": 2025})

    def test_is_a_projection_error(self):
        """Test InvalidPlanRange can be caught as ProjectionError."""
        assert issubclass(InvalidPlanRange, ProjectionError)


class TestTransactionValidation:
    """Tests for the two-stage transaction pipeline."""

    def test_valid_record(self, validator, plan):
        """Test a clean record passes both stages."""
        result = validator.validate_transaction(
            {"id": "t1", "type": "income", "amount": 100, "year": 2025, "toAccountId": "acc"},
            plan,
        )
        assert result.is_valid is True
        assert result.record_id == "t1"
        assert result.issues == []
        assert validator.get_user_friendly_summary(result) == "All checks passed."

    def test_schema_failure(self, validator, plan):
        """Test a missing required id fails stage 1."""
        result = validator.validate_transaction(
            {"id": "t1", "type": "expense", "amount": 100, "year": 2025},
            plan,
        )
        assert result.schema_valid is False
        assert result.is_valid is False
        assert result.record_id == "t1"
        assert result.has_errors
        assert any("toAccountId" in issue.field for issue in result.issues)
        assert any(issue.issue_type == "missing" for issue in result.issues)

    def test_out_of_range_is_warning(self, validator, plan):
        """Test a year outside the plan warns but stays valid."""
        result = validator.validate_transaction(
            {"id": "t1", "type": "income", "amount": 100, "year": 2040, "toAccountId": "acc"},
            plan,
        )
        assert result.is_valid is True
        assert result.issues[0].issue_type == "out_of_range"
        assert len(result.warnings) == 1

    def test_zero_amount_warning(self, validator, plan):
        """Test a zero amount is flagged."""
        result = validator.validate_transaction(
            {"id": "t1", "type": "expense", "amount": 0, "year": 2025, "toAccountId": "acc"},
            plan,
        )
        assert result.is_valid is True
        assert result.issues[0].issue_type == "zero_value"

    def test_negative_amount_is_info(self, validator, plan):
        """Test a negative amount is informational only."""
        result = validator.validate_transaction(
            {"id": "t1", "type": "expense", "amount": -10, "year": 2025, "toAccountId": "acc"},
            plan,
        )
        assert result.issues[0].severity == "info"
        assert result.warnings == []

    def test_zero_quantity_warning(self, validator, plan):
        """Test a buy with zero quantity is flagged."""
        result = validator.validate_transaction(
            {"id": "t1", "type": "investment", "transactionSubtype": "buy", "amount": 100,
             "year": 2025, "fromAccountId": "acc", "holdingAssetId": "fund", "quantity": 0},
            plan,
        )
        assert [i.field for i in result.issues] == ["quantity"]
        assert result.warnings == ["Buy quantity is zero"]

    def test_summary_lists_problems(self, validator, plan):
        """Test the summary names errors and warnings."""
        invalid = validator.validate_transaction(
            {"id": "t1", "type": "expense", "amount": 100, "year": 2025}, plan,
        )
        summary = validator.get_user_friendly_summary(invalid)
        assert summary.startswith("This transaction cannot be used in projections:")
        assert "toAccountId" in summary

        warned = validator.validate_transaction(
            {"id": "t2", "type": "income", "amount": 0, "year": 2025, "toAccountId": "acc"},
            plan,
        )
        assert "Please verify the following:" in validator.get_user_friendly_summary(warned)
