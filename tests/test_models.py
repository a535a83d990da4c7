"""
Tests for Budget Tracker

Test strategy:
1. Unit tests for individual components (models, stores, validators)
2. Integration tests for file flows (using pytest's tmp_path)
3. No test touches the real data directory
"""

import pytest
from datetime import date
from decimal import Decimal
from uuid import uuid4

from budget_tracker.models.expense import (
    PREDEFINED_CATEGORIES,
    Expense,
    ExpenseCategory,
    format_amount,
    to_decimal,
)
from budget_tracker.models.month import YearMonth
from budget_tracker.models.results import ImportLineError, ImportResult, LoadResult, SkippedLine
from budget_tracker.models.user import User
from budget_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestExpenseModel:
    """Tests for the Expense record."""

    def test_expense_creation(self):
        """Test Expense model creation."""
        expense = Expense(
            date=date(2024, 1, 5),
            category="Food",
            amount=Decimal("12.50"),
            description="Lunch",
        )
        assert expense.category == "Food"
        assert expense.amount == Decimal("12.50")
        assert expense.id is not None

    def test_float_amount_converted_to_decimal(self):
        """Test that float amounts become Decimal."""
        expense = Expense(date=date(2024, 1, 5), category="Food", amount=12.5)
        assert isinstance(expense.amount, Decimal)
        assert expense.amount == Decimal("12.5")

    def test_enum_category_normalised(self):
        """Test that ExpenseCategory members are stored as plain text."""
        expense = Expense(
            date=date(2024, 1, 5),
            category=ExpenseCategory.UTILITIES,
            amount=Decimal("80"),
        )
        assert expense.category == "Utilities"
        assert type(expense.category) is str

    def test_arbitrary_category_allowed(self):
        """Test that construction does not enforce the predefined set."""
        expense = Expense(date=date(2024, 1, 5), category="Gifts", amount=Decimal("5"))
        assert expense.category == "Gifts"
        assert expense.is_predefined_category is False

    def test_setters_are_not_validated(self):
        """Test that direct mutation stores whatever it is given."""
        expense = Expense(date=date(2024, 1, 5), category="Food", amount=Decimal("5"))
        expense.category = "Anything"
        expense.amount = Decimal("-3")
        assert expense.category == "Anything"
        assert expense.amount == Decimal("-3")

    def test_ids_are_unique(self):
        """Test that each expense gets its own identifier."""
        first = Expense(date=date(2024, 1, 5), category="Food", amount=Decimal("5"))
        second = Expense(date=date(2024, 1, 5), category="Food", amount=Decimal("5"))
        assert first.id != second.id

    def test_str_representation(self):
        """Test the display form used in reports."""
        expense = Expense(
            date=date(2024, 1, 5),
            category="Food",
            amount=Decimal("50.00"),
            description="Groceries",
        )
        assert str(expense) == "2024-01-05 - Food - $50.0 - Groceries"

    def test_matches_category(self):
        """Test exact and case-insensitive category matching."""
        expense = Expense(date=date(2024, 1, 5), category="Food", amount=Decimal("5"))
        assert expense.matches_category("Food")
        assert not expense.matches_category("food")
        assert expense.matches_category("food", ignore_case=True)

    def test_month_property(self):
        """Test the month key derived from the date."""
        expense = Expense(date=date(2024, 2, 29), category="Food", amount=Decimal("5"))
        assert expense.month == YearMonth(2024, 2)


class TestAmountHelpers:
    """Tests for amount conversion and display."""

    @pytest.mark.parametrize("value,expected", [
        (Decimal("200"), "200.0"),
        (Decimal("70.00"), "70.0"),
        (Decimal("12.50"), "12.5"),
        (Decimal("0"), "0.0"),
        (Decimal("1000.0"), "1000.0"),
        (Decimal("0.05"), "0.05"),
    ])
    def test_format_amount(self, value, expected):
        """Test report amount rendering."""
        assert format_amount(value) == expected

    def test_to_decimal_from_float(self):
        """Test float conversion goes through the decimal string."""
        assert to_decimal(1000.0) == Decimal("1000.0")
        assert to_decimal(0.1) == Decimal("0.1")

    def test_to_decimal_rejects_garbage(self):
        """Test that non-numeric input is rejected."""
        with pytest.raises(ValueError):
            to_decimal("abc")
        with pytest.raises(ValueError):
            to_decimal("NaN")


class TestYearMonth:
    """Tests for the month key."""

    def test_parse_and_str(self):
        """Test the YYYY-MM round trip."""
        month = YearMonth.parse("2024-01")
        assert month == YearMonth(2024, 1)
        assert str(month) == "2024-01"

    def test_parse_rejects_bad_text(self):
        """Test that malformed keys are rejected."""
        for text in ("2024-1", "2024/01", "2024-13", "January", ""):
            with pytest.raises(ValueError):
                YearMonth.parse(text)

    def test_plus_months_rolls_over_year(self):
        """Test month arithmetic across year boundaries."""
        assert YearMonth(2024, 12).plus_months(1) == YearMonth(2025, 1)
        assert YearMonth(2024, 1).minus_months(1) == YearMonth(2023, 12)
        assert YearMonth(2024, 3).plus_months(-14) == YearMonth(2023, 1)

    def test_ordering(self):
        """Test that months sort chronologically."""
        months = [YearMonth(2024, 3), YearMonth(2023, 12), YearMonth(2024, 1)]
        assert sorted(months) == [YearMonth(2023, 12), YearMonth(2024, 1), YearMonth(2024, 3)]

    def test_contains_and_bounds(self):
        """Test month membership of dates."""
        month = YearMonth(2024, 2)
        assert month.contains(date(2024, 2, 29))
        assert not month.contains(date(2024, 3, 1))
        assert month.first_day == date(2024, 2, 1)
        assert month.last_day == date(2024, 2, 29)

    def test_invalid_month_rejected(self):
        """Test that month numbers outside 1-12 are rejected."""
        with pytest.raises(ValueError):
            YearMonth(2024, 0)


class TestUserModel:
    """Tests for the opaque user credential."""

    def test_credential_line(self):
        """Test the serialized username:hash:salt triple."""
        user = User(username="alice", password_hash="abc123", salt="s4lt")
        assert user.credential_line == "alice:abc123:s4lt"

    def test_username_rejects_path_separators(self):
        """Test that usernames cannot escape the data directory."""
        for name in ("../evil", "a/b", "a:b", ".."):
            with pytest.raises(ValueError):
                User(username=name)

    def test_username_required(self):
        """Test that an empty username is rejected."""
        with pytest.raises(ValueError):
            User(username="")


class TestResultModels:
    """Tests for load and import result models."""

    def test_import_result_summary_with_errors(self):
        """Test the human-readable import summary."""
        result = ImportResult(
            imported_count=2,
            errors=[ImportLineError(line_number=2, reason="Invalid category - Rent")],
        )
        assert result.partial_success is True
        assert result.error_text == "Line 2: Invalid category - Rent"
        assert result.summary == (
            "Successfully imported 2 transactions\n"
            "\nErrors encountered:\n"
            "Line 2: Invalid category - Rent\n"
        )

    def test_import_result_without_errors(self):
        """Test that a clean import has no error section."""
        result = ImportResult(imported_count=3)
        assert result.has_errors is False
        assert result.summary == "Successfully imported 3 transactions\n"

    def test_import_result_zero_success(self):
        """Test that partial_success requires at least one import."""
        result = ImportResult(
            imported_count=0,
            errors=[ImportLineError(line_number=1, reason="Invalid amount")],
        )
        assert result.partial_success is False

    def test_load_result_counts(self):
        """Test load result aggregates."""
        result = LoadResult(
            file_found=True,
            budgets_loaded=5,
            expenses_loaded=2,
            skipped_lines=[SkippedLine(line_number=4, content="bad", reason="expected 3 fields, found 1")],
        )
        assert result.loaded_count == 7
        assert result.skipped_count == 1


class TestCategories:
    """Tests for the predefined category set."""

    def test_predefined_order(self):
        """Test the fixed category order."""
        assert PREDEFINED_CATEGORIES == [
            "Food", "Transportation", "Entertainment", "Utilities", "Miscellaneous",
        ]

    def test_category_values(self):
        """Test category string values."""
        assert ExpenseCategory.FOOD.value == "Food"
        assert ExpenseCategory("Miscellaneous") is ExpenseCategory.MISCELLANEOUS


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.DATA_SAVED,
            description="Saved",
        )
        assert event.event_type == AuditEventType.DATA_SAVED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEventBuilder.budget_set("Food", "2024-01", "500.0")
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "budget_set"
        assert log_dict["entity_id"] == "2024-01/Food"
        assert log_dict["details"]["amount"] == "500.0"

    def test_expense_changed_builder(self):
        """Test AuditEventBuilder.expense_changed."""
        expense_id = uuid4()
        event = AuditEventBuilder.expense_changed(AuditEventType.EXPENSE_DELETED, expense_id, 3)
        assert event.entity_type == "expense"
        assert event.entity_id == str(expense_id)
        assert event.description == "Expense deleted at position 3"

    def test_failed_import_is_error_severity(self):
        """Test that a zero-success import is logged as an error."""
        event = AuditEventBuilder.transaction_import_failed("in.txt", ["Line 1: Invalid amount"])
        assert event.severity == AuditSeverity.ERROR


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
