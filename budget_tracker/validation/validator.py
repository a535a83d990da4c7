"""
Validation Errors and Bulk Import Line Validator

Every imported line goes through the same fixed pipeline:

    split fields -> field count == 4 -> parse date
                 -> category in predefined set -> parse amount (> 0)
                 -> build Expense

The first failing step decides the reason reported for the line.
Later steps are not attempted.

IMPORTANT: Validation NEVER silently fixes issues.
A rejected line is reported with its line number; it is not coerced.
"""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from budget_tracker.models.expense import PREDEFINED_CATEGORIES, Expense, parse_iso_date


FIELD_DELIMITER = ","
ESCAPED_COMMA = ";"
EXPECTED_FIELD_COUNT = 4


class ValidationError(Exception):
    """Base exception for local, recoverable validation failures."""
    pass


class IndexOutOfRangeError(ValidationError, IndexError):
    """Positional edit/delete outside 0 <= index < length."""

    def __init__(self, index: int, length: int):
        self.index = index
        self.length = length
        super().__init__(f"Invalid expense index {index} (store holds {length} expenses)")


class ExpenseNotFoundError(ValidationError, LookupError):
    """No expense with the requested identifier."""
    pass


class InvalidBudgetError(ValidationError):
    """Budget amount is not a usable non-negative number."""
    pass


class LineValidationError(ValidationError):
    """One bulk-import line failed validation."""

    def __init__(self, reason: str, line_number: Optional[int] = None):
        self.reason = reason
        self.line_number = line_number
        if line_number is None:
            super().__init__(reason)
        else:
            super().__init__(f"Line {line_number}: {reason}")


class TransactionLineValidator:
    """
    Validates one line of a bulk transaction file and builds the Expense.

    The category check uses the predefined set unless another set is
    passed in; amounts must be strictly positive.
    """

    def __init__(self, allowed_categories: Optional[list[str]] = None):
        self._allowed_categories = list(allowed_categories or PREDEFINED_CATEGORIES)

    def validate(self, line: str, line_number: Optional[int] = None) -> Expense:
        """
        Parse and validate a single line.

        Raises:
            LineValidationError: with the reason for the first failing step
        """
        parts = line.split(FIELD_DELIMITER)
        if len(parts) != EXPECTED_FIELD_COUNT:
            raise LineValidationError("Invalid number of fields", line_number)

        expense_date = self._parse_date(parts[0], line_number)

        category = parts[1].strip()
        if category not in self._allowed_categories:
            raise LineValidationError(f"Invalid category - {category}", line_number)

        amount = self._parse_amount(parts[2], line_number)

        description = parts[3].strip().replace(ESCAPED_COMMA, FIELD_DELIMITER)

        return Expense(
            date=expense_date,
            category=category,
            amount=amount,
            description=description,
        )

    def _parse_date(self, raw: str, line_number: Optional[int]) -> date:
        try:
            return parse_iso_date(raw.strip())
        except ValueError:
            raise LineValidationError("Invalid date format", line_number)

    def _parse_amount(self, raw: str, line_number: Optional[int]) -> Decimal:
        try:
            amount = Decimal(raw.strip())
        except InvalidOperation:
            raise LineValidationError("Invalid amount", line_number)
        if not amount.is_finite() or amount <= 0:
            raise LineValidationError("Invalid amount", line_number)
        return amount
