"""Validation package."""

from budget_tracker.validation.validator import (
    ESCAPED_COMMA,
    EXPECTED_FIELD_COUNT,
    FIELD_DELIMITER,
    ExpenseNotFoundError,
    IndexOutOfRangeError,
    InvalidBudgetError,
    LineValidationError,
    TransactionLineValidator,
    ValidationError,
)

__all__ = [
    "ESCAPED_COMMA",
    "EXPECTED_FIELD_COUNT",
    "FIELD_DELIMITER",
    "ExpenseNotFoundError",
    "IndexOutOfRangeError",
    "InvalidBudgetError",
    "LineValidationError",
    "TransactionLineValidator",
    "ValidationError",
]
