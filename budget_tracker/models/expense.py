"""
Core Expense Models for Budget Tracker

These models define the records held by the expense store and the
closed category set every aggregation iterates over.

DESIGN DECISION: Category is stored as free text, not as the enum.
Only the bulk import enforces membership in the predefined set; some
callers rely on being able to store arbitrary category text.
"""

import datetime as dt
import re
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Union
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator

from budget_tracker.models.month import YearMonth


# =============================================================================
# CATEGORIES - Finite set of valid values
# =============================================================================

class ExpenseCategory(str, Enum):
    """
    Predefined expense categories.

    The set is closed and ordered: reports and totals always follow
    this order, never alphabetical or data-dependent order.
    """
    FOOD = "Food"
    TRANSPORTATION = "Transportation"
    ENTERTAINMENT = "Entertainment"
    UTILITIES = "Utilities"
    MISCELLANEOUS = "Miscellaneous"


PREDEFINED_CATEGORIES: list[str] = [category.value for category in ExpenseCategory]


CategoryLike = Union[str, ExpenseCategory]
AmountLike = Union[Decimal, float, int, str]


def category_name(category: CategoryLike) -> str:
    """Return the plain text of a category (enum members become their value)."""
    if isinstance(category, ExpenseCategory):
        return category.value
    return category


def to_decimal(value: AmountLike) -> Decimal:
    """
    Convert a caller-supplied amount to Decimal.

    Floats go through str() so 1000.0 becomes Decimal("1000.0")
    rather than its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    try:
        result = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {value!r}")
    if not result.is_finite():
        raise ValueError(f"Amount must be finite: {value!r}")
    return result


def format_amount(value: Decimal) -> str:
    """
    Render an amount for reports: plain notation, at least one
    fractional digit (200 -> "200.0", 12.50 -> "12.5").
    """
    text = format(Decimal(value).normalize(), "f")
    if "." not in text:
        text += ".0"
    return text


_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


def parse_iso_date(text: str) -> dt.date:
    """
    Parse a calendar date written exactly as YYYY-MM-DD.

    Compact (20240102) and week-date (2024-W01-2) forms are rejected.
    """
    if not _ISO_DATE.fullmatch(text):
        raise ValueError(f"Invalid date: {text!r} (expected YYYY-MM-DD)")
    return dt.date.fromisoformat(text)


# =============================================================================
# EXPENSE RECORD
# =============================================================================

class Expense(BaseModel):
    """
    A single dated, categorized expense.

    Assignment is not validated: setters may store any category text or
    amount, matching how records are edited in place by callers.
    """

    id: UUID = Field(
        default_factory=uuid4,
        description="Stable identifier, independent of the record's position"
    )
    date: dt.date = Field(
        ...,
        description="Date the expense was incurred"
    )
    category: str = Field(
        ...,
        description="Category name (normally one of PREDEFINED_CATEGORIES)"
    )
    amount: Decimal = Field(
        ...,
        description="Amount spent"
    )
    description: str = Field(
        default="",
        description="Free-text description"
    )

    @field_validator('category', mode='before')
    @classmethod
    def normalize_category(cls, v: Any) -> Any:
        """Accept ExpenseCategory members as their text value."""
        if isinstance(v, ExpenseCategory):
            return v.value
        return v

    @property
    def month(self) -> YearMonth:
        return YearMonth.from_date(self.date)

    @property
    def is_predefined_category(self) -> bool:
        return self.category in PREDEFINED_CATEGORIES

    def matches_category(self, category: CategoryLike, ignore_case: bool = False) -> bool:
        name = category_name(category)
        if ignore_case:
            return self.category.casefold() == name.casefold()
        return self.category == name

    def __str__(self) -> str:
        return f"{self.date.isoformat()} - {self.category} - ${format_amount(self.amount)} - {self.description}"


