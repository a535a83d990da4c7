"""
Operation Result Models

Structured outcomes for operations that can partly succeed:
- LoadResult: what a persisted-file load read and what it skipped
- ImportResult: what a bulk transaction import added and which lines failed
- StoreChange: the payload delivered to change subscribers

DESIGN DECISION: Partial success is data, not an exception.
A fully successful import returns normally; only an import that added
nothing is reported through the error channel.
"""

from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from budget_tracker.models.month import YearMonth


# =============================================================================
# STORE CHANGE NOTIFICATIONS
# =============================================================================

class ChangeKind(str, Enum):
    """What kind of mutation a store performed."""
    BUDGET_SET = "budget_set"
    EXPENSE_ADDED = "expense_added"
    EXPENSE_EDITED = "expense_edited"
    EXPENSE_DELETED = "expense_deleted"


class StoreChange(BaseModel):
    """A single store mutation, delivered synchronously to subscribers."""

    kind: ChangeKind
    month: Optional[YearMonth] = None
    category: Optional[str] = None
    amount: Optional[Decimal] = None
    expense_id: Optional[UUID] = None
    index: Optional[int] = Field(
        default=None,
        description="Position of the affected expense at the time of the change"
    )


# =============================================================================
# PERSISTENCE LOAD RESULT
# =============================================================================

class SkippedLine(BaseModel):
    """A data line the loader could not use."""

    line_number: int = Field(ge=1)
    content: str
    reason: str


class LoadResult(BaseModel):
    """Outcome of loading a persisted data file into a session."""

    file_found: bool = Field(
        ...,
        description="False when the user had no data file yet (first run)"
    )
    budgets_loaded: int = Field(default=0, ge=0)
    expenses_loaded: int = Field(default=0, ge=0)
    skipped_lines: list[SkippedLine] = Field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped_lines)

    @property
    def loaded_count(self) -> int:
        return self.budgets_loaded + self.expenses_loaded


# =============================================================================
# BULK IMPORT RESULT
# =============================================================================

class ImportLineError(BaseModel):
    """One rejected line of a bulk transaction file."""

    line_number: int = Field(ge=1)
    reason: str

    def __str__(self) -> str:
        return f"Line {self.line_number}: {self.reason}"


class ImportResult(BaseModel):
    """
    Outcome of a bulk transaction import.

    Records imported before a failing line are kept; there is no rollback.
    """

    imported_count: int = Field(default=0, ge=0)
    errors: list[ImportLineError] = Field(default_factory=list)

    @property
    def partial_success(self) -> bool:
        """True if at least one record was imported."""
        return self.imported_count > 0

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def error_text(self) -> str:
        """All per-line failures, one "Line N: reason" per line."""
        return "\n".join(str(error) for error in self.errors)

    @property
    def summary(self) -> str:
        """Human-readable summary of the whole import."""
        text = f"Successfully imported {self.imported_count} transactions\n"
        if self.errors:
            text += "\nErrors encountered:\n"
            text += "".join(f"{error}\n" for error in self.errors)
        return text
