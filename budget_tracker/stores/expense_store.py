"""
Expense Store

Ordered sequence of Expense records. Position is the public identity
for edit/delete by index; every record also carries a stable UUID so
callers can address it independently of its current position.

Filtering and aggregation always return new lists, never the internal one.
"""

from datetime import date
from decimal import Decimal
from typing import Iterator, Optional
from uuid import UUID

import structlog

from budget_tracker.models.expense import (
    PREDEFINED_CATEGORIES,
    CategoryLike,
    Expense,
    category_name,
)
from budget_tracker.models.month import YearMonth
from budget_tracker.models.results import ChangeKind, StoreChange
from budget_tracker.stores.notifier import ChangeNotifier
from budget_tracker.validation import ExpenseNotFoundError, IndexOutOfRangeError


logger = structlog.get_logger(__name__)


class ExpenseStore:
    """
    Holds the ordered expenses of one session.

    Mutations fire a StoreChange through the shared notifier on success
    only; a rejected index leaves the store and subscribers untouched.
    """

    def __init__(self, notifier: Optional[ChangeNotifier] = None):
        self._expenses: list[Expense] = []
        self._notifier = notifier or ChangeNotifier()

    @property
    def notifier(self) -> ChangeNotifier:
        return self._notifier

    def __len__(self) -> int:
        return len(self._expenses)

    def __iter__(self) -> Iterator[Expense]:
        return iter(list(self._expenses))

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_expense(self, expense: Expense) -> int:
        """Append an expense. Returns its position."""
        self._expenses.append(expense)
        index = len(self._expenses) - 1
        logger.debug("expense_added", index=index, expense_id=str(expense.id))
        self._notify(ChangeKind.EXPENSE_ADDED, expense, index)
        return index

    def edit_expense(self, index: int, expense: Expense) -> Expense:
        """
        Replace the expense at index, keeping the replaced record's id.

        Returns the stored record.

        Raises:
            IndexOutOfRangeError: if index is not in 0 <= index < len
        """
        self._check_index(index)
        stored = expense.model_copy(update={"id": self._expenses[index].id})
        self._expenses[index] = stored
        logger.debug("expense_edited", index=index, expense_id=str(stored.id))
        self._notify(ChangeKind.EXPENSE_EDITED, stored, index)
        return stored

    def delete_expense(self, index: int) -> Expense:
        """
        Remove and return the expense at index.

        Raises:
            IndexOutOfRangeError: if index is not in 0 <= index < len
        """
        self._check_index(index)
        removed = self._expenses.pop(index)
        logger.debug("expense_deleted", index=index, expense_id=str(removed.id))
        self._notify(ChangeKind.EXPENSE_DELETED, removed, index)
        return removed

    def edit_expense_by_id(self, expense_id: UUID, expense: Expense) -> Expense:
        return self.edit_expense(self.index_of(expense_id), expense)

    def delete_expense_by_id(self, expense_id: UUID) -> Expense:
        return self.delete_expense(self.index_of(expense_id))

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def index_of(self, expense_id: UUID) -> int:
        """
        Current position of an expense.

        Raises:
            ExpenseNotFoundError: if no stored expense has this id
        """
        for index, expense in enumerate(self._expenses):
            if expense.id == expense_id:
                return index
        raise ExpenseNotFoundError(f"Expense not found: {expense_id}")

    def get_expense(self, expense_id: UUID) -> Expense:
        return self._expenses[self.index_of(expense_id)]

    def get_all_expenses(self) -> list[Expense]:
        """All expenses in store order (a copy)."""
        return list(self._expenses)

    @staticmethod
    def get_predefined_categories() -> list[str]:
        return list(PREDEFINED_CATEGORIES)

    # -------------------------------------------------------------------------
    # Filtering
    # -------------------------------------------------------------------------

    def filter_by_category(self, category: CategoryLike) -> list[Expense]:
        """Expenses whose category equals the given one, ignoring case."""
        return [e for e in self._expenses if e.matches_category(category, ignore_case=True)]

    def filter_by_date_range(self, start: date, end: date) -> list[Expense]:
        """Expenses dated within [start, end], both bounds inclusive."""
        return [e for e in self._expenses if start <= e.date <= end]

    # -------------------------------------------------------------------------
    # Monthly aggregation
    # -------------------------------------------------------------------------

    def get_expenses_for_month(self, month: YearMonth) -> list[Expense]:
        return [e for e in self._expenses if month.contains(e.date)]

    def calculate_monthly_expenses_by_category(
        self,
        category: CategoryLike,
        month: YearMonth,
    ) -> Decimal:
        """Total spent in one category (exact, case-sensitive match) during month."""
        name = category_name(category)
        return sum(
            (e.amount for e in self.get_expenses_for_month(month) if e.category == name),
            Decimal("0"),
        )

    def get_monthly_totals_by_category(self, month: YearMonth) -> dict[str, Decimal]:
        """Totals for every predefined category, zero-filled, in category order."""
        return {
            category: self.calculate_monthly_expenses_by_category(category, month)
            for category in PREDEFINED_CATEGORIES
        }

    def get_months(self) -> set[YearMonth]:
        """Months containing at least one expense."""
        return {YearMonth.from_date(e.date) for e in self._expenses}

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _check_index(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int):
            raise IndexOutOfRangeError(index, len(self._expenses))
        if not 0 <= index < len(self._expenses):
            raise IndexOutOfRangeError(index, len(self._expenses))

    def _notify(self, kind: ChangeKind, expense: Expense, index: int) -> None:
        self._notifier.notify(StoreChange(
            kind=kind,
            month=YearMonth.from_date(expense.date),
            category=expense.category,
            amount=expense.amount,
            expense_id=expense.id,
            index=index,
        ))
