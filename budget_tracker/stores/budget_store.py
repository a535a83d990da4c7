"""
Budget Store

Maps (month, category) -> budget amount and supplies the utilization
math that compares budgets against the linked expense store.

On construction the current month is seeded with every predefined
category at the configured default amount; no other month is seeded.
Seeding is initial state, not a mutation, so it fires no notification.
"""

from decimal import Decimal
from typing import Optional

import structlog

from budget_tracker.config import get_settings
from budget_tracker.models.expense import (
    PREDEFINED_CATEGORIES,
    AmountLike,
    CategoryLike,
    category_name,
    to_decimal,
)
from budget_tracker.models.month import YearMonth
from budget_tracker.models.results import ChangeKind, StoreChange
from budget_tracker.stores.expense_store import ExpenseStore
from budget_tracker.stores.notifier import ChangeNotifier
from budget_tracker.validation import InvalidBudgetError


logger = structlog.get_logger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


class BudgetStore:
    """
    Per-month, per-category budgets.

    Unset and explicitly-zero budgets both read as 0; callers cannot
    tell them apart through get_budget (get_all_budgets can).
    """

    def __init__(
        self,
        expense_store: ExpenseStore,
        notifier: Optional[ChangeNotifier] = None,
        default_amount: Optional[AmountLike] = None,
        current_month: Optional[YearMonth] = None,
        seed_current_month: Optional[bool] = None,
    ):
        """
        Args:
            expense_store: Store whose expenses utilization is computed from
            notifier: Shared change notifier (defaults to the expense store's)
            default_amount: Seed amount per category (defaults to settings)
            current_month: Month to seed (defaults to today's month)
            seed_current_month: Override the configured seeding switch
        """
        settings = get_settings().budget
        self._expense_store = expense_store
        self._notifier = notifier or expense_store.notifier
        self._budgets: dict[YearMonth, dict[str, Decimal]] = {}

        if seed_current_month is None:
            seed_current_month = settings.seed_current_month
        if seed_current_month:
            amount = to_decimal(
                default_amount if default_amount is not None else settings.default_monthly_budget
            )
            self._seed(current_month or YearMonth.current(), amount)

    def _seed(self, month: YearMonth, amount: Decimal) -> None:
        self._budgets[month] = {category: amount for category in PREDEFINED_CATEGORIES}
        logger.debug("default_budgets_seeded", month=str(month), amount=str(amount))

    # -------------------------------------------------------------------------
    # Budget entries
    # -------------------------------------------------------------------------

    def set_budget(self, category: CategoryLike, amount: AmountLike, month: YearMonth) -> None:
        """
        Insert or overwrite the budget for (month, category).

        Raises:
            InvalidBudgetError: if amount is not a finite, non-negative number
        """
        name = category_name(category)
        try:
            value = to_decimal(amount)
        except ValueError as e:
            raise InvalidBudgetError(str(e))
        if value < 0:
            raise InvalidBudgetError(f"Budget cannot be negative: {value}")

        self._budgets.setdefault(month, {})[name] = value
        logger.debug("budget_set", month=str(month), category=name, amount=str(value))
        self._notifier.notify(StoreChange(
            kind=ChangeKind.BUDGET_SET,
            month=month,
            category=name,
            amount=value,
        ))

    def get_budget(self, category: CategoryLike, month: YearMonth) -> Decimal:
        """Budget for (month, category), or 0 when none is set."""
        return self._budgets.get(month, {}).get(category_name(category), ZERO)

    def get_all_budgets(self, month: YearMonth) -> dict[str, Decimal]:
        """Independent copy of the category -> amount mapping for month (empty if none)."""
        return dict(self._budgets.get(month, {}))

    # -------------------------------------------------------------------------
    # Utilization
    # -------------------------------------------------------------------------

    def calculate_total_expenses_by_category(
        self,
        category: CategoryLike,
        month: YearMonth,
    ) -> Decimal:
        """Sum of expenses in month whose category matches exactly (case-sensitive)."""
        return self._expense_store.calculate_monthly_expenses_by_category(category, month)

    def calculate_budget_utilization(self, month: YearMonth) -> dict[str, Decimal]:
        """
        Percentage of each predefined category's budget spent in month.

        A zero budget yields 0 regardless of spending. Values are not
        clamped: overspending reports more than 100.
        """
        utilization = {}
        for category in PREDEFINED_CATEGORIES:
            spent = self.calculate_total_expenses_by_category(category, month)
            budget = self.get_budget(category, month)
            utilization[category] = (spent / budget) * HUNDRED if budget > 0 else ZERO
        return utilization

    def get_available_months(self) -> list[YearMonth]:
        """Sorted, duplicate-free union of budgeted months and months with expenses."""
        return sorted(set(self._budgets) | self._expense_store.get_months())
