"""
Report Engine

DESIGN DECISION: Reporting is DETERMINISTIC and read-only.
The engine holds references to the two stores and nothing else;
calling any method never mutates them or fires notifications.

Categories are always visited in the predefined order, so identical
inputs produce byte-identical report text.
"""

from decimal import Decimal

from budget_tracker.models.expense import PREDEFINED_CATEGORIES, format_amount
from budget_tracker.models.month import YearMonth
from budget_tracker.stores import BudgetStore, ExpenseStore


class ReportEngine:
    """
    Aggregates budgets and expenses into summaries.

    GUARANTEES:
    - Only reports data actually held in the stores
    - Every predefined category appears, even at zero
    - Output order never depends on insertion or hash order
    """

    def __init__(self, expense_store: ExpenseStore, budget_store: BudgetStore):
        self._expense_store = expense_store
        self._budget_store = budget_store

    def generate_monthly_summary_report(self, month: YearMonth) -> str:
        """
        Multi-section text report for one month.

        Per category: a header line, each matching expense, then
        "<cat> Budget: X | <cat> Expenses: Y". Ends with the totals line.
        """
        monthly_expenses = self._expense_store.get_expenses_for_month(month)

        parts = [f"Monthly Report for {month}\n\n"]

        for category in PREDEFINED_CATEGORIES:
            parts.append(f"{category}\n")

            for expense in monthly_expenses:
                if expense.category == category:
                    parts.append(f"{expense}\n")

            category_budget = self._budget_store.get_budget(category, month)
            category_spent = self._budget_store.calculate_total_expenses_by_category(category, month)

            parts.append(
                f"\n{category} Budget: {format_amount(category_budget)}"
                f" | {category} Expenses: {format_amount(category_spent)}\n\n"
            )

        parts.append(
            f"Total Budget: {format_amount(self.get_total_budget(month))}"
            f" | Total Expenses: {format_amount(self.get_total_expenses(month))}"
        )

        return "".join(parts)

    def get_total_expenses(self, month: YearMonth) -> Decimal:
        """Sum of every expense dated in month, whatever its category."""
        return sum(
            (expense.amount for expense in self._expense_store.get_expenses_for_month(month)),
            Decimal("0"),
        )

    def get_total_budget(self, month: YearMonth) -> Decimal:
        """Sum of every budget entry for month."""
        return sum(self._budget_store.get_all_budgets(month).values(), Decimal("0"))

    def get_category_wise_spending(self, month: YearMonth) -> dict[str, Decimal]:
        """Spending per predefined category, zero-filled."""
        return {
            category: self._budget_store.calculate_total_expenses_by_category(category, month)
            for category in PREDEFINED_CATEGORIES
        }

    def get_budget_utilization(self, month: YearMonth) -> dict[str, Decimal]:
        """Utilization percentages, as computed by the budget store."""
        return self._budget_store.calculate_budget_utilization(month)
