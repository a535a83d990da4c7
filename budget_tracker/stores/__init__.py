"""Budget and expense stores."""

from budget_tracker.stores.budget_store import BudgetStore
from budget_tracker.stores.expense_store import ExpenseStore
from budget_tracker.stores.notifier import ChangeCallback, ChangeNotifier

__all__ = [
    "BudgetStore",
    "ChangeCallback",
    "ChangeNotifier",
    "ExpenseStore",
]
