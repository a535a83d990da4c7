"""
Finance Session

This module ties together the expense store, the budget store and
their shared change notifier for one user.

DESIGN DECISION: The session OWNS the data.
Codecs (persistence, bulk transactions) receive a session per call and
never keep a reference to it. The presentation layer subscribes to
changes here, re-reads aggregates, and asks the persistence codec to
save: persist on mutation.
"""

from typing import Callable, Optional

from budget_tracker.audit import AuditLogger
from budget_tracker.models.expense import AmountLike
from budget_tracker.models.month import YearMonth
from budget_tracker.reports import ReportEngine
from budget_tracker.stores import BudgetStore, ChangeCallback, ChangeNotifier, ExpenseStore


class FinanceSession:
    """
    Aggregate root for one user's budgets and expenses.

    Flow:
    1. Caller mutates session.expenses / session.budgets
    2. The store fires a StoreChange through the shared notifier
    3. Every subscriber is called synchronously, in order
    """

    def __init__(
        self,
        default_budget: Optional[AmountLike] = None,
        current_month: Optional[YearMonth] = None,
        seed_current_month: Optional[bool] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._notifier = ChangeNotifier()
        self._expenses = ExpenseStore(self._notifier)
        self._budgets = BudgetStore(
            self._expenses,
            notifier=self._notifier,
            default_amount=default_budget,
            current_month=current_month,
            seed_current_month=seed_current_month,
        )
        self._reports = ReportEngine(self._expenses, self._budgets)
        self._audit_logger = audit_logger
        if audit_logger is not None:
            self._notifier.subscribe(audit_logger.record_change)

    @property
    def expenses(self) -> ExpenseStore:
        return self._expenses

    @property
    def budgets(self) -> BudgetStore:
        return self._budgets

    @property
    def reports(self) -> ReportEngine:
        return self._reports

    @property
    def notifier(self) -> ChangeNotifier:
        return self._notifier

    @property
    def audit_logger(self) -> Optional[AuditLogger]:
        return self._audit_logger

    def subscribe(self, callback: ChangeCallback) -> Callable[[], None]:
        """Register a change subscriber; returns its unsubscribe function."""
        return self._notifier.subscribe(callback)

    def unsubscribe(self, callback: ChangeCallback) -> bool:
        return self._notifier.unsubscribe(callback)
