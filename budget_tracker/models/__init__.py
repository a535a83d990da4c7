"""
Data Models Package

This package contains the value types and Pydantic models used by the
budget tracker engine: expense records, month keys, the opaque user
credential, operation results and audit events.
"""

from budget_tracker.models.expense import (
    PREDEFINED_CATEGORIES,
    Expense,
    ExpenseCategory,
    category_name,
    format_amount,
    parse_iso_date,
    to_decimal,
)
from budget_tracker.models.month import YearMonth
from budget_tracker.models.results import (
    ChangeKind,
    ImportLineError,
    ImportResult,
    LoadResult,
    SkippedLine,
    StoreChange,
)
from budget_tracker.models.user import User
from budget_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Expense models
    "PREDEFINED_CATEGORIES",
    "Expense",
    "ExpenseCategory",
    "YearMonth",
    "category_name",
    "format_amount",
    "parse_iso_date",
    "to_decimal",
    # Results
    "ChangeKind",
    "ImportLineError",
    "ImportResult",
    "LoadResult",
    "SkippedLine",
    "StoreChange",
    # Users
    "User",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
