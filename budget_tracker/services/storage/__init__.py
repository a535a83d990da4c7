"""
Storage Services Package

Provides abstract interfaces and the text file implementation for
per-user persistence. Designed to be swappable.
"""

from budget_tracker.services.storage.interface import (
    CredentialStorageInterface,
    NotFoundError,
    SessionStorageInterface,
    StorageError,
)
from budget_tracker.services.storage.text_file import (
    BUDGETS_HEADER,
    EXPENSES_HEADER,
    TextFileStorage,
    format_budget_line,
    format_expense_line,
    format_stored_amount,
    parse_budget_line,
    parse_expense_line,
)

__all__ = [
    # Interfaces
    "CredentialStorageInterface",
    "SessionStorageInterface",
    # Exceptions
    "NotFoundError",
    "StorageError",
    # Text file implementation
    "BUDGETS_HEADER",
    "EXPENSES_HEADER",
    "TextFileStorage",
    "format_budget_line",
    "format_expense_line",
    "format_stored_amount",
    "parse_budget_line",
    "parse_expense_line",
]
