"""Bulk transaction import/export package."""

from budget_tracker.services.transactions.transaction_file import (
    TransactionFileHandler,
    TransactionImportError,
)

__all__ = [
    "TransactionFileHandler",
    "TransactionImportError",
]
