"""Services package."""

from budget_tracker.services.storage import (
    CredentialStorageInterface,
    NotFoundError,
    SessionStorageInterface,
    StorageError,
    TextFileStorage,
)
from budget_tracker.services.transactions import (
    TransactionFileHandler,
    TransactionImportError,
)

__all__ = [
    # Storage services
    "CredentialStorageInterface",
    "NotFoundError",
    "SessionStorageInterface",
    "StorageError",
    "TextFileStorage",
    # Bulk transactions
    "TransactionFileHandler",
    "TransactionImportError",
]
