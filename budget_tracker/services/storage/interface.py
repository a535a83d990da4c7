"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Swap the text-file format for a database later
2. Use in-memory storage for testing the presentation layer
3. Keep the stores decoupled from file handling

Storage implementations never own a session: they read from or write
into the session passed to each call.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from budget_tracker.models.results import LoadResult
from budget_tracker.models.user import User
from budget_tracker.session import FinanceSession


class SessionStorageInterface(ABC):
    """
    Abstract interface for per-user session persistence.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def save(self, user: User, session: FinanceSession) -> None:
        """
        Persist the full state of a session, replacing what was stored before.

        Args:
            user: Owner of the data
            session: Session whose budgets and expenses are written

        Raises:
            StorageError: If the data cannot be written
        """
        pass

    @abstractmethod
    def load(self, user: User, session: FinanceSession) -> LoadResult:
        """
        Load a user's stored data into a session.

        A user with no stored data is not an error: the result reports
        file_found=False and nothing is changed.

        Raises:
            StorageError: If stored data exists but cannot be read
        """
        pass

    @abstractmethod
    def backup(self, user: User) -> Path:
        """
        Copy the user's stored data to its single backup slot.

        Returns:
            Location of the backup

        Raises:
            NotFoundError: If the user has no stored data
            StorageError: If the copy fails
        """
        pass

    @abstractmethod
    def delete_user_data(self, user: User) -> bool:
        """
        Delete the user's stored data.

        Returns:
            True if data was deleted, False if there was none
        """
        pass


class CredentialStorageInterface(ABC):
    """
    Abstract interface for the shared credential list.

    Credentials are opaque; we only ever remove an exact entry.
    """

    @abstractmethod
    def delete_user_credential(self, user: User) -> bool:
        """
        Remove the user's credential entry.

        Returns:
            True if an entry was removed
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations (open/read/write/copy/delete failures)."""
    pass


class NotFoundError(StorageError):
    """Requested stored data does not exist."""
    pass
