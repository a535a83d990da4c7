"""
Bulk Transaction Import/Export

Line-oriented exchange of expenses with an external delimited file,
independent of the per-user data file but sharing its expense line shape:

    <YYYY-MM-DD>,<category>,<amount>,<description>

Import validates every line on its own. A bad line is recorded as
"Line N: <reason>" and the import moves on; records already added are
never rolled back.

DESIGN DECISION: Success is returned, failure is raised.
- At least one record imported (or nothing to reject): return ImportResult,
  with any rejected lines as warnings
- Nothing imported and at least one line rejected: raise
  TransactionImportError carrying the same ImportResult
"""

from pathlib import Path
from typing import Optional, Union

import structlog

from budget_tracker.audit import AuditLogger
from budget_tracker.config import get_settings
from budget_tracker.models.results import ImportLineError, ImportResult
from budget_tracker.services.storage import StorageError, format_expense_line
from budget_tracker.session import FinanceSession
from budget_tracker.validation import LineValidationError, TransactionLineValidator


logger = structlog.get_logger(__name__)


class TransactionImportError(Exception):
    """An import that added no transactions; carries the full result."""

    def __init__(self, result: ImportResult):
        self.result = result
        super().__init__(result.summary)

    @property
    def partial_success(self) -> bool:
        return self.result.partial_success


class TransactionFileHandler:
    """
    Imports transactions into, and exports them from, a session's expense store.

    The handler keeps no reference to the session between calls.
    """

    def __init__(
        self,
        validator: Optional[TransactionLineValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._validator = validator or TransactionLineValidator()
        self._audit_logger = audit_logger
        self._encoding = get_settings().storage.encoding

    def import_transactions(
        self,
        path: Union[str, Path],
        session: FinanceSession,
    ) -> ImportResult:
        """
        Import every valid line of path into session.expenses.

        Returns:
            ImportResult with the imported count and any rejected lines

        Raises:
            StorageError: if the file cannot be read
            TransactionImportError: if no line was imported and at least one was rejected
        """
        path = Path(path)
        try:
            with path.open("r", encoding=self._encoding) as f:
                lines = f.read().splitlines()
        except (OSError, UnicodeDecodeError) as e:
            logger.error("transaction_file_unreadable", path=str(path), error=str(e))
            raise StorageError(f"Error reading transaction file: {e}") from e

        imported = 0
        errors: list[ImportLineError] = []

        for line_number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                expense = self._validator.validate(line, line_number)
            except LineValidationError as e:
                errors.append(ImportLineError(line_number=line_number, reason=e.reason))
                continue
            session.expenses.add_expense(expense)
            imported += 1

        result = ImportResult(imported_count=imported, errors=errors)

        logger.info(
            "transactions_imported",
            path=str(path),
            imported=imported,
            rejected=result.error_count,
        )
        if self._audit_logger:
            self._audit_logger.log_import(str(path), imported, [str(e) for e in errors])

        if imported == 0 and errors:
            raise TransactionImportError(result)
        return result

    def export_transactions(
        self,
        path: Union[str, Path],
        session: FinanceSession,
    ) -> int:
        """
        Write every expense, in store order, to path (overwriting it).

        No category check is applied: whatever the store holds is exported.

        Returns:
            Number of transactions written
        """
        path = Path(path)
        expenses = session.expenses.get_all_expenses()
        try:
            with path.open("w", encoding=self._encoding, newline="\n") as f:
                for expense in expenses:
                    f.write(format_expense_line(expense) + "\n")
        except OSError as e:
            logger.error("transaction_export_failed", path=str(path), error=str(e))
            raise StorageError(f"Error writing transaction file: {e}") from e

        logger.info("transactions_exported", path=str(path), count=len(expenses))
        if self._audit_logger:
            self._audit_logger.log_export(str(path), len(expenses))
        return len(expenses)
