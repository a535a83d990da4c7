"""
Text File Storage Implementation

DESIGN DECISION: One plain text file per user, in two sections:

    [BUDGETS]
    <YYYY-MM>,<category>,<amount to 2 decimals>
    [EXPENSES]
    <YYYY-MM-DD>,<category>,<amount to 2 decimals>,<description>

Commas in descriptions are written as semicolons and turned back into
commas on load. A description that already contained a semicolon
therefore comes back with a comma: the format cannot tell them apart.

TRADEOFFS:
- Every save rewrites the whole file (no incremental writes)
- Malformed data lines are skipped on load, reported in LoadResult
- No automatic retries: a failed write surfaces to the caller at once
"""

import os
import shutil
import tempfile
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from pathlib import Path
from typing import Optional, Union

import structlog

from budget_tracker.audit import AuditLogger
from budget_tracker.config import get_settings
from budget_tracker.models.expense import Expense, parse_iso_date
from budget_tracker.models.month import YearMonth
from budget_tracker.models.results import LoadResult, SkippedLine
from budget_tracker.models.user import User
from budget_tracker.services.storage.interface import (
    CredentialStorageInterface,
    NotFoundError,
    SessionStorageInterface,
    StorageError,
)
from budget_tracker.session import FinanceSession
from budget_tracker.validation import ESCAPED_COMMA, FIELD_DELIMITER, InvalidBudgetError


BUDGETS_HEADER = "[BUDGETS]"
EXPENSES_HEADER = "[EXPENSES]"

BUDGET_FIELD_COUNT = 3
EXPENSE_FIELD_COUNT = 4

_CENTS = Decimal("0.01")

logger = structlog.get_logger(__name__)


# =============================================================================
# LINE CODEC
# =============================================================================

def format_stored_amount(amount: Decimal) -> str:
    """Amount rounded half-up to exactly two decimals, at any magnitude."""
    value = Decimal(amount)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        ctx.Emax = max(ctx.Emax, value.adjusted() + 1)
        return str(value.quantize(_CENTS, rounding=ROUND_HALF_UP))


def format_budget_line(month: YearMonth, category: str, amount: Decimal) -> str:
    return FIELD_DELIMITER.join([str(month), category, format_stored_amount(amount)])


def format_expense_line(expense: Expense) -> str:
    """Four-field expense line (no trailing newline); shared with bulk export."""
    return FIELD_DELIMITER.join([
        expense.date.isoformat(),
        expense.category,
        format_stored_amount(expense.amount),
        expense.description.replace(FIELD_DELIMITER, ESCAPED_COMMA),
    ])


def parse_budget_line(line: str) -> tuple[YearMonth, str, Decimal]:
    """
    Parse a budget data line.

    Raises:
        ValueError: with the reason the line is unusable
    """
    parts = line.split(FIELD_DELIMITER)
    if len(parts) != BUDGET_FIELD_COUNT:
        raise ValueError(f"expected {BUDGET_FIELD_COUNT} fields, found {len(parts)}")
    month = YearMonth.parse(parts[0])
    return month, parts[1], _parse_stored_amount(parts[2])


def parse_expense_line(line: str) -> Expense:
    """
    Parse an expense data line; the description may itself hold delimiters.

    Raises:
        ValueError: with the reason the line is unusable
    """
    parts = line.split(FIELD_DELIMITER, EXPENSE_FIELD_COUNT - 1)
    if len(parts) != EXPENSE_FIELD_COUNT:
        raise ValueError(f"expected {EXPENSE_FIELD_COUNT} fields, found {len(parts)}")
    try:
        expense_date = parse_iso_date(parts[0])
    except ValueError:
        raise ValueError(f"invalid date: {parts[0]!r}")
    return Expense(
        date=expense_date,
        category=parts[1],
        amount=_parse_stored_amount(parts[2]),
        description=parts[3].replace(ESCAPED_COMMA, FIELD_DELIMITER),
    )


def _parse_stored_amount(raw: str) -> Decimal:
    try:
        amount = Decimal(raw.strip())
    except InvalidOperation:
        raise ValueError(f"invalid amount: {raw!r}")
    if not amount.is_finite():
        raise ValueError(f"invalid amount: {raw!r}")
    return amount


# =============================================================================
# FILE STORAGE
# =============================================================================

class TextFileStorage(SessionStorageInterface, CredentialStorageInterface):
    """
    Text file implementation of session and credential storage.

    Layout inside data_dir:
    - <username><data_file_suffix>              the user's data
    - <username><data_file_suffix><backup_suffix>  single-generation backup
    - <credentials_filename>                    shared username:hash:salt list
    """

    def __init__(
        self,
        data_dir: Optional[Union[str, Path]] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._settings = get_settings().storage
        self._data_dir = Path(data_dir) if data_dir is not None else self._settings.data_dir
        self._encoding = self._settings.encoding
        self._audit_logger = audit_logger
        self._initialize_data_directory()

    def _initialize_data_directory(self) -> None:
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Could not create data directory {self._data_dir}: {e}") from e
        logger.debug("data_directory_ready", path=str(self._data_dir.resolve()))

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def data_file_path(self, user: User) -> Path:
        return self._data_dir / f"{user.username}{self._settings.data_file_suffix}"

    def backup_file_path(self, user: User) -> Path:
        data_path = self.data_file_path(user)
        return data_path.with_name(data_path.name + self._settings.backup_suffix)

    @property
    def credentials_file_path(self) -> Path:
        return self._data_dir / self._settings.credentials_filename

    # -------------------------------------------------------------------------
    # Save
    # -------------------------------------------------------------------------

    def save(self, user: User, session: FinanceSession) -> None:
        """Rewrite the user's data file from the session's current state."""
        lines = [BUDGETS_HEADER]
        budget_count = 0
        for month in session.budgets.get_available_months():
            for category, amount in session.budgets.get_all_budgets(month).items():
                lines.append(format_budget_line(month, category, amount))
                budget_count += 1

        lines.append(EXPENSES_HEADER)
        expenses = session.expenses.get_all_expenses()
        lines.extend(format_expense_line(expense) for expense in expenses)

        path = self.data_file_path(user)
        try:
            self._atomic_write(path, "".join(f"{line}\n" for line in lines))
        except OSError as e:
            self._report_failure("save", user, e)
            raise StorageError(f"Error saving user data: {e}") from e

        logger.info(
            "user_data_saved",
            username=user.username,
            path=str(path),
            budgets=budget_count,
            expenses=len(expenses),
        )
        if self._audit_logger:
            self._audit_logger.log_data_saved(user.username, budget_count, len(expenses))

    def _atomic_write(self, path: Path, content: str) -> None:
        """Write to a temporary sibling, then replace the target in one step."""
        fd, tmp_path = tempfile.mkstemp(prefix=".tmp_", suffix=".txt", dir=str(path.parent))
        try:
            with os.fdopen(fd, "w", encoding=self._encoding, newline="\n") as f:
                f.write(content)
            os.replace(tmp_path, path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise

    # -------------------------------------------------------------------------
    # Load
    # -------------------------------------------------------------------------

    def load(self, user: User, session: FinanceSession) -> LoadResult:
        """
        Read the user's data file into the session.

        Budgets overwrite matching (month, category) entries; expenses are
        appended in file order. Unusable lines are skipped and reported.
        """
        path = self.data_file_path(user)
        if not path.exists():
            logger.info("no_user_data_file", username=user.username, path=str(path))
            return LoadResult(file_found=False)

        try:
            with path.open("r", encoding=self._encoding) as f:
                raw_lines = f.read().splitlines()
        except (OSError, UnicodeDecodeError) as e:
            self._report_failure("load", user, e)
            raise StorageError(f"Error loading user data: {e}") from e

        section = None
        budgets_loaded = 0
        expenses_loaded = 0
        skipped: list[SkippedLine] = []

        for line_number, line in enumerate(raw_lines, start=1):
            if line == BUDGETS_HEADER or line == EXPENSES_HEADER:
                section = line
                continue
            if not line.strip():
                continue

            if section is None:
                skipped.append(SkippedLine(
                    line_number=line_number,
                    content=line,
                    reason="data line before any section header",
                ))
                continue

            try:
                if section == BUDGETS_HEADER:
                    month, category, amount = parse_budget_line(line)
                    session.budgets.set_budget(category, amount, month)
                    budgets_loaded += 1
                else:
                    session.expenses.add_expense(parse_expense_line(line))
                    expenses_loaded += 1
            except (ValueError, InvalidBudgetError) as e:
                skipped.append(SkippedLine(line_number=line_number, content=line, reason=str(e)))

        result = LoadResult(
            file_found=True,
            budgets_loaded=budgets_loaded,
            expenses_loaded=expenses_loaded,
            skipped_lines=skipped,
        )

        logger.info(
            "user_data_loaded",
            username=user.username,
            budgets=budgets_loaded,
            expenses=expenses_loaded,
            skipped=result.skipped_count,
        )
        if skipped:
            logger.warning(
                "malformed_lines_skipped",
                username=user.username,
                line_numbers=[s.line_number for s in skipped],
            )
        if self._audit_logger:
            self._audit_logger.log_data_loaded(
                user.username,
                budgets_loaded,
                expenses_loaded,
                [s.model_dump() for s in skipped],
            )

        return result

    # -------------------------------------------------------------------------
    # Backup and deletion
    # -------------------------------------------------------------------------

    def backup(self, user: User) -> Path:
        """Byte-copy the data file over the previous backup."""
        source = self.data_file_path(user)
        target = self.backup_file_path(user)

        if not source.exists():
            raise NotFoundError(f"No data file to back up for user {user.username}: {source}")

        try:
            shutil.copyfile(source, target)
        except OSError as e:
            self._report_failure("backup", user, e)
            raise StorageError(f"Error creating backup: {e}") from e

        logger.info("backup_created", username=user.username, path=str(target))
        if self._audit_logger:
            self._audit_logger.log_backup_created(user.username, str(target))
        return target

    def delete_user_data(self, user: User) -> bool:
        """Delete the data file. A missing file is not an error."""
        path = self.data_file_path(user)
        try:
            deleted = path.exists()
            path.unlink(missing_ok=True)
        except OSError as e:
            self._report_failure("delete_user_data", user, e)
            raise StorageError(f"Error deleting user data: {e}") from e

        logger.info("user_data_deleted", username=user.username, deleted=deleted)
        if self._audit_logger:
            self._audit_logger.log_user_data_deleted(user.username, deleted)
        return deleted

    def delete_user_credential(self, user: User) -> bool:
        """Remove every line equal (after trimming) to the user's credential triple."""
        path = self.credentials_file_path
        if not path.exists():
            logger.info("credentials_file_missing", path=str(path))
            return False

        target = user.credential_line
        try:
            with path.open("r", encoding=self._encoding) as f:
                lines = f.read().splitlines()
            kept = [line for line in lines if line.strip() != target]
            removed = len(kept) != len(lines)
            if removed:
                self._atomic_write(path, "".join(f"{line}\n" for line in kept))
        except (OSError, UnicodeDecodeError) as e:
            self._report_failure("delete_user_credential", user, e)
            raise StorageError(f"Error removing user credential: {e}") from e

        logger.info("user_credential_removed", username=user.username, removed=removed)
        if self._audit_logger:
            self._audit_logger.log_credential_removed(user.username, removed)
        return removed

    def _report_failure(self, operation: str, user: User, error: Exception) -> None:
        logger.error(
            "storage_operation_failed",
            operation=operation,
            username=user.username,
            error=str(error),
        )
        if self._audit_logger:
            self._audit_logger.log_storage_failed(operation, user.username, str(error))
