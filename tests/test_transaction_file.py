"""Tests for bulk transaction import/export."""

import pytest
from datetime import date
from decimal import Decimal

from budget_tracker.audit import AuditLogger
from budget_tracker.models.audit import AuditEventType
from budget_tracker.models.expense import Expense
from budget_tracker.models.month import YearMonth
from budget_tracker.services.storage import StorageError
from budget_tracker.services.transactions import TransactionFileHandler, TransactionImportError
from budget_tracker.session import FinanceSession
from budget_tracker.validation import LineValidationError, TransactionLineValidator


@pytest.fixture
def session():
    return FinanceSession(current_month=YearMonth(2024, 1), seed_current_month=False)


@pytest.fixture
def handler():
    return TransactionFileHandler()


def write_lines(path, *lines):
    path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")
    return path


class TestTransactionLineValidator:
    """Tests for single-line validation."""

    @pytest.fixture
    def validator(self):
        return TransactionLineValidator()

    def test_valid_line(self, validator):
        """Test that fields are trimmed and parsed."""
        expense = validator.validate(" 2024-01-05 , Food , 12.50 , Lunch; coffee ")
        assert expense.date == date(2024, 1, 5)
        assert expense.category == "Food"
        assert expense.amount == Decimal("12.50")
        assert expense.description == "Lunch, coffee"

    @pytest.mark.parametrize("line,reason", [
        ("2024-01-05,Food,12.50", "Invalid number of fields"),
        ("2024-01-05,Food,12.50,a,b", "Invalid number of fields"),
        ("05/01/2024,Food,12.50,x", "Invalid date format"),
        ("20240102,Food,5,x", "Invalid date format"),
        ("2024-W01-2,Food,5,y", "Invalid date format"),
        ("2024-01-05,Rent,12.50,x", "Invalid category - Rent"),
        ("2024-01-05,food,12.50,x", "Invalid category - food"),
        ("2024-01-05,Food,abc,x", "Invalid amount"),
        ("2024-01-05,Food,0,x", "Invalid amount"),
        ("2024-01-05,Food,-3,x", "Invalid amount"),
    ])
    def test_rejected_lines(self, validator, line, reason):
        """Test the reason reported for each kind of bad line."""
        with pytest.raises(LineValidationError) as exc_info:
            validator.validate(line, 7)
        assert exc_info.value.reason == reason
        assert str(exc_info.value) == f"Line 7: {reason}"

    def test_custom_category_set(self):
        """Test a validator with its own allowed categories."""
        validator = TransactionLineValidator(allowed_categories=["Rent"])
        assert validator.validate("2024-01-05,Rent,900,Flat").category == "Rent"


class TestImportTransactions:
    """Tests for import_transactions."""

    def test_partial_import(self, tmp_path, handler, session):
        """Test that bad lines are reported while good lines are kept."""
        path = write_lines(
            tmp_path / "in.txt",
            "2024-01-05,Food,12.50,Lunch",
            "2024-01-06,Rent,900.00,Flat",
            "2024-01-07,Transportation,3.20,Bus",
        )

        result = handler.import_transactions(path, session)

        assert result.imported_count == 2
        assert result.partial_success is True
        assert [str(e) for e in result.errors] == ["Line 2: Invalid category - Rent"]
        assert [e.category for e in session.expenses.get_all_expenses()] == ["Food", "Transportation"]

    def test_clean_import(self, tmp_path, handler, session):
        """Test an import without errors."""
        path = write_lines(tmp_path / "in.txt", "2024-01-05,Food,12.50,Lunch")
        result = handler.import_transactions(path, session)
        assert result.imported_count == 1
        assert result.has_errors is False
        assert result.summary == "Successfully imported 1 transactions\n"

    def test_zero_success_raises(self, tmp_path, handler, session):
        """Test that an import with only bad lines raises with the full result."""
        path = write_lines(tmp_path / "in.txt", "bad line", "2024-01-05,Food,abc,x")

        with pytest.raises(TransactionImportError) as exc_info:
            handler.import_transactions(path, session)

        result = exc_info.value.result
        assert result.imported_count == 0
        assert exc_info.value.partial_success is False
        assert result.error_text == "Line 1: Invalid number of fields\nLine 2: Invalid amount"
        assert len(session.expenses) == 0

    def test_blank_lines_skipped(self, tmp_path, handler, session):
        """Test that blank lines are neither imported nor rejected but keep numbering."""
        path = write_lines(tmp_path / "in.txt", "", "2024-01-05,Food,1.00,x", "   ", "bad")
        result = handler.import_transactions(path, session)
        assert result.imported_count == 1
        assert [e.line_number for e in result.errors] == [4]

    def test_empty_file(self, tmp_path, handler, session):
        """Test that an empty file is a successful import of nothing."""
        path = tmp_path / "in.txt"
        path.write_text("", encoding="utf-8")
        result = handler.import_transactions(path, session)
        assert result.imported_count == 0
        assert result.errors == []

    def test_missing_file(self, tmp_path, handler, session):
        """Test that an unreadable file is a storage error."""
        with pytest.raises(StorageError):
            handler.import_transactions(tmp_path / "missing.txt", session)

    def test_import_notifies_per_record(self, tmp_path, handler, session):
        """Test that each imported record fires its own change."""
        received = []
        session.subscribe(received.append)
        path = write_lines(tmp_path / "in.txt", "2024-01-05,Food,1.00,a", "2024-01-06,Food,2.00,b")
        handler.import_transactions(path, session)
        assert len(received) == 2

    def test_import_audited(self, tmp_path, session):
        """Test the audit event of a failed import."""
        audit_logger = AuditLogger(history_size=10)
        handler = TransactionFileHandler(audit_logger=audit_logger)
        path = write_lines(tmp_path / "in.txt", "bad")
        with pytest.raises(TransactionImportError):
            handler.import_transactions(path, session)
        assert audit_logger.get_events_by_type(AuditEventType.TRANSACTION_IMPORT_FAILED)


class TestExportTransactions:
    """Tests for export_transactions."""

    def test_export_writes_every_expense(self, tmp_path, handler, session):
        """Test the exported lines, including a non-predefined category."""
        session.expenses.add_expense(
            Expense(date=date(2024, 1, 5), category="Food", amount=Decimal("12.5"), description="Lunch, coffee")
        )
        session.expenses.add_expense(
            Expense(date=date(2024, 1, 6), category="Gifts", amount=Decimal("30"), description="Present")
        )
        path = tmp_path / "out.txt"

        count = handler.export_transactions(path, session)

        assert count == 2
        assert path.read_text(encoding="utf-8") == (
            "2024-01-05,Food,12.50,Lunch; coffee\n"
            "2024-01-06,Gifts,30.00,Present\n"
        )

    def test_export_then_import(self, tmp_path, handler, session):
        """Test that exported predefined-category records import back."""
        session.expenses.add_expense(
            Expense(date=date(2024, 1, 5), category="Utilities", amount=Decimal("80"), description="Power, water")
        )
        path = tmp_path / "out.txt"
        handler.export_transactions(path, session)

        target = FinanceSession(current_month=YearMonth(2024, 1), seed_current_month=False)
        result = handler.import_transactions(path, target)

        assert result.imported_count == 1
        imported = target.expenses.get_all_expenses()[0]
        assert imported.description == "Power, water"
        assert imported.amount == Decimal("80.00")

    def test_export_large_amount(self, tmp_path, handler, session):
        """Test that an imported amount beyond the default decimal precision exports."""
        source = write_lines(tmp_path / "in.txt", "2024-01-02,Food,1E+30,x")
        assert handler.import_transactions(source, session).imported_count == 1

        path = tmp_path / "out.txt"
        assert handler.export_transactions(path, session) == 1
        assert path.read_text(encoding="utf-8") == "2024-01-02,Food,1000000000000000000000000000000.00,x\n"

    def test_export_empty_store(self, tmp_path, handler, session):
        """Test that exporting nothing leaves an empty file."""
        path = tmp_path / "out.txt"
        assert handler.export_transactions(path, session) == 0
        assert path.read_text(encoding="utf-8") == ""
