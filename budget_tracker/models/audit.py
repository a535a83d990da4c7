"""
Audit Models for Budget Tracker

Every store mutation and every persistence operation is logged for audit purposes.
This provides:
1. Traceability of budget and expense changes
2. Debugging information when a load or import goes wrong
3. A record of destructive operations (data and credential deletion)

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Store mutations mirror ChangeKind; the rest come from the file services.
    """
    # Store mutations
    BUDGET_SET = "budget_set"
    EXPENSE_ADDED = "expense_added"
    EXPENSE_EDITED = "expense_edited"
    EXPENSE_DELETED = "expense_deleted"

    # Persistence
    DATA_SAVED = "data_saved"
    DATA_LOADED = "data_loaded"
    LOAD_LINES_SKIPPED = "load_lines_skipped"
    BACKUP_CREATED = "backup_created"
    USER_DATA_DELETED = "user_data_deleted"
    CREDENTIAL_REMOVED = "credential_removed"
    STORAGE_FAILED = "storage_failed"

    # Bulk transactions
    TRANSACTIONS_IMPORTED = "transactions_imported"
    TRANSACTION_IMPORT_FAILED = "transaction_import_failed"
    TRANSACTIONS_EXPORTED = "transactions_exported"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'budget', 'user')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="Identifier of the entity (expense UUID, username, month key)"
    )

    # Event details
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.budget_set("Food", "2024-01", "500.00")
        event = AuditEventBuilder.data_saved("alice", budgets=5, expenses=12)
    """

    @staticmethod
    def budget_set(category: str, month: str, amount: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_SET,
            entity_type="budget",
            entity_id=f"{month}/{category}",
            description=f"Budget set: {category} = {amount} for {month}",
            details={
                "category": category,
                "month": month,
                "amount": amount,
            },
        )

    @staticmethod
    def expense_changed(
        event_type: AuditEventType,
        expense_id: Optional[UUID],
        index: Optional[int],
    ) -> AuditEvent:
        verb = event_type.value.split("_", 1)[1]
        return AuditEvent(
            event_type=event_type,
            entity_type="expense",
            entity_id=str(expense_id) if expense_id else None,
            description=f"Expense {verb} at position {index}",
            details={"index": index},
        )

    @staticmethod
    def data_saved(username: str, budgets: int, expenses: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_SAVED,
            entity_type="user",
            entity_id=username,
            description=f"Saved {budgets} budgets and {expenses} expenses",
            details={"budgets": budgets, "expenses": expenses},
        )

    @staticmethod
    def data_loaded(
        username: str,
        budgets: int,
        expenses: int,
        skipped: int,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_LOADED,
            entity_type="user",
            entity_id=username,
            description=f"Loaded {budgets} budgets and {expenses} expenses",
            details={"budgets": budgets, "expenses": expenses, "skipped": skipped},
        )

    @staticmethod
    def load_lines_skipped(username: str, skipped_lines: list[dict]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOAD_LINES_SKIPPED,
            severity=AuditSeverity.WARNING,
            entity_type="user",
            entity_id=username,
            description=f"Skipped {len(skipped_lines)} malformed lines while loading",
            details={"skipped_lines": skipped_lines},
        )

    @staticmethod
    def backup_created(username: str, backup_path: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BACKUP_CREATED,
            entity_type="user",
            entity_id=username,
            description="Backup created",
            details={"backup_path": backup_path},
        )

    @staticmethod
    def user_data_deleted(username: str, deleted: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.USER_DATA_DELETED,
            entity_type="user",
            entity_id=username,
            description="User data file deleted" if deleted else "No user data file to delete",
            details={"deleted": deleted},
        )

    @staticmethod
    def credential_removed(username: str, removed: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.CREDENTIAL_REMOVED,
            entity_type="user",
            entity_id=username,
            description="Credential entry removed" if removed else "No matching credential entry",
            details={"removed": removed},
        )

    @staticmethod
    def storage_failed(operation: str, username: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STORAGE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="user",
            entity_id=username,
            description=f"Storage operation failed: {operation}",
            error_message=error_message,
            details={"operation": operation},
        )

    @staticmethod
    def transactions_imported(
        source: str,
        imported: int,
        errors: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTIONS_IMPORTED,
            severity=AuditSeverity.WARNING if errors else AuditSeverity.INFO,
            entity_type="file",
            entity_id=source,
            description=f"Imported {imported} transactions with {len(errors)} rejected lines",
            details={"imported": imported, "errors": errors},
        )

    @staticmethod
    def transaction_import_failed(source: str, errors: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_IMPORT_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="file",
            entity_id=source,
            description=f"Import added no transactions ({len(errors)} rejected lines)",
            details={"errors": errors},
        )

    @staticmethod
    def transactions_exported(destination: str, count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTIONS_EXPORTED,
            entity_type="file",
            entity_id=destination,
            description=f"Exported {count} transactions",
            details={"count": count},
        )
