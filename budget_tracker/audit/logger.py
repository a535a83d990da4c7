"""
Audit Logger

DESIGN DECISION: Every store mutation and file operation is logged.
This provides:
1. Complete traceability of budget and expense changes
2. Debugging capability for loads and imports
3. A queryable in-memory history for the presentation layer

The audit logger:
- Is synchronous, like the rest of the engine (single logical thread)
- Gracefully handles failures (doesn't crash the app if logging fails)
- Can be subscribed directly to a session's change notifier
"""

import logging
from collections import deque
from typing import Optional

import structlog

from budget_tracker.config import get_settings
from budget_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditEventType
from budget_tracker.models.expense import format_amount
from budget_tracker.models.results import ChangeKind, StoreChange


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: Optional[str] = None) -> None:
    """
    Route structlog output through the standard library at the configured level.

    Call once from the application entry point; library code never does.
    """
    level_name = level or get_settings().app.log_level
    logging.basicConfig(format="%(message)s", level=getattr(logging, level_name.upper()))


_CHANGE_EVENT_TYPES = {
    ChangeKind.EXPENSE_ADDED: AuditEventType.EXPENSE_ADDED,
    ChangeKind.EXPENSE_EDITED: AuditEventType.EXPENSE_EDITED,
    ChangeKind.EXPENSE_DELETED: AuditEventType.EXPENSE_DELETED,
}


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. A bounded in-memory history (for display and tests)
    """

    def __init__(self, history_size: Optional[int] = None):
        """
        Initialize audit logger.

        Args:
            history_size: Number of events kept in memory.
                          Defaults to the configured audit_history_size.
        """
        size = history_size or get_settings().app.audit_history_size
        self._history: deque[AuditEvent] = deque(maxlen=size)
        self._logger = structlog.get_logger("budget_tracker.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the event could not be recorded; never raises.
        """
        try:
            log_dict = event.to_log_dict()

            if event.severity.value in ("error", "critical"):
                self._logger.error("audit_event", **log_dict)
            elif event.severity.value == "warning":
                self._logger.warning("audit_event", **log_dict)
            elif event.severity.value == "debug":
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)

            self._history.append(event)
            return True
        except Exception as e:
            # Audit logging must never break the main flow
            self._logger.error(
                "audit_log_failed",
                error=str(e),
                event_id=str(event.event_id),
            )
            return False

    def record_change(self, change: StoreChange) -> None:
        """Change-notifier subscriber: turn a store mutation into an audit event."""
        if change.kind == ChangeKind.BUDGET_SET:
            event = AuditEventBuilder.budget_set(
                category=change.category or "",
                month=str(change.month),
                amount=format_amount(change.amount) if change.amount is not None else "",
            )
        else:
            event = AuditEventBuilder.expense_changed(
                event_type=_CHANGE_EVENT_TYPES[change.kind],
                expense_id=change.expense_id,
                index=change.index,
            )
        self.log(event)

    def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        """Most recent events, newest first."""
        events = list(self._history)
        events.reverse()
        return events[:limit]

    def get_events_by_type(self, event_type: AuditEventType) -> list[AuditEvent]:
        """All retained events of one type, oldest first."""
        return [event for event in self._history if event.event_type == event_type]

    def clear(self) -> None:
        self._history.clear()

    def log_data_saved(self, username: str, budgets: int, expenses: int) -> None:
        """Log a completed save."""
        self.log(AuditEventBuilder.data_saved(username, budgets, expenses))

    def log_data_loaded(
        self,
        username: str,
        budgets: int,
        expenses: int,
        skipped_lines: list[dict],
    ) -> None:
        """Log a completed load, plus a warning event if lines were skipped."""
        self.log(AuditEventBuilder.data_loaded(username, budgets, expenses, len(skipped_lines)))
        if skipped_lines:
            self.log(AuditEventBuilder.load_lines_skipped(username, skipped_lines))

    def log_backup_created(self, username: str, backup_path: str) -> None:
        """Log backup creation."""
        self.log(AuditEventBuilder.backup_created(username, backup_path))

    def log_user_data_deleted(self, username: str, deleted: bool) -> None:
        """Log data file deletion."""
        self.log(AuditEventBuilder.user_data_deleted(username, deleted))

    def log_credential_removed(self, username: str, removed: bool) -> None:
        """Log credential removal."""
        self.log(AuditEventBuilder.credential_removed(username, removed))

    def log_storage_failed(self, operation: str, username: str, error_message: str) -> None:
        """Log a failed file operation."""
        self.log(AuditEventBuilder.storage_failed(operation, username, error_message))

    def log_import(self, source: str, imported: int, errors: list[str]) -> None:
        """Log a bulk import outcome."""
        if imported == 0 and errors:
            self.log(AuditEventBuilder.transaction_import_failed(source, errors))
        else:
            self.log(AuditEventBuilder.transactions_imported(source, imported, errors))

    def log_export(self, destination: str, count: int) -> None:
        """Log a bulk export."""
        self.log(AuditEventBuilder.transactions_exported(destination, count))
