"""Report generation package."""

from budget_tracker.reports.engine import ReportEngine

__all__ = ["ReportEngine"]
