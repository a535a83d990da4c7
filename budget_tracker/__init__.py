"""
Budget Tracker - Source Package

The expense/budget domain engine of a personal finance tracker:
monthly per-category budgets, dated categorized expenses, reports,
per-user text file persistence and bulk transaction import/export.

DESIGN PRINCIPLES:
1. The session owns the data; codecs only borrow it per call
2. Fail early, fail visibly (no silent index or I/O errors)
3. Partial success is reported, never rolled back or hidden
4. Every mutation is observable and auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Budget Tracker Team"
