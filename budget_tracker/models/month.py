"""
Month Key

A (year, month) pair used to scope budget entries and expense
aggregation windows. Rendered and parsed as "YYYY-MM", which is also
the representation used in the persisted data file.
"""

import calendar
from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True, order=True)
class YearMonth:
    """Ordered, hashable calendar month."""

    year: int
    month: int

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"Month must be between 1 and 12, got {self.month}")
        if not 1 <= self.year <= 9999:
            raise ValueError(f"Year must be between 1 and 9999, got {self.year}")

    @classmethod
    def parse(cls, text: str) -> "YearMonth":
        """Parse a "YYYY-MM" string."""
        parts = text.strip().split("-")
        if len(parts) != 2 or len(parts[0]) != 4 or len(parts[1]) != 2 or not all(p.isdigit() for p in parts):
            raise ValueError(f"Invalid month key: {text!r} (expected YYYY-MM)")
        return cls(int(parts[0]), int(parts[1]))

    @classmethod
    def from_date(cls, value: date) -> "YearMonth":
        return cls(value.year, value.month)

    @classmethod
    def current(cls) -> "YearMonth":
        return cls.from_date(date.today())

    def plus_months(self, months: int) -> "YearMonth":
        index = self.year * 12 + (self.month - 1) + months
        return YearMonth(index // 12, index % 12 + 1)

    def minus_months(self, months: int) -> "YearMonth":
        return self.plus_months(-months)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def last_day(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    def contains(self, value: date) -> bool:
        """True if the date falls inside this month."""
        return value.year == self.year and value.month == self.month

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"
