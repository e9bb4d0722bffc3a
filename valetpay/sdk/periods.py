"""Shift dates and aggregation windows.

Shift dates are plain calendar dates (YYYY-MM-DD) and are compared as such,
with no timezone conversion, so a 2025-06-01 shift never lands in May.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Tuple

ALL = "all"


def parse_shift_date(date_str, today: Optional[date] = None) -> Tuple[date, bool]:
    """Parse a shift date, falling back to today.

    The fallback is only for filtering and sorting; it never changes
    financial totals.

    Args:
        date_str: YYYY-MM-DD string (a date or datetime is accepted as-is)
        today: Override for the fallback date

    Returns:
        (date, ok) - ok is False when the fallback was used
    """
    if isinstance(date_str, datetime):
        return date_str.date(), True
    if isinstance(date_str, date):
        return date_str, True
    try:
        return datetime.strptime(str(date_str).strip()[:10], "%Y-%m-%d").date(), True
    except ValueError:
        return (today or date.today()), False


@dataclass(frozen=True)
class AggregationWindow:
    """A calendar month, or all time when year/month are None."""

    year: Optional[int] = None
    month: Optional[int] = None

    @property
    def is_all(self) -> bool:
        return self.year is None

    def contains(self, day: date) -> bool:
        if self.is_all:
            return True
        return day.year == self.year and day.month == self.month

    @property
    def label(self) -> str:
        if self.is_all:
            return ALL
        return f"{self.year:04d}-{self.month:02d}"


def parse_window(value: Optional[str]) -> AggregationWindow:
    """Parse 'all', None, or 'YYYY-MM' into an AggregationWindow.

    Raises:
        ValueError: If value is not 'all' or a valid YYYY-MM month
    """
    if value is None or value.strip().lower() == ALL:
        return AggregationWindow()
    try:
        parsed = datetime.strptime(value.strip(), "%Y-%m")
    except ValueError:
        raise ValueError(f"Invalid window '{value}'. Expected 'all' or YYYY-MM.")
    return AggregationWindow(year=parsed.year, month=parsed.month)
