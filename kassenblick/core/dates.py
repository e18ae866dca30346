"""
Day-of-month due date arithmetic on the local calendar date.
"""
import re
from datetime import date, datetime, timedelta
from typing import Optional, Union

DateLike = Union[date, datetime]

_DAY_RE = re.compile(r"[+-]?\d+", re.ASCII)


def _as_date(value: DateLike) -> date:
    """Drop the time of day so only whole calendar days are compared."""
    if isinstance(value, datetime):
        return value.date()
    return value


def days_in_month(month: int, year: int) -> int:
    """Number of days in month/year: the day before the first of the next month."""
    next_month = month + 1
    next_year = year
    if next_month > 12:
        next_month = 1
        next_year += 1
    last_day = date(next_year, next_month, 1) - timedelta(days=1)
    return last_day.day


def parse_due_day(due_day: Optional[str]) -> Optional[int]:
    """Return the day of month 1-31, or None when missing, non-numeric or out of range."""
    if due_day is None:
        return None
    text = str(due_day).strip()
    if not _DAY_RE.fullmatch(text):
        return None
    day = int(text)
    if not 1 <= day <= 31:
        return None
    return day


def days_until_due(due_day: Optional[str], today: Optional[DateLike] = None) -> Optional[int]:
    """
    Signed whole days from today to this month's due date.
    The due day is clamped to the length of the current month (31 in February -> 28/29).
    Returns None when the due day is unknown.
    """
    day = parse_due_day(due_day)
    if day is None:
        return None
    today = _as_date(today or date.today())
    effective = min(day, days_in_month(today.month, today.year))
    due = date(today.year, today.month, effective)
    return (due - today).days
