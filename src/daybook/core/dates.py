# src/daybook/core/dates.py

"""
Calendar-day helpers.

Timestamps are float epoch seconds; calendar days are `date` objects in local time.
Day arithmetic goes through `date` so DST transitions never shift a day boundary.
"""

from __future__ import annotations

import calendar
import time
from datetime import date, datetime, timedelta


def as_day(value: date | datetime | float) -> date:
    """Truncate a timestamp / datetime to its local calendar day."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromtimestamp(float(value)).date()


def start_of_day(value: date | datetime | float) -> float:
    d = as_day(value)
    return datetime(d.year, d.month, d.day).timestamp()


def day_bounds(value: date | datetime | float) -> tuple[float, float]:
    """Half-open [start, end) bounds of the local calendar day."""
    d = as_day(value)
    return start_of_day(d), start_of_day(d + timedelta(days=1))


def today(now_ts: float | None = None) -> date:
    return as_day(time.time() if now_ts is None else now_ts)


def days_before(now_ts: float, days: int) -> float:
    """The same local wall-clock time `days` calendar days earlier."""
    return (datetime.fromtimestamp(float(now_ts)) - timedelta(days=days)).timestamp()


def days_between(later: date, earlier: date) -> int:
    return (later - earlier).days


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_bounds(year: int, month: int) -> tuple[float, float]:
    """Half-open [first day 00:00, first day of next month 00:00) in local time."""
    if not 1 <= month <= 12:
        raise ValueError(f"month must be 1..12, got {month}")
    first = date(year, month, 1)
    nxt = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start_of_day(first), start_of_day(nxt)
