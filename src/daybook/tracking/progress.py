# src/daybook/tracking/progress.py

from __future__ import annotations

import time
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime

from ..core.dates import as_day, days_before, days_in_month

DEFAULT_WINDOW_DAYS = 30


@dataclass(frozen=True, slots=True)
class MonthlyProgress:
    completed_days: int
    total_days: int
    percentage: float


def monthly_progress(
        completions: Iterable[date | datetime | float],
        year: int,
        month: int,
) -> MonthlyProgress:
    """Distinct completion days in the month versus the month's length (month is 1..12)."""
    total = days_in_month(year, month)
    completed = len({d for d in map(as_day, completions) if d.year == year and d.month == month})
    percentage = (completed / total) * 100 if total > 0 else 0.0
    return MonthlyProgress(completed_days=completed, total_days=total, percentage=percentage)


def frequency_in_window(
        timestamps: Iterable[float],
        window_days: int = DEFAULT_WINDOW_DAYS,
        *,
        now_ts: float | None = None,
) -> int:
    """Number of completions in the trailing `window_days` window ending now."""
    now = time.time() if now_ts is None else float(now_ts)
    start = days_before(now, max(0, int(window_days)))
    return sum(1 for ts in timestamps if start <= float(ts) <= now)


def frequency_badge(count: int) -> str | None:
    """
    Label for a trailing-window count:
      >= 10 -> "10x+"
      >= 1  -> "<n>x"
      0     -> no badge
    """
    if count >= 10:
        return "10x+"
    if count >= 1:
        return f"{count}x"
    return None
