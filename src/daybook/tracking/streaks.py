# src/daybook/tracking/streaks.py

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime

from ..core.dates import as_day, days_between
from ..core.dates import today as local_today


def current_streak(
        completions: Iterable[date | datetime | float],
        *,
        today: date | None = None,
) -> int:
    """
    Count consecutive calendar days with a completion, walking back from today.

    The walk starts at today and tolerates one day of lag: if today has no
    completion but yesterday does, counting starts from yesterday. Any gap of
    two or more days ends the streak. Input order does not matter; each calendar
    day counts once.
    """
    days = sorted({as_day(c) for c in completions}, reverse=True)
    if not days:
        return 0

    cursor = today or local_today()
    streak = 0
    for d in days:
        gap = days_between(cursor, d)
        if gap in (0, 1):
            streak += 1
            cursor = d
        elif gap > 1:
            break
        # gap < 0: future-dated completion, skip
    return streak
