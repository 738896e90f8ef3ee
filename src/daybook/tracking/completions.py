# src/daybook/tracking/completions.py

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from ..core.dates import day_bounds, days_before, month_bounds
from ..core.ports import IdGenerator, RecordRepo
from ..store.models import EntityKind, HabitCompletion, WorkoutCompletion
from .progress import DEFAULT_WINDOW_DAYS, MonthlyProgress, frequency_in_window, monthly_progress
from .streaks import current_streak

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Ledger:
    """Where one kind of completion lives and which column points at its owner."""

    kind: EntityKind
    owner_field: str
    id_prefix: str = "completion"


HABIT_LEDGER = Ledger(kind=EntityKind.HABIT_COMPLETION, owner_field="habit_id")
WORKOUT_LEDGER = Ledger(kind=EntityKind.WORKOUT_COMPLETION, owner_field="workout_id")


class CompletionTracker:
    """
    Calendar-day completion ledger for one owner kind (habits or workouts).

    Writes keep at most one completion per (owner, calendar day). Reads are pure
    functions of the store contents.
    """

    def __init__(self, store: RecordRepo, ids: IdGenerator, ledger: Ledger) -> None:
        self._store = store
        self._ids = ids
        self._ledger = ledger
        # (owner id, day start) -> records removed by the last toggle-off of that day
        self._cleared: dict[tuple[str, float], list[Any]] = {}

    def _owner(self, entity_id: str) -> dict[str, str]:
        return {self._ledger.owner_field: entity_id}

    def _build(self, entity_id: str, completion_date: float, **extra: Any) -> Any:
        now = time.time()
        record_id = self._ids.new_id(self._ledger.id_prefix)
        if self._ledger.kind is EntityKind.HABIT_COMPLETION:
            return HabitCompletion(
                id=record_id,
                habit_id=entity_id,
                completion_date=completion_date,
                created_at=now,
            )
        return WorkoutCompletion(
            id=record_id,
            workout_id=entity_id,
            completion_date=completion_date,
            created_at=now,
            **extra,
        )

    # ---- reads ----

    def completions(self, entity_id: str) -> list[Any]:
        """All completions for the owner, newest first."""
        return self._store.query_range(
            self._ledger.kind,
            equals=self._owner(entity_id),
            order_by=("-completion_date",),
        )

    def completions_between(self, entity_id: str, start_ts: float, end_ts: float) -> list[Any]:
        return self._store.query_range(
            self._ledger.kind,
            equals=self._owner(entity_id),
            field="completion_date",
            start=start_ts,
            end=end_ts,
            order_by=("-completion_date",),
        )

    def _on_day(self, entity_id: str, day: date | datetime | float) -> list[Any]:
        start, end = day_bounds(day)
        return self._store.query_range(
            self._ledger.kind,
            equals=self._owner(entity_id),
            field="completion_date",
            start=start,
            end=end,
            order_by=("completion_date",),
        )

    def is_completed_on_day(self, entity_id: str, day: date | datetime | float) -> bool:
        start, end = day_bounds(day)
        rows = self._store.query_range(
            self._ledger.kind,
            equals=self._owner(entity_id),
            field="completion_date",
            start=start,
            end=end,
            limit=1,
        )
        return bool(rows)

    def last_completion(self, entity_id: str) -> Any | None:
        rows = self._store.query_range(
            self._ledger.kind,
            equals=self._owner(entity_id),
            order_by=("-completion_date",),
            limit=1,
        )
        return rows[0] if rows else None

    # ---- writes ----

    def add(self, entity_id: str, day: date | datetime | float) -> Any:
        """Mark the calendar day done, dated at its local start; an existing completion is returned as-is."""
        start, _ = day_bounds(day)
        self._cleared.pop((entity_id, start), None)
        existing = self._on_day(entity_id, day)
        if existing:
            return existing[0]
        record = self._build(entity_id, start)
        self._store.insert(self._ledger.kind, record)
        return record

    def add_exact(self, entity_id: str, completed_at: float | None = None, **extra: Any) -> Any:
        """
        Log a completion at an exact instant (workout sessions with details).

        The day keeps a single completion: a second log on the same day moves the
        existing record to the new instant and overwrites the details that were given.
        """
        ts = time.time() if completed_at is None else float(completed_at)
        start, _ = day_bounds(ts)
        self._cleared.pop((entity_id, start), None)

        existing = self._on_day(entity_id, ts)
        if not existing:
            record = self._build(entity_id, ts, **extra)
            self._store.insert(self._ledger.kind, record)
            return record

        current = existing[0]
        changes = {"completion_date": ts}
        changes.update({k: v for k, v in extra.items() if v is not None})
        self._store.update(self._ledger.kind, current.id, changes)
        logger.debug("Merged %s=%s into completion id=%s", self._ledger.owner_field, entity_id, current.id)
        return self._store.get(self._ledger.kind, current.id)

    def remove(self, entity_id: str, day: date | datetime | float) -> int:
        """Remove every completion on the calendar day; returns how many were removed."""
        start, end = day_bounds(day)
        self._cleared.pop((entity_id, start), None)
        return self._store.delete_range(
            self._ledger.kind,
            equals=self._owner(entity_id),
            field="completion_date",
            start=start,
            end=end,
        )

    def toggle(self, entity_id: str, day: date | datetime | float) -> bool:
        """
        Flip the completion state of a calendar day.

        Returns the new state (True = completed). Turning a day off remembers the
        removed records, so turning it back on restores them unchanged.
        """
        start, end = day_bounds(day)
        key = (entity_id, start)

        existing = self._on_day(entity_id, day)
        if existing:
            removed = self._store.delete_range(
                self._ledger.kind,
                equals=self._owner(entity_id),
                field="completion_date",
                start=start,
                end=end,
            )
            self._cleared[key] = existing
            logger.debug("Toggle off %s=%s removed=%s", self._ledger.owner_field, entity_id, removed)
            return False

        restored = self._cleared.pop(key, None)
        if restored:
            for record in restored:
                self._store.insert(self._ledger.kind, record)
        else:
            self._store.insert(self._ledger.kind, self._build(entity_id, start))
        logger.debug("Toggle on %s=%s restored=%s", self._ledger.owner_field, entity_id, len(restored or ()))
        return True

    # ---- aggregates ----

    def current_streak(self, entity_id: str, *, today: date | None = None) -> int:
        dates = [c.completion_date for c in self.completions(entity_id)]
        return current_streak(dates, today=today)

    def monthly_progress(self, entity_id: str, year: int, month: int) -> MonthlyProgress:
        start, end = month_bounds(year, month)
        rows = self.completions_between(entity_id, start, end)
        return monthly_progress((c.completion_date for c in rows), year, month)

    def frequency_in_window(
            self,
            entity_id: str,
            window_days: int = DEFAULT_WINDOW_DAYS,
            *,
            now_ts: float | None = None,
    ) -> int:
        now = time.time() if now_ts is None else float(now_ts)
        rows = self._store.query_range(
            self._ledger.kind,
            equals=self._owner(entity_id),
            field="completion_date",
            start=days_before(now, max(0, int(window_days))),
            end=now,
            end_inclusive=True,
        )
        return frequency_in_window((c.completion_date for c in rows), window_days, now_ts=now)
