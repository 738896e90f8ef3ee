# src/daybook/repositories/habits.py

from __future__ import annotations

import time
from datetime import date, datetime
from typing import Any

from ..core.dates import month_bounds
from ..core.ports import IdGenerator, RecordRepo
from ..errors import ValidationError
from ..store.models import EntityKind, Habit, HabitCompletion
from ..tracking.completions import HABIT_LEDGER, CompletionTracker
from ..tracking.progress import MonthlyProgress
from .base import Repository, require_int, require_text


def _target_frequency(value: int) -> int:
    n = require_int(value, "target_frequency")
    if not 1 <= n <= 7:
        raise ValidationError("target_frequency must be between 1 and 7 per week")
    return n


class HabitRepository(Repository):
    kind = EntityKind.HABIT
    id_prefix = "habit"

    def __init__(self, store: RecordRepo, ids: IdGenerator) -> None:
        super().__init__(store, ids)
        self.tracker = CompletionTracker(store, ids, HABIT_LEDGER)

    async def get_all(self) -> list[Habit]:
        return self._store.query_range(self.kind, order_by=("-created_at",))

    async def create(
            self,
            *,
            name: str,
            description: str | None = None,
            color: str = "#10B981",
            icon: str = "check",
            target_frequency: int = 7,
    ) -> Habit:
        habit = Habit(
            id=self._new_id(),
            name=require_text(name, "name"),
            created_at=time.time(),
            description=description,
            color=color,
            icon=icon,
            target_frequency=_target_frequency(target_frequency),
        )
        self._store.insert(self.kind, habit)
        return habit

    async def update(self, habit_id: str, **fields: Any) -> Habit:
        if "name" in fields:
            fields["name"] = require_text(fields["name"], "name")
        if "target_frequency" in fields:
            fields["target_frequency"] = _target_frequency(fields["target_frequency"])
        return await self._update(habit_id, fields)

    # ---- completions ----

    async def get_completions(self, habit_id: str) -> list[HabitCompletion]:
        return self.tracker.completions(habit_id)

    async def get_completions_by_month(self, habit_id: str, year: int, month: int) -> list[HabitCompletion]:
        start, end = month_bounds(year, month)
        return self.tracker.completions_between(habit_id, start, end)

    async def is_completed_on_date(self, habit_id: str, day: date | datetime | float) -> bool:
        return self.tracker.is_completed_on_day(habit_id, day)

    async def add_completion(self, habit_id: str, day: date | datetime | float) -> HabitCompletion:
        """Mark the day done; an existing completion for that day is returned as-is."""
        self._require(habit_id)
        return self.tracker.add(habit_id, day)

    async def remove_completion(self, habit_id: str, day: date | datetime | float) -> bool:
        return self.tracker.remove(habit_id, day) > 0

    async def toggle_completion(self, habit_id: str, day: date | datetime | float) -> bool:
        self._require(habit_id)
        return self.tracker.toggle(habit_id, day)

    # ---- aggregates ----

    async def get_current_streak(self, habit_id: str, *, today: date | None = None) -> int:
        return self.tracker.current_streak(habit_id, today=today)

    async def get_monthly_progress(self, habit_id: str, year: int, month: int) -> MonthlyProgress:
        return self.tracker.monthly_progress(habit_id, year, month)
