# src/daybook/repositories/workouts.py

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from ..core.ports import IdGenerator, RecordRepo
from ..errors import NotFoundError, ValidationError
from ..store.models import EntityKind, Exercise, Workout, WorkoutCompletion
from ..tracking.completions import WORKOUT_LEDGER, CompletionTracker
from ..tracking.progress import DEFAULT_WINDOW_DAYS, frequency_badge
from .base import Repository, require_int, require_text

POINTS_PER_COMPLETION = 10


@dataclass(slots=True)
class WorkoutDetails:
    """A workout plus everything the workout list shows next to it."""

    workout: Workout
    exercises: list[Exercise] = field(default_factory=list)
    total_completions: int = 0
    last_completion: WorkoutCompletion | None = None
    frequency: int = 0
    badge: str | None = None
    total_weight: int = 0
    total_reps: int = 0


def _positive(value: int, name: str) -> int:
    n = require_int(value, name)
    if n <= 0:
        raise ValidationError(f"{name} must be positive")
    return n


class WorkoutRepository(Repository):
    kind = EntityKind.WORKOUT
    id_prefix = "workout"

    def __init__(
            self,
            store: RecordRepo,
            ids: IdGenerator,
            *,
            window_days: int = DEFAULT_WINDOW_DAYS,
            points_per_completion: int = POINTS_PER_COMPLETION,
    ) -> None:
        super().__init__(store, ids)
        self.tracker = CompletionTracker(store, ids, WORKOUT_LEDGER)
        self._window_days = int(window_days)
        self._points = int(points_per_completion)

    @property
    def window_days(self) -> int:
        return self._window_days

    async def get_all(self) -> list[Workout]:
        return self._store.query_range(self.kind, order_by=("-created_at",))

    async def create(
            self,
            *,
            name: str,
            duration: int,
            description: str | None = None,
            category: str = "Strength",
            estimated_calories: str = "0-0",
            icon: str = "dumbbell",
            color: str = "#EF4444",
    ) -> Workout:
        workout = Workout(
            id=self._new_id(),
            name=require_text(name, "name"),
            duration=_positive(duration, "duration"),
            created_at=time.time(),
            description=description,
            category=category,
            estimated_calories=estimated_calories,
            icon=icon,
            color=color,
        )
        self._store.insert(self.kind, workout)
        return workout

    async def update(self, workout_id: str, **fields: Any) -> Workout:
        if "name" in fields:
            fields["name"] = require_text(fields["name"], "name")
        if "duration" in fields:
            fields["duration"] = _positive(fields["duration"], "duration")
        return await self._update(workout_id, fields)

    # ---- exercises ----

    async def get_exercises(self, workout_id: str) -> list[Exercise]:
        return self._store.query_range(
            EntityKind.EXERCISE, equals={"workout_id": workout_id}, order_by=("order",)
        )

    async def add_exercise(
            self,
            workout_id: str,
            *,
            name: str,
            sets: int = 3,
            reps: int = 10,
            weight: int = 0,
            notes: str | None = None,
            order: int | None = None,
    ) -> Exercise:
        self._require(workout_id)
        if order is None:
            order = self._store.count(EntityKind.EXERCISE, equals={"workout_id": workout_id})
        exercise = Exercise(
            id=self._ids.new_id("exercise"),
            workout_id=workout_id,
            name=require_text(name, "name"),
            sets=require_int(sets, "sets"),
            reps=require_int(reps, "reps"),
            weight=require_int(weight, "weight"),
            notes=notes,
            order=require_int(order, "order"),
        )
        self._store.insert(EntityKind.EXERCISE, exercise)
        return exercise

    async def update_exercise(self, exercise_id: str, **fields: Any) -> Exercise:
        if "name" in fields:
            fields["name"] = require_text(fields["name"], "name")
        if not self._store.update(EntityKind.EXERCISE, exercise_id, fields):
            raise NotFoundError(EntityKind.EXERCISE.value, exercise_id)
        return self._store.get(EntityKind.EXERCISE, exercise_id)

    async def delete_exercise(self, exercise_id: str) -> bool:
        return self._store.delete(EntityKind.EXERCISE, exercise_id)

    # ---- completions ----

    async def get_completions(self, workout_id: str) -> list[WorkoutCompletion]:
        return self.tracker.completions(workout_id)

    async def add_completion(
            self,
            workout_id: str,
            *,
            completed_at: float | None = None,
            actual_duration: int | None = None,
            actual_calories: int | None = None,
            notes: str | None = None,
    ) -> WorkoutCompletion:
        """
        Log a session at an exact instant (defaults to now).

        A day holds one session: logging again on the same day updates that
        session with the new instant and whichever details are given.
        """
        self._require(workout_id)
        return self.tracker.add_exact(
            workout_id,
            completed_at,
            actual_duration=actual_duration,
            actual_calories=actual_calories,
            notes=notes,
        )

    async def toggle_completion(self, workout_id: str, day: date | datetime | float) -> bool:
        self._require(workout_id)
        return self.tracker.toggle(workout_id, day)

    async def get_last_completion(self, workout_id: str) -> WorkoutCompletion | None:
        return self.tracker.last_completion(workout_id)

    # ---- aggregates ----

    async def get_frequency(self, workout_id: str, *, now_ts: float | None = None) -> int:
        return self.tracker.frequency_in_window(workout_id, self._window_days, now_ts=now_ts)

    async def get_current_streak(self, workout_id: str, *, today: date | None = None) -> int:
        return self.tracker.current_streak(workout_id, today=today)

    async def get_total_points(self, workout_id: str) -> int:
        return len(self.tracker.completions(workout_id)) * self._points

    async def get_workout_with_details(
            self, workout_id: str, *, now_ts: float | None = None
    ) -> WorkoutDetails | None:
        workout = self._store.get(self.kind, workout_id)
        if workout is None:
            return None

        exercises = await self.get_exercises(workout_id)
        completions = self.tracker.completions(workout_id)
        frequency = await self.get_frequency(workout_id, now_ts=now_ts)

        return WorkoutDetails(
            workout=workout,
            exercises=exercises,
            total_completions=len(completions),
            last_completion=completions[0] if completions else None,
            frequency=frequency,
            badge=frequency_badge(frequency),
            total_weight=sum((ex.weight or 0) * ex.sets * ex.reps for ex in exercises),
            total_reps=sum(ex.sets * ex.reps for ex in exercises),
        )
