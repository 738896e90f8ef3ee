# src/daybook/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..repositories.habits import HabitRepository
from ..repositories.notes import NoteRepository
from ..repositories.tasks import TaskRepository
from ..repositories.workouts import WorkoutRepository
from .ports import IdGenerator, RecordRepo


@dataclass
class AppState:
    """Everything a front end needs, wired once in the composition root."""

    settings: Any
    store: RecordRepo
    tasks: TaskRepository
    notes: NoteRepository
    habits: HabitRepository
    workouts: WorkoutRepository


def build_state(settings: Any, store: RecordRepo, ids: IdGenerator) -> AppState:
    return AppState(
        settings=settings,
        store=store,
        tasks=TaskRepository(store, ids),
        notes=NoteRepository(store, ids),
        habits=HabitRepository(store, ids),
        workouts=WorkoutRepository(
            store,
            ids,
            window_days=int(getattr(settings, "frequency_window_days", 30)),
            points_per_completion=int(getattr(settings, "points_per_completion", 10)),
        ),
    )
