# src/daybook/store/models.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_db(cls, raw: str | None) -> Priority:
        if not raw:
            return cls.MEDIUM
        try:
            return cls(raw)
        except ValueError:
            return cls.MEDIUM


class EntityKind(StrEnum):
    """Record kinds persisted by the RecordStore (value = table name)."""

    TASK = "tasks"
    NOTE = "notes"
    HABIT = "habits"
    HABIT_COMPLETION = "habit_completions"
    WORKOUT = "workouts"
    EXERCISE = "exercises"
    WORKOUT_COMPLETION = "workout_completions"


@dataclass(slots=True)
class Task:
    id: str
    title: str
    created_at: float
    modified_at: float
    priority: Priority = Priority.MEDIUM
    description: str | None = None
    due_date: float | None = None
    category: str | None = None
    completed: bool = False
    time: str | None = None  # display string, e.g. "09:30"


@dataclass(slots=True)
class Note:
    id: str
    title: str
    created_at: float
    modified_at: float
    content: str | None = None
    color: str = "#8B7355"
    pinned: bool = False
    images: list[str] = field(default_factory=list)


@dataclass(slots=True)
class Habit:
    id: str
    name: str
    created_at: float
    description: str | None = None
    color: str = "#10B981"
    icon: str = "check"
    target_frequency: int = 7  # completions per week


@dataclass(slots=True)
class HabitCompletion:
    id: str
    habit_id: str
    completion_date: float  # local start-of-day
    created_at: float


@dataclass(slots=True)
class Workout:
    id: str
    name: str
    duration: int  # minutes
    created_at: float
    description: str | None = None
    category: str = "Strength"
    estimated_calories: str = "0-0"
    icon: str = "dumbbell"
    color: str = "#EF4444"


@dataclass(slots=True)
class Exercise:
    id: str
    workout_id: str
    name: str
    sets: int = 3
    reps: int = 10
    weight: int = 0
    notes: str | None = None
    order: int = 0


@dataclass(slots=True)
class WorkoutCompletion:
    id: str
    workout_id: str
    completion_date: float
    created_at: float
    actual_duration: int | None = None
    actual_calories: int | None = None
    notes: str | None = None


RECORD_TYPES: dict[EntityKind, type] = {
    EntityKind.TASK: Task,
    EntityKind.NOTE: Note,
    EntityKind.HABIT: Habit,
    EntityKind.HABIT_COMPLETION: HabitCompletion,
    EntityKind.WORKOUT: Workout,
    EntityKind.EXERCISE: Exercise,
    EntityKind.WORKOUT_COMPLETION: WorkoutCompletion,
}
