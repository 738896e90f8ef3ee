# src/daybook/tracking/statistics.py

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass

from ..store.models import Priority, Task


@dataclass(frozen=True, slots=True)
class TaskStatistics:
    total: int = 0
    completed: int = 0
    pending: int = 0
    high_priority: int = 0
    medium_priority: int = 0
    low_priority: int = 0
    completion_rate: float = 0.0


def task_statistics(tasks: Iterable[Task]) -> TaskStatistics:
    """Totals, priority breakdown and completion rate (0 for an empty task set)."""
    items = list(tasks)
    total = len(items)
    completed = sum(1 for t in items if t.completed)
    by_priority = Counter(Priority.from_db(t.priority) for t in items)

    return TaskStatistics(
        total=total,
        completed=completed,
        pending=total - completed,
        high_priority=by_priority[Priority.HIGH],
        medium_priority=by_priority[Priority.MEDIUM],
        low_priority=by_priority[Priority.LOW],
        completion_rate=(completed / total) * 100 if total > 0 else 0.0,
    )
