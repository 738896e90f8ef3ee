# tests/test_statistics.py

from __future__ import annotations

import pytest

from daybook.core.state import AppState
from daybook.store.models import Priority, Task
from daybook.tracking.statistics import TaskStatistics, task_statistics


def _task(i: int, priority: Priority, completed: bool = False) -> Task:
    return Task(id=f"t{i}", title=f"task {i}", created_at=0.0, modified_at=0.0, priority=priority, completed=completed)


def test_empty_task_set() -> None:
    assert task_statistics([]) == TaskStatistics(
        total=0,
        completed=0,
        pending=0,
        high_priority=0,
        medium_priority=0,
        low_priority=0,
        completion_rate=0,
    )


def test_priority_breakdown_and_rate() -> None:
    tasks = [
        _task(1, Priority.HIGH, completed=True),
        _task(2, Priority.HIGH),
        _task(3, Priority.MEDIUM),
        _task(4, Priority.LOW),
    ]
    s = task_statistics(tasks)
    assert s.total == 4
    assert s.completed == 1
    assert s.pending == 3
    assert s.high_priority == 2
    assert s.medium_priority == 1
    assert s.low_priority == 1
    assert s.completion_rate == 25
    assert s.high_priority + s.medium_priority + s.low_priority == s.total


@pytest.mark.asyncio
async def test_repository_statistics_reads_the_store(state: AppState) -> None:
    t1 = await state.tasks.create(title="Pay rent", priority="high")
    await state.tasks.create(title="Call plumber", priority="high")
    await state.tasks.create(title="Buy milk", priority="medium")
    await state.tasks.create(title="Water plants", priority="low")
    await state.tasks.toggle_complete(t1.id)

    s = await state.tasks.get_statistics()
    assert s.completion_rate == 25
    assert s.high_priority == 2
    assert s.pending == 3
