# tests/test_record_store.py

from __future__ import annotations

from pathlib import Path

import pytest

from daybook.errors import DuplicateRecordError, StoreFailure
from daybook.store.models import (
    EntityKind,
    Exercise,
    Habit,
    HabitCompletion,
    Note,
    Priority,
    Task,
    Workout,
    WorkoutCompletion,
)
from daybook.store.record_store import RecordStore


def _task(task_id: str, *, created_at: float = 1.0, **kw) -> Task:
    return Task(id=task_id, title=f"title {task_id}", created_at=created_at, modified_at=created_at, **kw)


def test_insert_get_update_delete(store: RecordStore) -> None:
    store.insert(EntityKind.TASK, _task("t1", priority=Priority.HIGH, completed=True))

    got = store.get(EntityKind.TASK, "t1")
    assert got is not None
    assert got.priority is Priority.HIGH
    assert got.completed is True

    assert store.update(EntityKind.TASK, "t1", {"title": "renamed", "completed": False}) is True
    got2 = store.get(EntityKind.TASK, "t1")
    assert got2.title == "renamed"
    assert got2.completed is False

    assert store.delete(EntityKind.TASK, "t1") is True
    assert store.get(EntityKind.TASK, "t1") is None


def test_update_missing_id_is_a_noop(store: RecordStore) -> None:
    assert store.update(EntityKind.TASK, "nope", {"title": "x"}) is False
    assert store.count(EntityKind.TASK) == 0


def test_delete_is_idempotent(store: RecordStore) -> None:
    store.insert(EntityKind.TASK, _task("t1"))
    assert store.delete(EntityKind.TASK, "t1") is True
    assert store.delete(EntityKind.TASK, "t1") is False


def test_insert_duplicate_id_fails(store: RecordStore) -> None:
    store.insert(EntityKind.TASK, _task("t1"))
    with pytest.raises(DuplicateRecordError):
        store.insert(EntityKind.TASK, _task("t1"))


def test_child_without_parent_is_a_store_failure(store: RecordStore) -> None:
    orphan = HabitCompletion(id="c1", habit_id="missing", completion_date=0.0, created_at=0.0)
    with pytest.raises(StoreFailure):
        store.insert(EntityKind.HABIT_COMPLETION, orphan)


def test_note_images_and_pinned_round_trip(store: RecordStore) -> None:
    store.insert(
        EntityKind.NOTE,
        Note(id="n1", title="Trip", created_at=1.0, modified_at=1.0, pinned=True, images=["a.png", "b.png"]),
    )
    note = store.get(EntityKind.NOTE, "n1")
    assert note.pinned is True
    assert note.images == ["a.png", "b.png"]


def test_query_range_filters_and_orders(store: RecordStore) -> None:
    store.insert(EntityKind.TASK, _task("a", created_at=1.0, due_date=100.0))
    store.insert(EntityKind.TASK, _task("b", created_at=2.0, due_date=200.0, completed=True))
    store.insert(EntityKind.TASK, _task("c", created_at=3.0, due_date=300.0))

    newest_first = store.query_range(EntityKind.TASK, order_by=("-created_at",))
    assert [t.id for t in newest_first] == ["c", "b", "a"]

    half_open = store.query_range(EntityKind.TASK, field="due_date", start=100.0, end=300.0, order_by=("due_date",))
    assert [t.id for t in half_open] == ["a", "b"]

    closed = store.query_range(
        EntityKind.TASK, field="due_date", start=100.0, end=300.0, end_inclusive=True, order_by=("due_date",)
    )
    assert [t.id for t in closed] == ["a", "b", "c"]

    pending = store.query_range(EntityKind.TASK, equals={"completed": False}, order_by=("created_at",))
    assert [t.id for t in pending] == ["a", "c"]

    assert len(store.query_range(EntityKind.TASK, limit=2)) == 2


def test_query_range_rejects_unknown_columns(store: RecordStore) -> None:
    with pytest.raises(ValueError):
        store.query_range(EntityKind.TASK, order_by=("title; DROP TABLE tasks",))
    with pytest.raises(ValueError):
        store.query_range(EntityKind.TASK, equals={"bogus": 1})


def test_exercise_order_column_is_quoted(store: RecordStore) -> None:
    store.insert(EntityKind.WORKOUT, Workout(id="w1", name="Legs", duration=45, created_at=1.0))
    store.insert(EntityKind.EXERCISE, Exercise(id="e2", workout_id="w1", name="Lunge", order=1))
    store.insert(EntityKind.EXERCISE, Exercise(id="e1", workout_id="w1", name="Squat", order=0))

    rows = store.query_range(EntityKind.EXERCISE, equals={"workout_id": "w1"}, order_by=("order",))
    assert [e.name for e in rows] == ["Squat", "Lunge"]


def test_deleting_parents_cascades_to_children(store: RecordStore) -> None:
    store.insert(EntityKind.HABIT, Habit(id="h1", name="Read", created_at=1.0))
    for i in range(3):
        store.insert(
            EntityKind.HABIT_COMPLETION,
            HabitCompletion(id=f"hc{i}", habit_id="h1", completion_date=float(i), created_at=1.0),
        )
    store.insert(EntityKind.WORKOUT, Workout(id="w1", name="Run", duration=30, created_at=1.0))
    store.insert(EntityKind.EXERCISE, Exercise(id="e1", workout_id="w1", name="Sprint"))
    store.insert(
        EntityKind.WORKOUT_COMPLETION,
        WorkoutCompletion(id="wc1", workout_id="w1", completion_date=1.0, created_at=1.0),
    )

    store.delete(EntityKind.HABIT, "h1")
    store.delete(EntityKind.WORKOUT, "w1")

    assert store.count(EntityKind.HABIT_COMPLETION) == 0
    assert store.count(EntityKind.EXERCISE) == 0
    assert store.count(EntityKind.WORKOUT_COMPLETION) == 0


def test_delete_range_requires_a_filter(store: RecordStore) -> None:
    with pytest.raises(ValueError):
        store.delete_range(EntityKind.TASK)


def test_schema_is_reopenable(tmp_path: Path) -> None:
    db = tmp_path / "again.sqlite3"
    first = RecordStore(db)
    first.insert(EntityKind.TASK, _task("t1"))

    second = RecordStore(db)
    assert second.count(EntityKind.TASK) == 1
