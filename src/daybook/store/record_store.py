# src/daybook/store/record_store.py

from __future__ import annotations

import contextlib
import dataclasses
import json
import logging
import sqlite3
from collections.abc import Iterator, Mapping, Sequence
from enum import Enum
from pathlib import Path
from typing import Any

from ..errors import DuplicateRecordError, StoreFailure
from .models import RECORD_TYPES, EntityKind, Priority

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS tasks (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    description TEXT,
    priority TEXT NOT NULL DEFAULT 'medium',
    due_date REAL,
    category TEXT,
    completed INTEGER NOT NULL DEFAULT 0,
    time TEXT,
    created_at REAL NOT NULL,
    modified_at REAL NOT NULL
);

CREATE TABLE IF NOT EXISTS notes (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    content TEXT,
    color TEXT NOT NULL DEFAULT '#8B7355',
    pinned INTEGER NOT NULL DEFAULT 0,
    images TEXT,
    created_at REAL NOT NULL,
    modified_at REAL NOT NULL
);

CREATE TABLE IF NOT EXISTS habits (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    description TEXT,
    color TEXT NOT NULL DEFAULT '#10B981',
    icon TEXT DEFAULT 'check',
    target_frequency INTEGER NOT NULL DEFAULT 7,
    created_at REAL NOT NULL
);

CREATE TABLE IF NOT EXISTS habit_completions (
    id TEXT PRIMARY KEY,
    habit_id TEXT NOT NULL,
    completion_date REAL NOT NULL,
    created_at REAL NOT NULL,
    FOREIGN KEY (habit_id) REFERENCES habits(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS workouts (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    description TEXT,
    category TEXT DEFAULT 'Strength',
    duration INTEGER NOT NULL,
    estimated_calories TEXT DEFAULT '0-0',
    icon TEXT DEFAULT 'dumbbell',
    color TEXT NOT NULL DEFAULT '#EF4444',
    created_at REAL NOT NULL
);

CREATE TABLE IF NOT EXISTS exercises (
    id TEXT PRIMARY KEY,
    workout_id TEXT NOT NULL,
    name TEXT NOT NULL,
    sets INTEGER NOT NULL DEFAULT 3,
    reps INTEGER NOT NULL DEFAULT 10,
    weight INTEGER DEFAULT 0,
    notes TEXT,
    "order" INTEGER NOT NULL DEFAULT 0,
    FOREIGN KEY (workout_id) REFERENCES workouts(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS workout_completions (
    id TEXT PRIMARY KEY,
    workout_id TEXT NOT NULL,
    completion_date REAL NOT NULL,
    actual_duration INTEGER,
    actual_calories INTEGER,
    notes TEXT,
    created_at REAL NOT NULL,
    FOREIGN KEY (workout_id) REFERENCES workouts(id) ON DELETE CASCADE
);

CREATE INDEX IF NOT EXISTS idx_tasks_due_date ON tasks(due_date);
CREATE INDEX IF NOT EXISTS idx_tasks_priority ON tasks(priority);
CREATE INDEX IF NOT EXISTS idx_tasks_completed ON tasks(completed);
CREATE INDEX IF NOT EXISTS idx_notes_pinned ON notes(pinned);
CREATE INDEX IF NOT EXISTS idx_habit_completions_owner_date
    ON habit_completions(habit_id, completion_date);
CREATE INDEX IF NOT EXISTS idx_workout_completions_owner_date
    ON workout_completions(workout_id, completion_date);
"""

_BOOL_COLUMNS = {"completed", "pinned"}
_JSON_LIST_COLUMNS = {"images"}


def _columns(kind: EntityKind) -> tuple[str, ...]:
    return tuple(f.name for f in dataclasses.fields(RECORD_TYPES[kind]))


def _q(column: str) -> str:
    return f'"{column}"'


class RecordStore:
    """
    SQLite record store for every entity kind.

    - each method opens its own SQLite connection (foreign keys enabled per connection)
    - child rows (completions, exercises) are removed by ON DELETE CASCADE
    - every sqlite3.Error surfaces as StoreFailure
    """

    def __init__(self, db_path: str | Path = "daybook.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = sum(self.count(k) for k in EntityKind)
        except StoreFailure:
            total = -1
        logger.info("RecordStore ready db=%s records=%s", self._db_path, total)

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        conn.execute("PRAGMA foreign_keys=ON")
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    @contextlib.contextmanager
    def _session(self, action: str) -> Iterator[sqlite3.Connection]:
        conn: sqlite3.Connection | None = None
        try:
            conn = self._get_conn()
            yield conn
            conn.commit()
        except sqlite3.IntegrityError as e:
            if "UNIQUE" in str(e):
                raise DuplicateRecordError(f"{action}: {e}") from e
            raise StoreFailure(f"{action}: {e}") from e
        except sqlite3.Error as e:
            raise StoreFailure(f"{action}: {e}") from e
        finally:
            if conn is not None:
                conn.close()

    def _ensure_schema(self) -> None:
        with self._session("ensure schema") as conn:
            conn.executescript(_SCHEMA)

    @staticmethod
    def _encode(column: str, value: Any) -> Any:
        if column in _JSON_LIST_COLUMNS:
            return json.dumps(list(value or []), ensure_ascii=False)
        if isinstance(value, bool):
            return int(value)
        if isinstance(value, Enum):
            return value.value
        return value

    @staticmethod
    def _decode(column: str, value: Any) -> Any:
        if column in _BOOL_COLUMNS:
            return bool(value)
        if column in _JSON_LIST_COLUMNS:
            if not value:
                return []
            try:
                val = json.loads(value)
            except ValueError:
                return []
            return [str(v) for v in val] if isinstance(val, list) else []
        if column == "priority":
            return Priority.from_db(value)
        return value

    def _row_to_record(self, kind: EntityKind, row: sqlite3.Row) -> Any:
        kwargs = {c: self._decode(c, row[c]) for c in _columns(kind) if c in row.keys()}
        return RECORD_TYPES[kind](**kwargs)

    @staticmethod
    def _check_column(kind: EntityKind, column: str) -> str:
        if column not in _columns(kind):
            raise ValueError(f"unknown column {column!r} for {kind.value}")
        return column

    def _where(
        self,
        kind: EntityKind,
        *,
        equals: Mapping[str, Any] | None,
        field: str | None,
        start: float | None,
        end: float | None,
        end_inclusive: bool,
    ) -> tuple[str, list[Any]]:
        clauses: list[str] = []
        params: list[Any] = []

        for col, val in (equals or {}).items():
            clauses.append(f"{_q(self._check_column(kind, col))} = ?")
            params.append(self._encode(col, val))

        if field is not None:
            col = _q(self._check_column(kind, field))
            if start is not None:
                clauses.append(f"{col} >= ?")
                params.append(float(start))
            if end is not None:
                clauses.append(f"{col} {'<=' if end_inclusive else '<'} ?")
                params.append(float(end))

        sql = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        return sql, params

    # ---- public API ----

    def count(self, kind: EntityKind, *, equals: Mapping[str, Any] | None = None) -> int:
        where, params = self._where(
            kind, equals=equals, field=None, start=None, end=None, end_inclusive=False
        )
        with self._session(f"count {kind.value}") as conn:
            (n,) = conn.execute(f"SELECT COUNT(*) FROM {kind.value}{where}", params).fetchone()
            return int(n)

    def insert(self, kind: EntityKind, record: Any) -> None:
        """Insert a record; raises DuplicateRecordError if the id already exists."""
        cols = _columns(kind)
        values = [self._encode(c, getattr(record, c)) for c in cols]
        placeholders = ", ".join("?" for _ in cols)
        sql = f"INSERT INTO {kind.value} ({', '.join(_q(c) for c in cols)}) VALUES ({placeholders})"

        with self._session(f"insert {kind.value}") as conn:
            conn.execute(sql, values)
        logger.debug("Inserted %s id=%s", kind.value, record.id)

    def get(self, kind: EntityKind, record_id: str) -> Any | None:
        with self._session(f"get {kind.value}") as conn:
            row = conn.execute(
                f"SELECT * FROM {kind.value} WHERE id = ? LIMIT 1", (record_id,)
            ).fetchone()
            return self._row_to_record(kind, row) if row else None

    def update(self, kind: EntityKind, record_id: str, fields: Mapping[str, Any]) -> bool:
        """
        Apply a partial update.

        Returns False when no row has this id (no-op); callers decide whether that
        is an error.
        """
        changes = {k: v for k, v in fields.items() if k != "id"}
        if not changes:
            return self.get(kind, record_id) is not None

        assignments = ", ".join(f"{_q(self._check_column(kind, c))} = ?" for c in changes)
        params = [self._encode(c, v) for c, v in changes.items()]
        params.append(record_id)

        with self._session(f"update {kind.value}") as conn:
            cur = conn.execute(f"UPDATE {kind.value} SET {assignments} WHERE id = ?", params)
            found = cur.rowcount == 1
        logger.debug("Updated %s id=%s found=%s fields=%s", kind.value, record_id, found, sorted(changes))
        return found

    def delete(self, kind: EntityKind, record_id: str) -> bool:
        """Idempotent delete; returns True if a row was removed."""
        with self._session(f"delete {kind.value}") as conn:
            cur = conn.execute(f"DELETE FROM {kind.value} WHERE id = ?", (record_id,))
            removed = cur.rowcount > 0
        logger.debug("Deleted %s id=%s removed=%s", kind.value, record_id, removed)
        return removed

    def query_range(
        self,
        kind: EntityKind,
        *,
        equals: Mapping[str, Any] | None = None,
        field: str | None = None,
        start: float | None = None,
        end: float | None = None,
        end_inclusive: bool = False,
        order_by: Sequence[str] = (),
        limit: int | None = None,
    ) -> list[Any]:
        """
        Filtered read.

        - equals: column -> value equality filters
        - field/start/end: range on one column, [start, end) unless end_inclusive
        - order_by: column names, "-" prefix for descending
        """
        where, params = self._where(
            kind, equals=equals, field=field, start=start, end=end, end_inclusive=end_inclusive
        )

        order_parts: list[str] = []
        for item in order_by:
            desc = item.startswith("-")
            col = self._check_column(kind, item.lstrip("-"))
            order_parts.append(f"{_q(col)} {'DESC' if desc else 'ASC'}")
        order = f" ORDER BY {', '.join(order_parts)}" if order_parts else ""

        sql = f"SELECT * FROM {kind.value}{where}{order}"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(int(limit))

        with self._session(f"query {kind.value}") as conn:
            rows = conn.execute(sql, params).fetchall()
            return [self._row_to_record(kind, r) for r in rows]

    def delete_range(
        self,
        kind: EntityKind,
        *,
        equals: Mapping[str, Any] | None = None,
        field: str | None = None,
        start: float | None = None,
        end: float | None = None,
    ) -> int:
        """Delete every row matching the filter; returns the number removed."""
        where, params = self._where(
            kind, equals=equals, field=field, start=start, end=end, end_inclusive=False
        )
        if not where:
            raise ValueError("delete_range requires a filter")

        with self._session(f"delete range {kind.value}") as conn:
            cur = conn.execute(f"DELETE FROM {kind.value}{where}", params)
            removed = int(cur.rowcount)
        logger.debug("Deleted %s rows from %s", removed, kind.value)
        return removed
