# src/daybook/repositories/tasks.py

from __future__ import annotations

import time
from typing import Any

from ..errors import ValidationError
from ..store.models import EntityKind, Priority, Task
from ..tracking.statistics import TaskStatistics, task_statistics
from .base import Repository, require_text


def _priority(value: Priority | str) -> Priority:
    try:
        return Priority(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"unknown priority: {value!r}") from None


class TaskRepository(Repository):
    kind = EntityKind.TASK
    id_prefix = "task"

    async def get_all(self) -> list[Task]:
        return self._store.query_range(self.kind, order_by=("-created_at",))

    async def get_by_date_range(self, start_ts: float, end_ts: float) -> list[Task]:
        """Tasks due within [start_ts, end_ts], earliest first."""
        return self._store.query_range(
            self.kind,
            field="due_date",
            start=start_ts,
            end=end_ts,
            end_inclusive=True,
            order_by=("due_date",),
        )

    async def get_by_priority(self, priority: Priority | str) -> list[Task]:
        return self._store.query_range(
            self.kind,
            equals={"priority": _priority(priority)},
            order_by=("-created_at",),
        )

    async def get_completed(self) -> list[Task]:
        return self._store.query_range(
            self.kind, equals={"completed": True}, order_by=("-modified_at",)
        )

    async def get_pending(self) -> list[Task]:
        return self._store.query_range(self.kind, equals={"completed": False}, order_by=("due_date",))

    async def create(
            self,
            *,
            title: str,
            priority: Priority | str = Priority.MEDIUM,
            description: str | None = None,
            due_date: float | None = None,
            category: str | None = None,
            time_label: str | None = None,
            completed: bool = False,
    ) -> Task:
        now = time.time()
        task = Task(
            id=self._new_id(),
            title=require_text(title, "title"),
            created_at=now,
            modified_at=now,
            priority=_priority(priority),
            description=description,
            due_date=due_date,
            category=category,
            completed=completed,
            time=time_label,
        )
        self._store.insert(self.kind, task)
        return task

    async def update(self, task_id: str, **fields: Any) -> Task:
        if "title" in fields:
            fields["title"] = require_text(fields["title"], "title")
        if "priority" in fields:
            fields["priority"] = _priority(fields["priority"])
        fields["modified_at"] = time.time()
        return await self._update(task_id, fields)

    async def toggle_complete(self, task_id: str) -> Task:
        task = self._require(task_id)
        return await self.update(task_id, completed=not task.completed)

    async def get_statistics(self) -> TaskStatistics:
        return task_statistics(await self.get_all())

    async def search(self, query: str) -> list[Task]:
        q = (query or "").lower()
        return [
            t
            for t in await self.get_all()
            if q in t.title.lower()
            or q in (t.description or "").lower()
            or q in (t.category or "").lower()
        ]
