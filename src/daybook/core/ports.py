# src/daybook/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the tracking core and repositories.

Repositories depend on Protocols instead of the concrete SQLite store so tests can
swap in fakes and id generation stays deterministic.
"""

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from ..store.models import EntityKind


class RecordRepo(Protocol):
    def insert(self, kind: EntityKind, record: Any) -> None: ...
    def get(self, kind: EntityKind, record_id: str) -> Any | None: ...
    def update(self, kind: EntityKind, record_id: str, fields: Mapping[str, Any]) -> bool: ...
    def delete(self, kind: EntityKind, record_id: str) -> bool: ...
    def count(self, kind: EntityKind, *, equals: Mapping[str, Any] | None = None) -> int: ...

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
    ) -> list[Any]: ...

    def delete_range(
            self,
            kind: EntityKind,
            *,
            equals: Mapping[str, Any] | None = None,
            field: str | None = None,
            start: float | None = None,
            end: float | None = None,
    ) -> int: ...


class IdGenerator(Protocol):
    """Produces collision-resistant record ids, e.g. "habit_3f2a..."."""
    def new_id(self, prefix: str) -> str: ...
