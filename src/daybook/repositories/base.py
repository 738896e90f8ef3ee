# src/daybook/repositories/base.py

from __future__ import annotations

import logging
from typing import Any

from ..core.ports import IdGenerator, RecordRepo
from ..errors import NotFoundError, ValidationError
from ..store.models import EntityKind

logger = logging.getLogger(__name__)


def require_text(value: str | None, field: str) -> str:
    """Strip a required text field; blank values raise ValidationError."""
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required")
    return str(value).strip()


def require_int(value: Any, field: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a whole number, got {value!r}") from None


class Repository:
    """Shared CRUD plumbing: one record kind, an injected store and id generator."""

    kind: EntityKind
    id_prefix: str

    def __init__(self, store: RecordRepo, ids: IdGenerator) -> None:
        self._store = store
        self._ids = ids

    def _new_id(self) -> str:
        return self._ids.new_id(self.id_prefix)

    def _require(self, record_id: str) -> Any:
        record = self._store.get(self.kind, record_id)
        if record is None:
            raise NotFoundError(self.kind.value, record_id)
        return record

    async def get_by_id(self, record_id: str) -> Any | None:
        return self._store.get(self.kind, record_id)

    async def _update(self, record_id: str, fields: dict[str, Any]) -> Any:
        if not self._store.update(self.kind, record_id, fields):
            raise NotFoundError(self.kind.value, record_id)
        return self._require(record_id)

    async def delete(self, record_id: str, *, missing_ok: bool = True) -> bool:
        """
        Delete a record (children cascade in the store).

        Idempotent by default; with missing_ok=False a missing id raises NotFoundError.
        """
        removed = self._store.delete(self.kind, record_id)
        if not removed and not missing_ok:
            raise NotFoundError(self.kind.value, record_id)
        if removed:
            logger.info("Deleted %s id=%s", self.kind.value, record_id)
        return removed
