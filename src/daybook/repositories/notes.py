# src/daybook/repositories/notes.py

from __future__ import annotations

import time
from typing import Any

from ..store.models import EntityKind, Note
from .base import Repository, require_text


class NoteRepository(Repository):
    kind = EntityKind.NOTE
    id_prefix = "note"

    async def get_all(self) -> list[Note]:
        """Pinned notes first, then newest."""
        return self._store.query_range(self.kind, order_by=("-pinned", "-created_at"))

    async def get_pinned(self) -> list[Note]:
        return self._store.query_range(self.kind, equals={"pinned": True}, order_by=("-modified_at",))

    async def create(
            self,
            *,
            title: str,
            content: str | None = None,
            color: str = "#8B7355",
            pinned: bool = False,
            images: list[str] | None = None,
    ) -> Note:
        now = time.time()
        note = Note(
            id=self._new_id(),
            title=require_text(title, "title"),
            created_at=now,
            modified_at=now,
            content=content,
            color=color,
            pinned=pinned,
            images=list(images or []),
        )
        self._store.insert(self.kind, note)
        return note

    async def update(self, note_id: str, **fields: Any) -> Note:
        if "title" in fields:
            fields["title"] = require_text(fields["title"], "title")
        fields["modified_at"] = time.time()
        return await self._update(note_id, fields)

    async def toggle_pin(self, note_id: str) -> Note:
        note = self._require(note_id)
        return await self.update(note_id, pinned=not note.pinned)

    async def search(self, query: str) -> list[Note]:
        q = (query or "").lower()
        return [
            n
            for n in await self.get_all()
            if q in n.title.lower() or q in (n.content or "").lower()
        ]

    async def get_count(self) -> int:
        return self._store.count(self.kind)
