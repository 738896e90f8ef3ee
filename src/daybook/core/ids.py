# src/daybook/core/ids.py

from __future__ import annotations

import uuid


class UuidIdGenerator:
    """Default IdGenerator: "<prefix>_<uuid4 hex>"."""

    def new_id(self, prefix: str) -> str:
        return f"{prefix}_{uuid.uuid4().hex}"
