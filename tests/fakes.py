# tests/fakes.py

from __future__ import annotations

from collections import defaultdict


class SequentialIdGenerator:
    """
    Deterministic IdGenerator for unit tests.

    Produces "<prefix>_1", "<prefix>_2", ... per prefix and records every id issued.
    """

    def __init__(self) -> None:
        self._counters: dict[str, int] = defaultdict(int)
        self.issued: list[str] = []

    def new_id(self, prefix: str) -> str:
        self._counters[prefix] += 1
        new = f"{prefix}_{self._counters[prefix]}"
        self.issued.append(new)
        return new


class FixedIdGenerator:
    """Always returns the same id (used to provoke identity collisions)."""

    def __init__(self, value: str = "fixed") -> None:
        self.value = value

    def new_id(self, prefix: str) -> str:
        return f"{prefix}_{self.value}"
