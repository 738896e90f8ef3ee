# src/daybook/errors.py

"""
Error taxonomy shared by the store, repositories and the console front end.

- NotFoundError: an operation referenced an id that is not in the store.
- ValidationError: a required field is empty (checked by callers before the store).
- StoreFailure: the underlying SQLite operation failed; propagated unchanged.
"""

from __future__ import annotations


class DaybookError(Exception):
    """Base class for all daybook errors."""


class NotFoundError(DaybookError):
    def __init__(self, kind: str, record_id: str) -> None:
        super().__init__(f"{kind} {record_id} not found")
        self.kind = kind
        self.record_id = record_id


class ValidationError(DaybookError, ValueError):
    pass


class StoreFailure(DaybookError):
    pass


class DuplicateRecordError(StoreFailure):
    pass
