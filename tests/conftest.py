# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from daybook.core.state import AppState, build_state
from daybook.store.record_store import RecordStore

from .fakes import SequentialIdGenerator


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="daybook-test",
        log_level="DEBUG",
        console_enabled=False,
        data_dir=tmp_path,
        db_path=tmp_path / "productivity.sqlite3",
        frequency_window_days=30,
        points_per_completion=10,
    )


@pytest.fixture()
def ids() -> SequentialIdGenerator:
    return SequentialIdGenerator()


@pytest.fixture()
def store(settings: SimpleNamespace) -> RecordStore:
    """A real SQLite store per test; its behavior is part of what we test."""
    return RecordStore(settings.db_path)


@pytest.fixture()
def state(settings: SimpleNamespace, store: RecordStore, ids: SequentialIdGenerator) -> AppState:
    return build_state(settings, store, ids)
