# tests/test_logging_setup.py

from __future__ import annotations

import logging

from daybook.logging_setup import _ConsoleNoiseFilter


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


def test_console_filter_hides_store_chatter_and_third_party_noise() -> None:
    f = _ConsoleNoiseFilter()

    assert f.filter(_record("daybook.cli.commands", logging.INFO))
    assert not f.filter(_record("daybook.store.record_store", logging.DEBUG))
    assert f.filter(_record("daybook.store.record_store", logging.WARNING))
    assert not f.filter(_record("py.warnings", logging.WARNING))
    assert not f.filter(_record("asyncio", logging.WARNING))
    assert f.filter(_record("asyncio", logging.ERROR))
