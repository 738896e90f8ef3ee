# tests/test_streaks.py

from __future__ import annotations

from datetime import date, datetime, timedelta

from daybook.tracking.streaks import current_streak

TODAY = date(2024, 6, 15)


def _ago(n: int) -> date:
    return TODAY - timedelta(days=n)


def test_no_completions_is_zero() -> None:
    assert current_streak([], today=TODAY) == 0


def test_three_consecutive_days_ending_today() -> None:
    assert current_streak([_ago(0), _ago(1), _ago(2)], today=TODAY) == 3


def test_gap_of_two_days_breaks_the_streak() -> None:
    assert current_streak([_ago(0), _ago(3)], today=TODAY) == 1


def test_yesterday_still_counts_when_today_is_open() -> None:
    assert current_streak([_ago(1), _ago(2)], today=TODAY) == 2


def test_streak_is_zero_when_last_completion_is_two_days_old() -> None:
    assert current_streak([_ago(2), _ago(3)], today=TODAY) == 0


def test_unsorted_input_is_sorted_first() -> None:
    assert current_streak([_ago(2), _ago(0), _ago(5), _ago(1)], today=TODAY) == 3


def test_each_calendar_day_counts_once() -> None:
    morning = datetime(2024, 6, 15, 8, 0)
    evening = datetime(2024, 6, 15, 21, 30)
    assert current_streak([morning, evening, _ago(1)], today=TODAY) == 2


def test_timestamps_are_normalized_to_calendar_days() -> None:
    stamps = [
        datetime(2024, 6, 15, 23, 59).timestamp(),
        datetime(2024, 6, 14, 0, 1).timestamp(),
    ]
    assert current_streak(stamps, today=TODAY) == 2


def test_future_completions_do_not_break_the_walk() -> None:
    assert current_streak([TODAY + timedelta(days=1), _ago(0), _ago(1)], today=TODAY) == 2
