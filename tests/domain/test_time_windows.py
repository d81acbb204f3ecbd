from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

import pytest

from releaseradar.domain.time_windows import (
    ReleaseWindow,
    add_months,
    calendar_week,
    is_recent_release,
    months_before,
    trailing_window,
)


def test_add_months_clamps_to_month_end() -> None:
    assert add_months(date(2024, 8, 31), -6) == date(2024, 2, 29)
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2023, 11, 15), 3) == date(2024, 2, 15)


def test_release_window_is_six_months_each_way_inclusive() -> None:
    window = ReleaseWindow.around(date(2024, 6, 12))

    assert (window.start, window.end) == (date(2023, 12, 12), date(2024, 12, 12))
    assert date(2023, 12, 12) in window
    assert date(2024, 12, 12) in window
    assert date(2023, 12, 11) not in window
    assert "2024-06-12" not in window


def test_is_recent_release_covers_the_last_seven_days() -> None:
    today = date(2024, 6, 12)

    assert is_recent_release(today, today)
    assert is_recent_release(date(2024, 6, 5), today)
    assert not is_recent_release(date(2024, 6, 4), today)
    assert not is_recent_release(date(2024, 6, 13), today)


def test_calendar_week_runs_monday_to_sunday() -> None:
    start, end = calendar_week(datetime(2024, 6, 16, 23, 0, tzinfo=UTC))

    assert start == datetime(2024, 6, 10, tzinfo=UTC)
    assert end.date() == date(2024, 6, 16)
    assert end - start < timedelta(days=7)


def test_months_before_keeps_wall_clock_time() -> None:
    moment = datetime(2024, 5, 31, 8, 30, tzinfo=UTC)

    assert months_before(moment, 3) == datetime(2024, 2, 29, 8, 30, tzinfo=UTC)


def test_trailing_window() -> None:
    now = datetime(2024, 6, 12, tzinfo=UTC)

    assert trailing_window(now, timedelta(hours=24)) == (now - timedelta(days=1), now)
    with pytest.raises(ValueError, match="non-negative"):
        trailing_window(now, timedelta(hours=-1))
