"""Calendar arithmetic for release windows, recency checks and digest periods."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Protocol

from releaseradar.domain.model.entity import utcnow

RELEASE_WINDOW_MONTHS = 6
RECENT_RELEASE_DAYS = 7


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def add_months(value: date, months: int) -> date:
    """Shift ``value`` by whole calendar months, clamping the day to the target month."""

    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


@dataclass(frozen=True, slots=True)
class ReleaseWindow:
    """Inclusive date range around ``today`` in which releases are synchronized."""

    start: date
    end: date

    @classmethod
    def around(cls, today: date, *, months: int = RELEASE_WINDOW_MONTHS) -> ReleaseWindow:
        return cls(start=add_months(today, -months), end=add_months(today, months))

    def __contains__(self, value: object) -> bool:
        if not isinstance(value, date):
            return False
        return self.start <= value <= self.end


def is_recent_release(
    release_date: date, today: date, *, days: int = RECENT_RELEASE_DAYS
) -> bool:
    """Released within the last ``days`` days, today included; future dates are not recent."""

    return today - timedelta(days=days) <= release_date <= today


def calendar_week(now: datetime) -> tuple[datetime, datetime]:
    """Return Monday 00:00 and Sunday 23:59:59.999999 of the week containing ``now``."""

    monday = now.date() - timedelta(days=now.weekday())
    start = datetime.combine(monday, time.min, tzinfo=now.tzinfo)
    end = datetime.combine(monday + timedelta(days=6), time.max, tzinfo=now.tzinfo)
    return start, end


def months_before(moment: datetime, months: int) -> datetime:
    """Same wall-clock time ``months`` calendar months earlier."""

    shifted = add_months(moment.date(), -months)
    return moment.replace(year=shifted.year, month=shifted.month, day=shifted.day)


def trailing_window(now: datetime, span: timedelta) -> tuple[datetime, datetime]:
    if span < timedelta(0):
        raise ValueError("Window span must be non-negative")
    return now - span, now


__all__ = [
    "Clock",
    "ReleaseWindow",
    "add_months",
    "calendar_week",
    "is_recent_release",
    "months_before",
    "trailing_window",
    "utcnow",
]
