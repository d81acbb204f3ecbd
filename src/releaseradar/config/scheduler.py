"""Scheduler cadence configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import time
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .env import optional_env_var
from .errors import ConfigurationError

if TYPE_CHECKING:
    from datetime import tzinfo

DEFAULT_TIMEZONE = "Europe/Paris"


def _parse_time(name: str, default: time) -> time:
    value = optional_env_var(name)
    if value is None:
        return default
    try:
        return time.fromisoformat(value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be HH:MM, got {value!r}") from exc


def _parse_weekday(name: str, default: int) -> int:
    value = optional_env_var(name)
    if value is None:
        return default
    if not value.isdigit() or not 0 <= int(value) <= 6:  # noqa: PLR2004
        raise ConfigurationError(f"{name} must be 0 (Monday) .. 6 (Sunday), got {value!r}")
    return int(value)


@dataclass(frozen=True, slots=True)
class SchedulerConfig:
    """Local wall-clock times at which the background jobs fire.

    Weekdays follow ``datetime.weekday()``: 0 is Monday, 6 is Sunday.
    """

    timezone: tzinfo
    sync_minute: int = 0
    daily_batch_at: time = field(default_factory=lambda: time(9, 0))
    weekly_batch_weekday: int = 0
    weekly_batch_at: time = field(default_factory=lambda: time(9, 0))
    weekly_summary_weekday: int = 4
    weekly_summary_at: time = field(default_factory=lambda: time(18, 0))
    cleanup_weekday: int = 6
    cleanup_at: time = field(default_factory=lambda: time(2, 0))


def get_scheduler_config() -> SchedulerConfig:
    zone_name = optional_env_var("SCHEDULER_TIMEZONE", DEFAULT_TIMEZONE) or DEFAULT_TIMEZONE
    try:
        zone = ZoneInfo(zone_name)
    except ZoneInfoNotFoundError as exc:
        raise ConfigurationError(f"Unknown SCHEDULER_TIMEZONE: {zone_name}") from exc
    return SchedulerConfig(
        timezone=zone,
        daily_batch_at=_parse_time("SCHEDULER_DAILY_AT", time(9, 0)),
        weekly_batch_weekday=_parse_weekday("SCHEDULER_WEEKLY_WEEKDAY", 0),
        weekly_batch_at=_parse_time("SCHEDULER_WEEKLY_AT", time(9, 0)),
        weekly_summary_weekday=_parse_weekday("SCHEDULER_SUMMARY_WEEKDAY", 4),
        weekly_summary_at=_parse_time("SCHEDULER_SUMMARY_AT", time(18, 0)),
    )
