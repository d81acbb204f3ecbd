"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ReleaseType(StrEnum):
    ALBUM = "ALBUM"
    SINGLE = "SINGLE"
    EP = "EP"


class Frequency(StrEnum):
    IMMEDIATE = "immediate"
    DAILY = "daily"
    WEEKLY = "weekly"


class NotificationKind(StrEnum):
    RELEASE = "release"
    DAILY_DIGEST = "daily_digest"
    WEEKLY_DIGEST = "weekly_digest"
    WEEKLY_SUMMARY = "weekly_summary"


class NotificationChannel(StrEnum):
    EMAIL = "email"


class NotificationStatus(StrEnum):
    SENT = "sent"
    FAILED = "failed"
