"""Notification audit trail and outgoing message payloads."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from releaseradar.domain.model.entity import Entity, utcnow
from releaseradar.domain.model.enums import NotificationChannel

if TYPE_CHECKING:
    from datetime import date, datetime
    from uuid import UUID

    from releaseradar.domain.model.enums import NotificationKind, NotificationStatus, ReleaseType
    from releaseradar.domain.model.music import Artist, Release
    from releaseradar.domain.model.user import User


@dataclass(eq=False, kw_only=True)
class NotificationLog(Entity):
    """One delivery attempt. Append-only; pruned by retention cleanup."""

    user_id: UUID
    kind: NotificationKind
    status: NotificationStatus
    release_id: UUID | None = None
    channel: NotificationChannel = NotificationChannel.EMAIL
    sent_at: datetime = field(default_factory=utcnow)
    details: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ReleaseNotification:
    """Everything an immediate new-release email needs."""

    recipient: User
    release: Release
    artist: Artist


@dataclass(frozen=True, slots=True, kw_only=True)
class DigestEntry:
    release_name: str
    artist_name: str
    release_type: ReleaseType
    release_date: date
    spotify_url: str
    deezer_url: str | None = None
    image_url: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class Digest:
    recipient: User
    kind: NotificationKind
    period_start: datetime
    period_end: datetime
    entries: tuple[DigestEntry, ...]

    @property
    def total(self) -> int:
        return len(self.entries)
