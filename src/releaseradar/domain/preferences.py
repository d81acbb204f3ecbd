"""Notification preference reads/updates and the per-user delivery history."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from releaseradar.domain.errors import UserNotFoundError
from releaseradar.domain.model import NotificationPreference, NotificationSettings

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from releaseradar.domain.model import NotificationKind, NotificationStatus
    from releaseradar.domain.ports import ReleaseRadarUnitOfWork, UnitOfWorkFactory

DEFAULT_HISTORY_LIMIT = 50


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    sent_at: datetime
    kind: NotificationKind
    status: NotificationStatus
    release_name: str | None = None
    artist_name: str | None = None
    details: dict[str, Any] | None = None


def _load_or_create(uow: ReleaseRadarUnitOfWork, user_id: UUID) -> NotificationPreference:
    repos = uow.repositories
    if repos.users.get(user_id) is None:
        raise UserNotFoundError(user_id)
    preference = repos.preferences.get_for_user(user_id)
    if preference is None:
        preference = NotificationPreference(user_id=user_id)
        repos.preferences.add(preference)
    return preference


def get_preferences(uow_factory: UnitOfWorkFactory, user_id: UUID) -> NotificationSettings:
    """Return the user's settings, storing the defaults on first access."""

    with uow_factory() as uow:
        preference = _load_or_create(uow, user_id)
        uow.commit()
        return NotificationSettings.from_preference(preference)


def update_preferences(
    uow_factory: UnitOfWorkFactory,
    user_id: UUID,
    settings: NotificationSettings,
) -> NotificationSettings:
    with uow_factory() as uow:
        preference = _load_or_create(uow, user_id)
        settings.apply_to(preference)
        uow.commit()
        return NotificationSettings.from_preference(preference)


def notification_history(
    uow_factory: UnitOfWorkFactory,
    user_id: UUID,
    *,
    limit: int = DEFAULT_HISTORY_LIMIT,
) -> list[HistoryEntry]:
    """Most recent deliveries first, with release and artist names when known."""

    with uow_factory() as uow:
        repos = uow.repositories
        entries: list[HistoryEntry] = []
        for item in repos.notification_logs.list_for_user(user_id, limit=limit):
            release = repos.releases.get(item.release_id) if item.release_id else None
            entries.append(
                HistoryEntry(
                    sent_at=item.sent_at,
                    kind=item.kind,
                    status=item.status,
                    release_name=release.name if release else None,
                    artist_name=release.artist.name if release else None,
                    details=item.details,
                )
            )
        return entries
