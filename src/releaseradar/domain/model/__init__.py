"""Public domain model surface."""

from __future__ import annotations

from releaseradar.domain.model.catalog import (
    CatalogArtist,
    CatalogRelease,
    map_catalog_release_type,
    parse_release_date,
)
from releaseradar.domain.model.entity import Entity, new_id, utcnow
from releaseradar.domain.model.enums import (
    Frequency,
    NotificationChannel,
    NotificationKind,
    NotificationStatus,
    ReleaseType,
)
from releaseradar.domain.model.music import Artist, Release
from releaseradar.domain.model.notifications import (
    Digest,
    DigestEntry,
    NotificationLog,
    ReleaseNotification,
)
from releaseradar.domain.model.preferences import (
    NotificationPreference,
    NotificationSettings,
    NotificationTypes,
    should_notify,
)
from releaseradar.domain.model.user import DEFAULT_FAVORITE_CATEGORY, Favorite, User

__all__ = [
    "DEFAULT_FAVORITE_CATEGORY",
    "Artist",
    "CatalogArtist",
    "CatalogRelease",
    "Digest",
    "DigestEntry",
    "Entity",
    "Favorite",
    "Frequency",
    "NotificationChannel",
    "NotificationKind",
    "NotificationLog",
    "NotificationPreference",
    "NotificationSettings",
    "NotificationStatus",
    "NotificationTypes",
    "Release",
    "ReleaseNotification",
    "ReleaseType",
    "User",
    "map_catalog_release_type",
    "new_id",
    "parse_release_date",
    "should_notify",
    "utcnow",
]
