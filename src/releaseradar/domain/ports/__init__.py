"""Domain ports (interfaces) for infrastructure adapters."""

from __future__ import annotations

from .catalogs import PrimaryCatalog, SecondaryCatalog
from .notifier import ReleaseNotifier
from .persistence import (
    ArtistRepository,
    FavoriteRepository,
    NotificationLogRepository,
    PreferenceRepository,
    ReleaseRepository,
    Repository,
    UserRepository,
)
from .unit_of_work import (
    ReleaseRadarRepositories,
    ReleaseRadarUnitOfWork,
    UnitOfWorkFactory,
)

__all__ = [
    "ArtistRepository",
    "FavoriteRepository",
    "NotificationLogRepository",
    "PreferenceRepository",
    "PrimaryCatalog",
    "ReleaseNotifier",
    "ReleaseRadarRepositories",
    "ReleaseRadarUnitOfWork",
    "ReleaseRepository",
    "Repository",
    "SecondaryCatalog",
    "UnitOfWorkFactory",
    "UserRepository",
]
