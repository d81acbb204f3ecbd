"""SQLAlchemy adapter package for releaseradar."""

from __future__ import annotations

from .mappings import create_all_tables, mapper_registry, start_mappers
from .repositories import (
    SqlAlchemyArtistRepository,
    SqlAlchemyFavoriteRepository,
    SqlAlchemyNotificationLogRepository,
    SqlAlchemyPreferenceRepository,
    SqlAlchemyReleaseRepository,
    SqlAlchemyUserRepository,
)
from .unit_of_work import SqlAlchemyUnitOfWork, StartupError, is_started, shutdown, startup

__all__ = [
    "SqlAlchemyArtistRepository",
    "SqlAlchemyFavoriteRepository",
    "SqlAlchemyNotificationLogRepository",
    "SqlAlchemyPreferenceRepository",
    "SqlAlchemyReleaseRepository",
    "SqlAlchemyUnitOfWork",
    "SqlAlchemyUserRepository",
    "StartupError",
    "create_all_tables",
    "is_started",
    "mapper_registry",
    "shutdown",
    "start_mappers",
    "startup",
]
