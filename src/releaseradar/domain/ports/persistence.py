"""Ports for persisting domain aggregates."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Collection
    from datetime import date, datetime
    from uuid import UUID

    from releaseradar.domain.model import (
        Artist,
        Favorite,
        Frequency,
        NotificationLog,
        NotificationPreference,
        Release,
        User,
    )


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent aggregate store."""

    def add(self, entity: TEntity) -> None: ...


@runtime_checkable
class UserRepository(Repository["User"], Protocol):
    def get(self, user_id: UUID) -> User | None: ...

    def get_by_email(self, email: str) -> User | None: ...

    def list_all(self) -> list[User]: ...


@runtime_checkable
class ArtistRepository(Repository["Artist"], Protocol):
    def get(self, artist_id: UUID) -> Artist | None: ...

    def get_by_spotify_id(self, spotify_id: str) -> Artist | None: ...

    def list_all(self) -> list[Artist]: ...


@runtime_checkable
class FavoriteRepository(Repository["Favorite"], Protocol):
    def find(self, *, user_id: UUID, artist_id: UUID) -> Favorite | None: ...

    def remove(self, favorite: Favorite) -> None: ...

    def list_for_user(self, user_id: UUID) -> list[Favorite]:
        """Newest favourites first."""
        ...

    def list_followers(self, artist_id: UUID) -> list[User]: ...


@runtime_checkable
class ReleaseRepository(Repository["Release"], Protocol):
    def get(self, release_id: UUID) -> Release | None: ...

    def exists(self, spotify_id: str) -> bool: ...

    def list_created_between(
        self, artist_ids: Collection[UUID], start: datetime, end: datetime
    ) -> list[Release]: ...

    def list_released_between(
        self,
        artist_ids: Collection[UUID],
        start: date | None = None,
        end: date | None = None,
        *,
        newest_first: bool = False,
    ) -> list[Release]: ...


@runtime_checkable
class PreferenceRepository(Repository["NotificationPreference"], Protocol):
    def get_for_user(self, user_id: UUID) -> NotificationPreference | None: ...

    def list_for_users(self, user_ids: Collection[UUID]) -> dict[UUID, NotificationPreference]: ...

    def list_emailable(self, *, frequency: Frequency | None = None) -> list[NotificationPreference]:
        """Preferences with email enabled, optionally restricted to one frequency."""
        ...


@runtime_checkable
class NotificationLogRepository(Repository["NotificationLog"], Protocol):
    def list_for_user(self, user_id: UUID, *, limit: int = 50) -> list[NotificationLog]: ...

    def delete_older_than(self, cutoff: datetime) -> int: ...
