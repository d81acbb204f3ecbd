"""Seeding helpers for tests that run against the SQLite unit of work."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING

from releaseradar.domain.model import (
    Artist,
    Favorite,
    Frequency,
    NotificationPreference,
    NotificationTypes,
    Release,
    ReleaseType,
    User,
)
from releaseradar.domain.users import create_user

if TYPE_CHECKING:
    from releaseradar.domain.ports import UnitOfWorkFactory


def seed_user(
    uow_factory: UnitOfWorkFactory,
    email: str = "fan@example.com",
    *,
    username: str | None = None,
    first_name: str | None = None,
) -> User:
    return create_user(
        uow_factory,
        email=email,
        username=username or email.split("@")[0],
        first_name=first_name,
    )


def seed_artist(
    uow_factory: UnitOfWorkFactory,
    spotify_id: str = "sp-artist-1",
    name: str = "Example Artist",
    *,
    deezer_id: str | None = None,
    last_refreshed_at: datetime | None = None,
) -> Artist:
    artist = Artist(
        spotify_id=spotify_id,
        name=name,
        deezer_id=deezer_id,
        last_refreshed_at=last_refreshed_at,
    )
    with uow_factory() as uow:
        uow.repositories.artists.add(artist)
        uow.commit()
    return artist


def follow(
    uow_factory: UnitOfWorkFactory,
    user: User,
    artist: Artist,
    *,
    added_at: datetime | None = None,
) -> Favorite:
    with uow_factory() as uow:
        repos = uow.repositories
        stored_user = repos.users.get(user.id)
        stored_artist = repos.artists.get(artist.id)
        assert stored_user is not None
        assert stored_artist is not None
        favorite = Favorite(user=stored_user, artist=stored_artist)
        if added_at is not None:
            favorite.added_at = added_at
        repos.favorites.add(favorite)
        uow.commit()
    return favorite


def seed_release(
    uow_factory: UnitOfWorkFactory,
    artist: Artist,
    spotify_id: str,
    *,
    name: str | None = None,
    release_date: date,
    created_at: datetime,
    release_type: ReleaseType = ReleaseType.ALBUM,
) -> Release:
    with uow_factory() as uow:
        stored_artist = uow.repositories.artists.get(artist.id)
        assert stored_artist is not None
        release = Release(
            spotify_id=spotify_id,
            name=name or f"Release {spotify_id}",
            release_type=release_type,
            release_date=release_date,
            spotify_url=f"https://open.spotify.com/album/{spotify_id}",
            artist=stored_artist,
            created_at=created_at,
        )
        uow.repositories.releases.add(release)
        uow.commit()
    return release


def set_preferences(
    uow_factory: UnitOfWorkFactory,
    user: User,
    *,
    email_notifications: bool = True,
    frequency: Frequency = Frequency.IMMEDIATE,
    weekly_summary: bool = True,
    types: NotificationTypes | None = None,
) -> NotificationPreference:
    with uow_factory() as uow:
        preference = uow.repositories.preferences.get_for_user(user.id)
        assert preference is not None
        preference.email_notifications = email_notifications
        preference.frequency = frequency
        preference.weekly_summary = weekly_summary
        preference.notification_types = types or NotificationTypes()
        uow.commit()
    return preference


def drop_preferences(uow_factory: UnitOfWorkFactory, user: User) -> None:
    with uow_factory() as uow:
        preference = uow.repositories.preferences.get_for_user(user.id)
        assert preference is not None
        uow.session.delete(preference)
        uow.commit()
