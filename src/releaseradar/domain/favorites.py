"""Favourite-artist management and the release feed derived from it."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from releaseradar.domain.errors import (
    ArtistNotFoundError,
    DuplicateFavoriteError,
    FavoriteNotFoundError,
    PersistenceConflictError,
    UserNotFoundError,
)
from releaseradar.domain.model import DEFAULT_FAVORITE_CATEGORY, Favorite

if TYPE_CHECKING:
    from datetime import date, datetime
    from uuid import UUID

    from releaseradar.domain.artists import ArtistResolver
    from releaseradar.domain.model import Artist, Release
    from releaseradar.domain.ports import UnitOfWorkFactory

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FavoriteArtist:
    artist: Artist
    category: str
    added_at: datetime


@dataclass(slots=True)
class FavoritesService:
    uow_factory: UnitOfWorkFactory
    resolver: ArtistResolver

    async def add_favorite(
        self,
        user_id: UUID,
        spotify_id: str,
        category: str = DEFAULT_FAVORITE_CATEGORY,
    ) -> Favorite:
        with self.uow_factory() as uow:
            if uow.repositories.users.get(user_id) is None:
                raise UserNotFoundError(user_id)

        resolved = await self.resolver.resolve(spotify_id)

        try:
            with self.uow_factory() as uow:
                repos = uow.repositories
                if repos.favorites.find(user_id=user_id, artist_id=resolved.id) is not None:
                    raise DuplicateFavoriteError(resolved.name)
                user = repos.users.get(user_id)
                artist = repos.artists.get(resolved.id)
                if user is None:
                    raise UserNotFoundError(user_id)
                if artist is None:
                    raise ArtistNotFoundError(spotify_id)
                favorite = Favorite(user=user, artist=artist, category=category)
                repos.favorites.add(favorite)
                uow.commit()
        except PersistenceConflictError as exc:
            raise DuplicateFavoriteError(resolved.name) from exc

        log.info("User %s now follows %s", user_id, artist.name)
        return favorite

    def remove_favorite(self, user_id: UUID, artist_id: UUID) -> None:
        with self.uow_factory() as uow:
            favorite = uow.repositories.favorites.find(user_id=user_id, artist_id=artist_id)
            if favorite is None:
                raise FavoriteNotFoundError(artist_id)
            uow.repositories.favorites.remove(favorite)
            uow.commit()

    async def list_favorites(self, user_id: UUID) -> list[FavoriteArtist]:
        """Newest first, with artist stats refreshed when stale."""

        with self.uow_factory() as uow:
            favorites = uow.repositories.favorites.list_for_user(user_id)

        return [
            FavoriteArtist(
                artist=await self.resolver.refresh_if_stale(favorite.artist),
                category=favorite.category,
                added_at=favorite.added_at,
            )
            for favorite in favorites
        ]

    def list_user_releases(
        self,
        user_id: UUID,
        start: date | None = None,
        end: date | None = None,
    ) -> list[Release]:
        with self.uow_factory() as uow:
            repos = uow.repositories
            artist_ids = [fav.artist.id for fav in repos.favorites.list_for_user(user_id)]
            return repos.releases.list_released_between(artist_ids, start, end, newest_first=True)
