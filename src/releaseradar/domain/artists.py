"""Resolve artists against the catalogs and keep their cached stats fresh."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from logging import getLogger
from typing import TYPE_CHECKING, Final

from releaseradar.domain.errors import (
    ArtistNotFoundError,
    CatalogUnavailableError,
    PersistenceConflictError,
)
from releaseradar.domain.model import Artist
from releaseradar.domain.name_matching import find_best_match
from releaseradar.domain.time_windows import utcnow

if TYPE_CHECKING:
    from releaseradar.domain.model import CatalogArtist
    from releaseradar.domain.ports import PrimaryCatalog, SecondaryCatalog, UnitOfWorkFactory
    from releaseradar.domain.time_windows import Clock

log = getLogger(__name__)

ARTIST_CACHE_TTL: Final[timedelta] = timedelta(hours=24)
SECONDARY_SEARCH_LIMIT: Final[int] = 10


@dataclass(frozen=True, slots=True)
class RefreshResult:
    refreshed: int
    failed: int


@dataclass(slots=True)
class ArtistResolver:
    """Find or create the stored artist for a primary-catalog id.

    The secondary catalog is only ever consulted for enrichment; it never
    blocks resolution.
    """

    uow_factory: UnitOfWorkFactory
    primary: PrimaryCatalog
    secondary: SecondaryCatalog | None = None
    clock: Clock = field(default=utcnow)

    async def resolve(self, spotify_id: str) -> Artist:
        with self.uow_factory() as uow:
            existing = uow.repositories.artists.get_by_spotify_id(spotify_id)

        if existing is not None:
            if existing.deezer_id is None:
                return await self._enrich(existing)
            return existing

        catalog_artist = await self.primary.get_artist_by_id(spotify_id)
        if catalog_artist is None:
            raise ArtistNotFoundError(spotify_id)

        artist = Artist(
            spotify_id=catalog_artist.catalog_id,
            name=catalog_artist.name,
            deezer_id=await self._find_secondary_id(catalog_artist.name),
            genres=list(catalog_artist.genres),
            image_url=catalog_artist.image_url,
            popularity=catalog_artist.popularity,
            followers=catalog_artist.followers,
            last_refreshed_at=self.clock(),
        )
        try:
            with self.uow_factory() as uow:
                uow.repositories.artists.add(artist)
                uow.commit()
        except PersistenceConflictError:
            log.info("Artist %s was stored concurrently; using the stored row", spotify_id)
            with self.uow_factory() as uow:
                stored = uow.repositories.artists.get_by_spotify_id(spotify_id)
            if stored is None:
                raise
            return stored

        log.info("Created artist %s (%s), deezer_id=%s", artist.name, spotify_id, artist.deezer_id)
        return artist

    async def refresh_if_stale(self, artist: Artist) -> Artist:
        """Re-fetch popularity and followers when the cached snapshot is older than a day."""

        last = artist.last_refreshed_at
        if last is not None and self.clock() - last <= ARTIST_CACHE_TTL:
            return artist
        refreshed = await self._refresh(artist)
        return refreshed if refreshed is not None else artist

    async def refresh_all(self) -> RefreshResult:
        with self.uow_factory() as uow:
            artists = uow.repositories.artists.list_all()

        refreshed = failed = 0
        for artist in artists:
            if await self._refresh(artist) is None:
                failed += 1
            else:
                refreshed += 1
        log.info("Refreshed %s artist(s), %s failure(s)", refreshed, failed)
        return RefreshResult(refreshed=refreshed, failed=failed)

    async def _refresh(self, artist: Artist) -> Artist | None:
        try:
            fetched = await self.primary.get_artist_by_id(artist.spotify_id)
        except CatalogUnavailableError as exc:
            log.warning("Could not refresh artist %s: %s", artist.name, exc)
            return None
        if fetched is None:
            log.warning("Artist %s (%s) is gone from the catalog", artist.name, artist.spotify_id)
            return None

        with self.uow_factory() as uow:
            stored = uow.repositories.artists.get(artist.id)
            if stored is None:
                return None
            _apply_snapshot(stored, fetched)
            stored.last_refreshed_at = self.clock()
            uow.commit()
        return stored

    async def _enrich(self, artist: Artist) -> Artist:
        deezer_id = await self._find_secondary_id(artist.name)
        if deezer_id is None:
            return artist
        with self.uow_factory() as uow:
            stored = uow.repositories.artists.get(artist.id)
            if stored is None:
                return artist
            stored.deezer_id = deezer_id
            uow.commit()
        log.info("Linked artist %s to Deezer id %s", stored.name, deezer_id)
        return stored

    async def _find_secondary_id(self, name: str) -> str | None:
        if self.secondary is None:
            return None
        try:
            candidates = await self.secondary.search_artists(name, SECONDARY_SEARCH_LIMIT)
        except CatalogUnavailableError as exc:
            log.warning("Secondary lookup for %r failed: %s", name, exc)
            return None
        match = find_best_match(name, candidates)
        return match.catalog_id if match is not None else None


def _apply_snapshot(artist: Artist, fetched: CatalogArtist) -> None:
    artist.popularity = fetched.popularity
    artist.followers = fetched.followers
    if fetched.genres:
        artist.genres = list(fetched.genres)
    if fetched.image_url:
        artist.image_url = fetched.image_url
