"""Pull favourite artists' releases from the catalogs and store the new ones."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final, Protocol

from releaseradar.domain.errors import (
    ArtistNotFoundError,
    CatalogUnavailableError,
    PersistenceConflictError,
    SyncError,
)
from releaseradar.domain.model import Release
from releaseradar.domain.name_matching import find_exact_match
from releaseradar.domain.time_windows import ReleaseWindow, is_recent_release, utcnow

if TYPE_CHECKING:
    from datetime import date
    from uuid import UUID

    from releaseradar.domain.model import Artist, CatalogRelease
    from releaseradar.domain.ports import PrimaryCatalog, SecondaryCatalog, UnitOfWorkFactory
    from releaseradar.domain.time_windows import Clock

log = getLogger(__name__)

SECONDARY_ALBUM_LIMIT: Final[int] = 50
SPOTIFY_ALBUM_URL: Final[str] = "https://open.spotify.com/album/"


class NewReleaseHandler(Protocol):
    async def notify_new_release(self, release_id: UUID) -> int: ...


@dataclass(frozen=True, slots=True)
class SyncResult:
    created_count: int
    releases: list[Release]
    message: str


@dataclass(frozen=True, slots=True)
class SyncAllResult:
    users: int
    created_count: int
    failures: int


@dataclass(slots=True)
class ReleaseSynchronizer:
    """Synchronize releases for users' favourite artists.

    Re-running is idempotent: candidates whose Spotify id is already stored
    are skipped, and a concurrent insert of the same release is treated as
    already synced. Artists are processed one after another and a failure on
    one artist never stops the others.
    """

    uow_factory: UnitOfWorkFactory
    primary: PrimaryCatalog
    secondary: SecondaryCatalog | None = None
    handler: NewReleaseHandler | None = None
    clock: Clock = field(default=utcnow)
    market: str | None = None

    async def sync_for_user(self, user_id: UUID) -> SyncResult:
        try:
            with self.uow_factory() as uow:
                favorites = uow.repositories.favorites.list_for_user(user_id)
        except Exception as exc:
            raise SyncError(f"Could not load favourites for user {user_id}") from exc

        if not favorites:
            return SyncResult(0, [], "No favourite artists found")

        today = self.clock().date()
        window = ReleaseWindow.around(today)
        created: list[Release] = []
        for favorite in favorites:
            artist = favorite.artist
            if not artist.spotify_id:
                continue
            try:
                created.extend(await self._sync_artist(artist, window, today))
            except Exception:
                log.exception("Release sync for artist %s failed", artist.name)

        return SyncResult(len(created), created, f"{len(created)} new release(s) synchronized")

    async def sync_all(self) -> SyncAllResult:
        with self.uow_factory() as uow:
            user_ids = [user.id for user in uow.repositories.users.list_all()]

        created = failures = 0
        for user_id in user_ids:
            try:
                result = await self.sync_for_user(user_id)
            except Exception:
                failures += 1
                log.exception("Release sync for user %s failed", user_id)
                continue
            created += result.created_count

        log.info(
            "Release sync finished: %s new release(s) for %s user(s), %s failure(s)",
            created,
            len(user_ids),
            failures,
        )
        return SyncAllResult(users=len(user_ids), created_count=created, failures=failures)

    async def _sync_artist(
        self, artist: Artist, window: ReleaseWindow, today: date
    ) -> list[Release]:
        candidates = await self.primary.get_artist_releases(artist.spotify_id, market=self.market)
        secondary_albums: list[CatalogRelease] | None = None
        seen: set[str] = set()
        created: list[Release] = []

        for candidate in candidates:
            release_date = candidate.release_date
            if release_date is None or release_date not in window or candidate.catalog_id in seen:
                continue
            seen.add(candidate.catalog_id)

            with self.uow_factory() as uow:
                if uow.repositories.releases.exists(candidate.catalog_id):
                    continue

            if secondary_albums is None:
                secondary_albums = await self._secondary_albums(artist)
            match = find_exact_match(candidate.name, secondary_albums)

            release = self._store(artist.id, candidate, release_date, match)
            if release is None:
                continue
            created.append(release)
            log.info("New release %s by %s (%s)", release.name, artist.name, release.release_date)

            if is_recent_release(release.release_date, today):
                await self._notify(release)

        return created

    async def _secondary_albums(self, artist: Artist) -> list[CatalogRelease]:
        if self.secondary is None or artist.deezer_id is None:
            return []
        try:
            return await self.secondary.get_artist_albums(artist.deezer_id, SECONDARY_ALBUM_LIMIT)
        except CatalogUnavailableError as exc:
            log.warning("No Deezer cross-reference for %s: %s", artist.name, exc)
            return []

    def _store(
        self,
        artist_id: UUID,
        candidate: CatalogRelease,
        release_date: date,
        match: CatalogRelease | None,
    ) -> Release | None:
        try:
            with self.uow_factory() as uow:
                artist = uow.repositories.artists.get(artist_id)
                if artist is None:
                    raise ArtistNotFoundError(str(artist_id))
                release = Release(
                    spotify_id=candidate.catalog_id,
                    name=candidate.name,
                    release_type=candidate.release_type,
                    release_date=release_date,
                    spotify_url=candidate.url or f"{SPOTIFY_ALBUM_URL}{candidate.catalog_id}",
                    artist=artist,
                    deezer_id=match.catalog_id if match else None,
                    deezer_url=match.url if match else None,
                    image_url=candidate.image_url,
                    track_count=candidate.track_count,
                    created_at=self.clock(),
                )
                uow.repositories.releases.add(release)
                uow.commit()
        except PersistenceConflictError:
            log.info("Release %s already synced", candidate.catalog_id)
            return None
        return release

    async def _notify(self, release: Release) -> None:
        if self.handler is None:
            return
        try:
            await self.handler.notify_new_release(release.id)
        except Exception:
            log.exception("Notification for release %s failed", release.name)
