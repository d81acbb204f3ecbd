"""Ports for the music catalogs releases are pulled from."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from releaseradar.domain.model import CatalogArtist, CatalogRelease


@runtime_checkable
class PrimaryCatalog(Protocol):
    """Authoritative source for artists and their releases (Spotify).

    ``get_artist_by_id`` returns ``None`` for unknown ids; transport and
    authentication failures raise ``CatalogUnavailableError``.
    """

    async def search_artists(self, query: str, limit: int = 20) -> list[CatalogArtist]: ...

    async def get_artist_by_id(self, artist_id: str) -> CatalogArtist | None: ...

    async def get_artist_releases(
        self,
        artist_id: str,
        *,
        market: str | None = None,
        limit: int = 50,
    ) -> list[CatalogRelease]: ...


@runtime_checkable
class SecondaryCatalog(Protocol):
    """Cross-reference source (Deezer); every failure means "no cross-reference"."""

    async def search_artists(self, query: str, limit: int = 20) -> list[CatalogArtist]: ...

    async def get_artist_by_id(self, artist_id: str) -> CatalogArtist | None: ...

    async def get_artist_albums(self, artist_id: str, limit: int = 50) -> list[CatalogRelease]: ...
