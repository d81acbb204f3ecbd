"""Translate Spotify payloads into normalized catalog records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from releaseradar.domain.model import (
    CatalogArtist,
    CatalogRelease,
    map_catalog_release_type,
    parse_release_date,
)

if TYPE_CHECKING:
    from .schema import SpotifyAlbum, SpotifyArtist, SpotifyImage

SPOTIFY_OPEN_URL = "https://open.spotify.com"


def _first_image(images: list[SpotifyImage]) -> str | None:
    # Spotify lists images widest first.
    return images[0].url if images else None


def translate_artist(payload: SpotifyArtist) -> CatalogArtist:
    return CatalogArtist(
        catalog_id=payload.id,
        name=payload.name,
        genres=tuple(payload.genres),
        image_url=_first_image(payload.images),
        popularity=payload.popularity,
        followers=payload.followers.total if payload.followers else None,
        url=payload.external_urls.spotify or f"{SPOTIFY_OPEN_URL}/artist/{payload.id}",
    )


def translate_album(payload: SpotifyAlbum) -> CatalogRelease:
    return CatalogRelease(
        catalog_id=payload.id,
        name=payload.name,
        release_type=map_catalog_release_type(payload.album_type),
        release_date=parse_release_date(payload.release_date),
        image_url=_first_image(payload.images),
        url=payload.external_urls.spotify or f"{SPOTIFY_OPEN_URL}/album/{payload.id}",
        track_count=payload.total_tracks,
    )
