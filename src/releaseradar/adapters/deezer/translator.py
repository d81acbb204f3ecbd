"""Translate Deezer payloads into normalized catalog records."""

from __future__ import annotations

from typing import TYPE_CHECKING

from releaseradar.domain.model import (
    CatalogArtist,
    CatalogRelease,
    map_catalog_release_type,
    parse_release_date,
)

if TYPE_CHECKING:
    from .schema import DeezerAlbum, DeezerArtist

DEEZER_SITE_URL = "https://www.deezer.com"


def translate_artist(payload: DeezerArtist) -> CatalogArtist:
    return CatalogArtist(
        catalog_id=str(payload.id),
        name=payload.name,
        image_url=payload.picture_big or payload.picture_medium,
        followers=payload.nb_fan or 0,
        url=payload.link or f"{DEEZER_SITE_URL}/artist/{payload.id}",
    )


def translate_album(payload: DeezerAlbum) -> CatalogRelease:
    return CatalogRelease(
        catalog_id=str(payload.id),
        name=payload.title,
        release_type=map_catalog_release_type(payload.record_type),
        release_date=parse_release_date(payload.release_date),
        image_url=payload.cover_big or payload.cover_medium,
        url=payload.link or f"{DEEZER_SITE_URL}/album/{payload.id}",
        track_count=payload.nb_tracks,
        explicit=bool(payload.explicit_lyrics),
    )
