"""Artists and their releases."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from releaseradar.domain.model.entity import Entity, utcnow

if TYPE_CHECKING:
    from datetime import date, datetime

    from releaseradar.domain.model.enums import ReleaseType

SPOTIFY_ARTIST_URL = "https://open.spotify.com/artist/"
DEEZER_ARTIST_URL = "https://www.deezer.com/artist/"


@dataclass(eq=False, kw_only=True)
class Artist(Entity):
    spotify_id: str
    name: str
    deezer_id: str | None = None
    genres: list[str] = field(default_factory=list[str])
    image_url: str | None = None
    popularity: int | None = None
    followers: int | None = None
    last_refreshed_at: datetime | None = None

    @property
    def spotify_url(self) -> str:
        return f"{SPOTIFY_ARTIST_URL}{self.spotify_id}"

    @property
    def deezer_url(self) -> str | None:
        if self.deezer_id is None:
            return None
        return f"{DEEZER_ARTIST_URL}{self.deezer_id}"


@dataclass(eq=False, kw_only=True)
class Release(Entity):
    """A catalog release. Created once by the synchronizer and never updated."""

    spotify_id: str
    name: str
    release_type: ReleaseType
    release_date: date
    spotify_url: str
    artist: Artist = field(repr=False)
    deezer_id: str | None = None
    deezer_url: str | None = None
    image_url: str | None = None
    track_count: int | None = None
    created_at: datetime = field(default_factory=utcnow)
