"""Minimal Pydantic models for the Spotify Web API."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SpotifyBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class TokenResponse(SpotifyBaseModel):
    access_token: str
    token_type: str = "Bearer"
    expires_in: int


class SpotifyImage(SpotifyBaseModel):
    url: str
    height: int | None = None
    width: int | None = None


class SpotifyFollowers(SpotifyBaseModel):
    total: int | None = None


class SpotifyExternalUrls(SpotifyBaseModel):
    spotify: str | None = None


class SpotifyArtist(SpotifyBaseModel):
    id: str
    name: str
    genres: list[str] = Field(default_factory=list[str])
    images: list[SpotifyImage] = Field(default_factory=list["SpotifyImage"])
    popularity: int | None = None
    followers: SpotifyFollowers | None = None
    external_urls: SpotifyExternalUrls = Field(default_factory=SpotifyExternalUrls)


class SpotifyAlbum(SpotifyBaseModel):
    id: str
    name: str
    album_type: str | None = None
    release_date: str | None = None
    release_date_precision: str | None = None
    total_tracks: int | None = None
    images: list[SpotifyImage] = Field(default_factory=list["SpotifyImage"])
    external_urls: SpotifyExternalUrls = Field(default_factory=SpotifyExternalUrls)


class SpotifyPage(SpotifyBaseModel):
    href: str | None = None
    limit: int | None = None
    next: str | None = None
    offset: int | None = None
    total: int | None = None


class SpotifyArtistsPage(SpotifyPage):
    items: list[SpotifyArtist] = Field(default_factory=list["SpotifyArtist"])


class SpotifyAlbumsPage(SpotifyPage):
    items: list[SpotifyAlbum] = Field(default_factory=list["SpotifyAlbum"])


class ArtistSearchResponse(SpotifyBaseModel):
    artists: SpotifyArtistsPage
