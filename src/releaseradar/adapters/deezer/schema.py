"""Pydantic models describing the Deezer public API payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

QUOTA_EXCEEDED_CODE = 4
NO_DATA_CODE = 800


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class DeezerBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class DeezerError(DeezerBaseModel):
    type: str | None = None
    message: str | None = None
    code: int | None = None


class ErrorResponse(DeezerBaseModel):
    error: DeezerError


class DeezerArtist(DeezerBaseModel):
    id: int
    name: str
    link: str | None = None
    picture_big: str | None = None
    picture_medium: str | None = None
    nb_album: int | None = None
    nb_fan: int | None = None

    @field_validator("link", "picture_big", "picture_medium", mode="before")
    @classmethod
    def _blank_urls(cls, value: object) -> object:
        return _blank_to_none(value)


class DeezerAlbum(DeezerBaseModel):
    id: int
    title: str
    link: str | None = None
    cover_big: str | None = None
    cover_medium: str | None = None
    release_date: str | None = None
    record_type: str | None = None
    nb_tracks: int | None = None
    explicit_lyrics: bool | None = None

    @field_validator("link", "cover_big", "cover_medium", mode="before")
    @classmethod
    def _blank_urls(cls, value: object) -> object:
        return _blank_to_none(value)


class ArtistSearchResponse(DeezerBaseModel):
    data: list[DeezerArtist] = Field(default_factory=list["DeezerArtist"])
    total: int | None = None
    next: str | None = None


class ArtistAlbumsResponse(DeezerBaseModel):
    data: list[DeezerAlbum] = Field(default_factory=list["DeezerAlbum"])
    total: int | None = None
    next: str | None = None
