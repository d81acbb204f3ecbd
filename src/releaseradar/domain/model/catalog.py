"""Normalized catalog payloads shared by the catalog adapters."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Final

from releaseradar.domain.model.enums import ReleaseType

_RELEASE_TYPES: Final[dict[str, ReleaseType]] = {
    "album": ReleaseType.ALBUM,
    "single": ReleaseType.SINGLE,
    "compilation": ReleaseType.EP,
    "ep": ReleaseType.EP,
}


def map_catalog_release_type(raw: str | None) -> ReleaseType:
    """Map a catalog's raw album type; anything unknown counts as a single."""

    if raw is None:
        return ReleaseType.SINGLE
    return _RELEASE_TYPES.get(raw.strip().lower(), ReleaseType.SINGLE)


def parse_release_date(raw: str | None) -> date | None:
    """Parse ``YYYY``, ``YYYY-MM`` or ``YYYY-MM-DD``; partial dates fall on the first day."""

    if not raw:
        return None
    parts = raw.strip().split("-")
    try:
        year = int(parts[0])
        month = int(parts[1]) if len(parts) > 1 else 1
        day = int(parts[2]) if len(parts) > 2 else 1  # noqa: PLR2004
        if year <= 0:
            return None
        return date(year, month, day)
    except ValueError:
        return None


@dataclass(frozen=True, slots=True, kw_only=True)
class CatalogArtist:
    catalog_id: str
    name: str
    genres: tuple[str, ...] = field(default_factory=tuple)
    image_url: str | None = None
    popularity: int | None = None
    followers: int | None = None
    url: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class CatalogRelease:
    catalog_id: str
    name: str
    release_type: ReleaseType
    release_date: date | None
    image_url: str | None = None
    url: str | None = None
    track_count: int | None = None
    explicit: bool | None = None
