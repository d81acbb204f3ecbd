"""Users and the artists they follow."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from releaseradar.domain.model.entity import Entity, utcnow

if TYPE_CHECKING:
    from datetime import datetime

    from releaseradar.domain.model.music import Artist

DEFAULT_FAVORITE_CATEGORY = "default"


@dataclass(eq=False, kw_only=True)
class User(Entity):
    email: str
    username: str
    first_name: str | None = None
    created_at: datetime = field(default_factory=utcnow)

    @property
    def display_name(self) -> str:
        return self.first_name or self.username


@dataclass(eq=False, kw_only=True)
class Favorite(Entity):
    user: User = field(repr=False)
    artist: Artist
    category: str = DEFAULT_FAVORITE_CATEGORY
    added_at: datetime = field(default_factory=utcnow)
