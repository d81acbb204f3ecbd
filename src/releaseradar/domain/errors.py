"""Exceptions raised by the release radar domain services."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from uuid import UUID


class ReleaseRadarError(RuntimeError):
    """Base class for domain failures."""


class ArtistNotFoundError(ReleaseRadarError):
    def __init__(self, artist_ref: str) -> None:
        super().__init__(f"Artist not found: {artist_ref}")
        self.artist_ref = artist_ref


class UserNotFoundError(ReleaseRadarError):
    def __init__(self, user_id: UUID) -> None:
        super().__init__(f"User not found: {user_id}")
        self.user_id = user_id


class CatalogUnavailableError(ReleaseRadarError):
    """A catalog could not be reached or answered with an unusable payload."""

    def __init__(self, catalog: str, message: str) -> None:
        super().__init__(f"{catalog}: {message}")
        self.catalog = catalog


class SyncError(ReleaseRadarError):
    """Raised when a user's favourites cannot be read for synchronization."""


class DuplicateFavoriteError(ReleaseRadarError):
    def __init__(self, artist_name: str) -> None:
        super().__init__(f"Artist already in favorites: {artist_name}")
        self.artist_name = artist_name


class FavoriteNotFoundError(ReleaseRadarError):
    def __init__(self, artist_id: UUID) -> None:
        super().__init__(f"Favorite not found for artist {artist_id}")
        self.artist_id = artist_id


class DuplicateUserError(ReleaseRadarError):
    def __init__(self, email: str) -> None:
        super().__init__(f"A user with email {email} already exists")
        self.email = email


class PersistenceConflictError(ReleaseRadarError):
    """A commit violated a uniqueness constraint (the row already exists)."""
