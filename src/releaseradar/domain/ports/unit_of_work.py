"""Transaction boundary the domain services work through."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from types import TracebackType

    from releaseradar.domain.ports.persistence import (
        ArtistRepository,
        FavoriteRepository,
        NotificationLogRepository,
        PreferenceRepository,
        ReleaseRepository,
        UserRepository,
    )


@dataclass(slots=True)
class ReleaseRadarRepositories:
    users: UserRepository
    artists: ArtistRepository
    favorites: FavoriteRepository
    releases: ReleaseRepository
    preferences: PreferenceRepository
    notification_logs: NotificationLogRepository


class ReleaseRadarUnitOfWork(Protocol):
    """Nothing is persisted until ``commit()``; leaving the block discards the rest."""

    @property
    def repositories(self) -> ReleaseRadarRepositories: ...

    def __enter__(self) -> ReleaseRadarUnitOfWork: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


type UnitOfWorkFactory = Callable[[], ReleaseRadarUnitOfWork]
