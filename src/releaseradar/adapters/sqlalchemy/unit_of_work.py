"""Session lifecycle for the SQLAlchemy adapter.

``startup()`` binds the module to one engine (mapping the domain classes and
creating missing tables on the way); every :class:`SqlAlchemyUnitOfWork`
afterwards opens a short-lived session on it.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from releaseradar.adapters.sqlalchemy.mappings import create_all_tables
from releaseradar.adapters.sqlalchemy.repositories import (
    SqlAlchemyArtistRepository,
    SqlAlchemyFavoriteRepository,
    SqlAlchemyNotificationLogRepository,
    SqlAlchemyPreferenceRepository,
    SqlAlchemyReleaseRepository,
    SqlAlchemyUserRepository,
)
from releaseradar.config.storage import get_database_uri
from releaseradar.domain.errors import PersistenceConflictError
from releaseradar.domain.ports.unit_of_work import ReleaseRadarRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = getLogger(__name__)


class StartupError(RuntimeError):
    """The adapter was used before ``startup()`` or configured twice."""


class _Database:
    engine: Engine | None = None
    sessions: sessionmaker[Session] | None = None


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the adapter to ``engine`` (or a new one for ``database_uri``) and create tables."""

    if _Database.engine is not None:
        if not force:
            raise StartupError("SQLAlchemy adapter already started; pass force=True to rebind")
        shutdown()

    bound = engine or create_engine(database_uri or get_database_uri())
    create_all_tables(bound)
    _Database.engine = bound
    _Database.sessions = sessionmaker(bind=bound, expire_on_commit=False)
    log.debug("SQLAlchemy adapter bound to %r", bound.url)


def configured_engine() -> Engine | None:
    return _Database.engine


def is_started() -> bool:
    return _Database.engine is not None


def shutdown() -> None:
    if _Database.engine is not None:
        _Database.engine.dispose()
    _Database.engine = None
    _Database.sessions = None


class SqlAlchemyUnitOfWork:
    """One session per ``with`` block; leaving the block on an exception rolls back."""

    def __init__(self) -> None:
        if _Database.sessions is None:
            raise StartupError(
                "SQLAlchemy adapter not started; call "
                "releaseradar.adapters.sqlalchemy.unit_of_work.startup() first"
            )
        self._sessions = _Database.sessions
        self._session: Session | None = None
        self._repositories: ReleaseRadarRepositories | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work is already open")
        session = self._sessions()
        self._session = session
        self._repositories = ReleaseRadarRepositories(
            users=SqlAlchemyUserRepository(session),
            artists=SqlAlchemyArtistRepository(session),
            favorites=SqlAlchemyFavoriteRepository(session),
            releases=SqlAlchemyReleaseRepository(session),
            preferences=SqlAlchemyPreferenceRepository(session),
            notification_logs=SqlAlchemyNotificationLogRepository(session),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        try:
            if exc_type is not None:
                session.rollback()
        finally:
            session.close()
            self._session = None
            self._repositories = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work is not open")
        return self._session

    @property
    def repositories(self) -> ReleaseRadarRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work is not open")
        return self._repositories

    def commit(self) -> None:
        """Commit, turning unique-constraint violations into ``PersistenceConflictError``."""

        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise PersistenceConflictError(str(exc.orig)) from exc

    def rollback(self) -> None:
        self.session.rollback()


if TYPE_CHECKING:
    from releaseradar.domain.ports.unit_of_work import ReleaseRadarUnitOfWork

    _uow_check: ReleaseRadarUnitOfWork = SqlAlchemyUnitOfWork()
