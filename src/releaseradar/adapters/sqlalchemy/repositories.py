"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import delete, select

from releaseradar.adapters.sqlalchemy.mappings import (
    artist_table,
    favorite_table,
    notification_log_table,
    notification_preference_table,
    release_table,
    user_table,
)
from releaseradar.domain.model import (
    Artist,
    Favorite,
    NotificationLog,
    NotificationPreference,
    Release,
    User,
)

if TYPE_CHECKING:
    from collections.abc import Collection
    from datetime import date, datetime
    from uuid import UUID

    from sqlalchemy.engine import CursorResult
    from sqlalchemy.orm import Session

    from releaseradar.domain.model import Frequency


class SqlAlchemyRepository[TEntity]:
    def __init__(self, session: Session, entity_cls: type[TEntity]) -> None:
        self.session = session
        self._entity_cls = entity_cls

    def add(self, entity: TEntity) -> None:
        self.session.add(entity)

    def get(self, entity_id: UUID) -> TEntity | None:
        return self.session.get(self._entity_cls, entity_id)


class SqlAlchemyUserRepository(SqlAlchemyRepository[User]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, User)

    def get_by_email(self, email: str) -> User | None:
        stmt = select(User).where(user_table.c.email == email)
        return self.session.execute(stmt).scalar_one_or_none()

    def list_all(self) -> list[User]:
        stmt = select(User).order_by(user_table.c.created_at)
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyArtistRepository(SqlAlchemyRepository[Artist]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Artist)

    def get_by_spotify_id(self, spotify_id: str) -> Artist | None:
        stmt = select(Artist).where(artist_table.c.spotify_id == spotify_id)
        return self.session.execute(stmt).scalar_one_or_none()

    def list_all(self) -> list[Artist]:
        stmt = select(Artist).order_by(artist_table.c.name)
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyFavoriteRepository(SqlAlchemyRepository[Favorite]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Favorite)

    def find(self, *, user_id: UUID, artist_id: UUID) -> Favorite | None:
        stmt = (
            select(Favorite)
            .where(favorite_table.c.user_id == user_id)
            .where(favorite_table.c.artist_id == artist_id)
        )
        return self.session.execute(stmt).unique().scalar_one_or_none()

    def remove(self, favorite: Favorite) -> None:
        self.session.delete(favorite)

    def list_for_user(self, user_id: UUID) -> list[Favorite]:
        stmt = (
            select(Favorite)
            .where(favorite_table.c.user_id == user_id)
            .order_by(favorite_table.c.added_at.desc())
        )
        return list(self.session.execute(stmt).unique().scalars())

    def list_followers(self, artist_id: UUID) -> list[User]:
        stmt = (
            select(User)
            .join(favorite_table, favorite_table.c.user_id == user_table.c.id)
            .where(favorite_table.c.artist_id == artist_id)
            .order_by(user_table.c.created_at)
        )
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyReleaseRepository(SqlAlchemyRepository[Release]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, Release)

    def exists(self, spotify_id: str) -> bool:
        stmt = select(release_table.c.id).where(release_table.c.spotify_id == spotify_id).limit(1)
        return self.session.execute(stmt).first() is not None

    def list_created_between(
        self, artist_ids: Collection[UUID], start: datetime, end: datetime
    ) -> list[Release]:
        if not artist_ids:
            return []
        stmt = (
            select(Release)
            .where(release_table.c.artist_id.in_(list(artist_ids)))
            .where(release_table.c.created_at >= start)
            .where(release_table.c.created_at <= end)
            .order_by(release_table.c.release_date.desc(), release_table.c.name)
        )
        return list(self.session.execute(stmt).unique().scalars())

    def list_released_between(
        self,
        artist_ids: Collection[UUID],
        start: date | None = None,
        end: date | None = None,
        *,
        newest_first: bool = False,
    ) -> list[Release]:
        if not artist_ids:
            return []
        stmt = select(Release).where(release_table.c.artist_id.in_(list(artist_ids)))
        if start is not None:
            stmt = stmt.where(release_table.c.release_date >= start)
        if end is not None:
            stmt = stmt.where(release_table.c.release_date <= end)
        date_column = release_table.c.release_date
        order = date_column.desc() if newest_first else date_column.asc()
        stmt = stmt.order_by(order, release_table.c.name)
        return list(self.session.execute(stmt).unique().scalars())


class SqlAlchemyPreferenceRepository(SqlAlchemyRepository[NotificationPreference]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, NotificationPreference)

    def get_for_user(self, user_id: UUID) -> NotificationPreference | None:
        stmt = select(NotificationPreference).where(
            notification_preference_table.c.user_id == user_id
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def list_for_users(self, user_ids: Collection[UUID]) -> dict[UUID, NotificationPreference]:
        if not user_ids:
            return {}
        stmt = select(NotificationPreference).where(
            notification_preference_table.c.user_id.in_(list(user_ids))
        )
        return {pref.user_id: pref for pref in self.session.execute(stmt).scalars()}

    def list_emailable(self, *, frequency: Frequency | None = None) -> list[NotificationPreference]:
        stmt = select(NotificationPreference).where(
            notification_preference_table.c.email_notifications.is_(True)
        )
        if frequency is not None:
            stmt = stmt.where(notification_preference_table.c.frequency == frequency)
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyNotificationLogRepository(SqlAlchemyRepository[NotificationLog]):
    def __init__(self, session: Session) -> None:
        super().__init__(session, NotificationLog)

    def list_for_user(self, user_id: UUID, *, limit: int = 50) -> list[NotificationLog]:
        stmt = (
            select(NotificationLog)
            .where(notification_log_table.c.user_id == user_id)
            .order_by(notification_log_table.c.sent_at.desc())
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars())

    def delete_older_than(self, cutoff: datetime) -> int:
        stmt = delete(notification_log_table).where(notification_log_table.c.sent_at < cutoff)
        result = cast("CursorResult[Any]", self.session.execute(stmt))
        return result.rowcount or 0
