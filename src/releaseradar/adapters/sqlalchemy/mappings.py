"""SQLAlchemy mapping metadata for the release radar domain model."""

from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from functools import cache
from typing import TYPE_CHECKING, Final

from pydantic import TypeAdapter
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Dialect,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    TypeDecorator,
    UniqueConstraint,
    Uuid,
    orm,
)
from sqlalchemy.orm import configure_mappers, relationship

from releaseradar.domain.model import (
    Artist,
    Favorite,
    Frequency,
    NotificationChannel,
    NotificationKind,
    NotificationLog,
    NotificationPreference,
    NotificationStatus,
    NotificationTypes,
    Release,
    ReleaseType,
    User,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]

_GENRES_ADAPTER: Final[TypeAdapter[list[str]]] = TypeAdapter(list[str])


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


class GenreListType(TypeDecorator[list[str]]):
    """JSON array of genre names, validated on the way in and out."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: list[str] | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return _GENRES_ADAPTER.dump_json(_GENRES_ADAPTER.validate_python(value)).decode()

    def process_result_value(self, value: str | None, dialect: Dialect) -> list[str]:
        _ = dialect
        if value is None:
            return []
        return _GENRES_ADAPTER.validate_json(value)


class NotificationTypesType(TypeDecorator[NotificationTypes]):
    """JSON object of per-type switches; unknown keys dropped, missing keys enabled."""

    impl = Text
    cache_ok = True

    def process_bind_param(self, value: NotificationTypes | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        if not isinstance(value, NotificationTypes):
            value = NotificationTypes.model_validate(value)
        return value.model_dump_json()

    def process_result_value(self, value: str | None, dialect: Dialect) -> NotificationTypes:
        _ = dialect
        if value is None:
            return NotificationTypes()
        return NotificationTypes.model_validate_json(value)


mapper_registry = orm.registry()
mapper_registry.metadata.naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_label)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

user_table = Table(
    "user_account",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("email", String, nullable=False, unique=True),
    Column("username", String, nullable=False),
    Column("first_name", String, nullable=True),
    Column("created_at", UTCDateTime(), nullable=False),
)

artist_table = Table(
    "artist",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("spotify_id", String, nullable=False, unique=True),
    Column("deezer_id", String, nullable=True),
    Column("name", String, nullable=False),
    Column("genres", GenreListType(), nullable=False),
    Column("image_url", String, nullable=True),
    Column("popularity", Integer, nullable=True),
    Column("followers", Integer, nullable=True),
    Column("last_refreshed_at", UTCDateTime(), nullable=True),
)

favorite_table = Table(
    "favorite",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "user_id",
        UUIDColumnType,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "artist_id", UUIDColumnType, ForeignKey("artist.id", ondelete="CASCADE"), nullable=False
    ),
    Column("category", String, nullable=False),
    Column("added_at", UTCDateTime(), nullable=False),
    UniqueConstraint("user_id", "artist_id", name="uq_favorite_user_artist"),
    Index("ix_favorite_artist_id", "artist_id"),
)

release_table = Table(
    "release",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column("spotify_id", String, nullable=False, unique=True),
    Column("deezer_id", String, nullable=True),
    Column("name", String, nullable=False),
    Column("release_type", Enum(ReleaseType, native_enum=False), nullable=False),
    Column("release_date", Date, nullable=False),
    Column("image_url", String, nullable=True),
    Column("spotify_url", String, nullable=False),
    Column("deezer_url", String, nullable=True),
    Column("track_count", Integer, nullable=True),
    Column(
        "artist_id", UUIDColumnType, ForeignKey("artist.id", ondelete="CASCADE"), nullable=False
    ),
    Column("created_at", UTCDateTime(), nullable=False),
    Index("ix_release_artist_date", "artist_id", "release_date"),
    Index("ix_release_created_at", "created_at"),
)

notification_preference_table = Table(
    "notification_preference",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "user_id",
        UUIDColumnType,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    ),
    Column("email_notifications", Boolean, nullable=False),
    Column("notification_types", NotificationTypesType(), nullable=False),
    Column("frequency", Enum(Frequency, native_enum=False), nullable=False),
    Column("weekly_summary", Boolean, nullable=False),
    Column("updated_at", UTCDateTime(), nullable=False),
)

notification_log_table = Table(
    "notification_log",
    mapper_registry.metadata,
    Column("id", UUIDColumnType, primary_key=True, default=uuid.uuid4),
    Column(
        "user_id",
        UUIDColumnType,
        ForeignKey("user_account.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "release_id",
        UUIDColumnType,
        ForeignKey("release.id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("kind", Enum(NotificationKind, native_enum=False), nullable=False),
    Column("channel", Enum(NotificationChannel, native_enum=False), nullable=False),
    Column("status", Enum(NotificationStatus, native_enum=False), nullable=False),
    Column("sent_at", UTCDateTime(), nullable=False),
    Column("details", JSON, nullable=True),
    Index("ix_notification_log_user_sent", "user_id", "sent_at"),
)


@cache
def start_mappers() -> orm.registry:
    """Map the domain dataclasses onto their tables (idempotent)."""

    mapper_registry.map_imperatively(User, user_table)
    mapper_registry.map_imperatively(Artist, artist_table)
    # Many-to-one links load eagerly so entities stay usable after their session closes.
    mapper_registry.map_imperatively(
        Favorite,
        favorite_table,
        properties={
            "user": relationship(User, lazy="joined", innerjoin=True),
            "artist": relationship(Artist, lazy="joined", innerjoin=True),
        },
    )
    mapper_registry.map_imperatively(
        Release,
        release_table,
        properties={"artist": relationship(Artist, lazy="joined", innerjoin=True)},
    )
    mapper_registry.map_imperatively(NotificationPreference, notification_preference_table)
    mapper_registry.map_imperatively(NotificationLog, notification_log_table)
    configure_mappers()
    log.debug("SQLAlchemy mappers configured")
    return mapper_registry


def create_all_tables(engine: Engine) -> None:
    start_mappers()
    mapper_registry.metadata.create_all(engine)


__all__ = [
    "artist_table",
    "create_all_tables",
    "favorite_table",
    "mapper_registry",
    "notification_log_table",
    "notification_preference_table",
    "release_table",
    "start_mappers",
    "user_table",
]
