"""User registration and lookup."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from releaseradar.domain.errors import (
    DuplicateUserError,
    PersistenceConflictError,
    UserNotFoundError,
)
from releaseradar.domain.model import NotificationPreference, User

if TYPE_CHECKING:
    from uuid import UUID

    from releaseradar.domain.ports import UnitOfWorkFactory

log = getLogger(__name__)


def create_user(
    uow_factory: UnitOfWorkFactory,
    *,
    email: str,
    username: str,
    first_name: str | None = None,
) -> User:
    """Register a user together with default notification preferences."""

    email = email.strip().lower()
    user = User(email=email, username=username, first_name=first_name)
    try:
        with uow_factory() as uow:
            if uow.repositories.users.get_by_email(email) is not None:
                raise DuplicateUserError(email)
            uow.repositories.users.add(user)
            uow.commit()
    except PersistenceConflictError as exc:
        raise DuplicateUserError(email) from exc
    # Separate step: preferences only reference the user by id, so the user row must exist.
    with uow_factory() as uow:
        uow.repositories.preferences.add(NotificationPreference(user_id=user.id))
        uow.commit()
    log.info("Created user %s <%s>", user.username, email)
    return user


def get_user(uow_factory: UnitOfWorkFactory, user_id: UUID) -> User:
    with uow_factory() as uow:
        user = uow.repositories.users.get(user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user


def list_users(uow_factory: UnitOfWorkFactory) -> list[User]:
    with uow_factory() as uow:
        return uow.repositories.users.list_all()
