"""Best-effort delivery bookkeeping shared by the notification services."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

from releaseradar.domain.model import NotificationLog, NotificationStatus

if TYPE_CHECKING:
    from collections.abc import Awaitable
    from uuid import UUID

    from releaseradar.domain.model import NotificationKind
    from releaseradar.domain.ports import UnitOfWorkFactory

log = getLogger(__name__)


async def attempt_delivery(send: Awaitable[bool], *, description: str) -> bool:
    """Await a notifier call; a raised error counts as a failed delivery."""

    try:
        delivered = await send
    except Exception:
        log.exception("Delivery of %s raised", description)
        return False
    if not delivered:
        log.warning("Delivery of %s failed", description)
    return delivered


def record_notification(
    uow_factory: UnitOfWorkFactory,
    *,
    user_id: UUID,
    kind: NotificationKind,
    delivered: bool,
    release_id: UUID | None = None,
    details: dict[str, Any] | None = None,
) -> None:
    """Append a log entry. Failures are logged and never reach the caller."""

    entry = NotificationLog(
        user_id=user_id,
        kind=kind,
        status=NotificationStatus.SENT if delivered else NotificationStatus.FAILED,
        release_id=release_id,
        details=details,
    )
    try:
        with uow_factory() as uow:
            uow.repositories.notification_logs.add(entry)
            uow.commit()
    except Exception:
        log.exception("Could not record %s notification for user %s", kind, user_id)
