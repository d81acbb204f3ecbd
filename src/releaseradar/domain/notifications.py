"""Immediate release notifications, frequency digests and log retention."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from logging import getLogger
from typing import TYPE_CHECKING, Final

from releaseradar.domain.delivery import attempt_delivery, record_notification
from releaseradar.domain.digests import DigestRunResult, build_digest
from releaseradar.domain.model import (
    Frequency,
    NotificationKind,
    ReleaseNotification,
    should_notify,
)
from releaseradar.domain.time_windows import months_before, trailing_window, utcnow

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from releaseradar.domain.model import NotificationPreference
    from releaseradar.domain.ports import ReleaseNotifier, UnitOfWorkFactory
    from releaseradar.domain.time_windows import Clock

log = getLogger(__name__)

LOG_RETENTION_MONTHS: Final[int] = 3

BATCH_WINDOWS: Final[dict[Frequency, tuple[timedelta, NotificationKind]]] = {
    Frequency.DAILY: (timedelta(hours=24), NotificationKind.DAILY_DIGEST),
    Frequency.WEEKLY: (timedelta(days=7), NotificationKind.WEEKLY_DIGEST),
}


@dataclass(slots=True)
class NotificationDispatcher:
    uow_factory: UnitOfWorkFactory
    notifier: ReleaseNotifier
    clock: Clock = field(default=utcnow)

    async def notify_new_release(self, release_id: UUID) -> int:
        """Email every follower whose preferences allow this release type.

        Followers without a preference row are skipped. Returns the number of
        emails delivered.
        """

        with self.uow_factory() as uow:
            repos = uow.repositories
            release = repos.releases.get(release_id)
            if release is None:
                log.warning("Release %s not found; nothing to notify", release_id)
                return 0
            followers = repos.favorites.list_followers(release.artist.id)
            preferences = repos.preferences.list_for_users([user.id for user in followers])

        delivered_count = 0
        for user in followers:
            preference = preferences.get(user.id)
            if preference is None:
                log.debug("User %s has no notification preferences; skipping", user.id)
                continue
            if not should_notify(preference, release.release_type):
                continue

            notification = ReleaseNotification(
                recipient=user, release=release, artist=release.artist
            )
            delivered = await attempt_delivery(
                self.notifier.send_new_release(notification),
                description=f"release {release.name} to {user.email}",
            )
            record_notification(
                self.uow_factory,
                user_id=user.id,
                kind=NotificationKind.RELEASE,
                delivered=delivered,
                release_id=release.id,
            )
            if delivered:
                delivered_count += 1

        log.info("Notified %s user(s) about %s", delivered_count, release.name)
        return delivered_count

    async def send_batch(self, frequency: Frequency) -> DigestRunResult:
        """Send one digest per user for releases created in the trailing window."""

        if frequency not in BATCH_WINDOWS:
            raise ValueError(f"Batch digests are only sent for daily or weekly, not {frequency}")
        span, kind = BATCH_WINDOWS[frequency]
        start, end = trailing_window(self.clock(), span)

        with self.uow_factory() as uow:
            preferences = uow.repositories.preferences.list_emailable(frequency=frequency)

        sent = 0
        for preference in preferences:
            try:
                if await self._send_digest_to(preference, start, end, kind):
                    sent += 1
            except Exception:
                log.exception("%s for user %s failed", kind, preference.user_id)

        log.info("%s: sent to %s/%s user(s)", kind, sent, len(preferences))
        return DigestRunResult(users=len(preferences), sent=sent)

    def purge_logs(self, *, months: int = LOG_RETENTION_MONTHS) -> int:
        cutoff = months_before(self.clock(), months)
        with self.uow_factory() as uow:
            removed = uow.repositories.notification_logs.delete_older_than(cutoff)
            uow.commit()
        log.info("Purged %s notification log(s) older than %s", removed, cutoff.date())
        return removed

    async def _send_digest_to(
        self,
        preference: NotificationPreference,
        start: datetime,
        end: datetime,
        kind: NotificationKind,
    ) -> bool:
        with self.uow_factory() as uow:
            repos = uow.repositories
            user = repos.users.get(preference.user_id)
            if user is None:
                return False
            artist_ids = [fav.artist.id for fav in repos.favorites.list_for_user(user.id)]
            releases = repos.releases.list_created_between(artist_ids, start, end)

        if not releases:
            return False

        digest = build_digest(user, releases, start, end, kind)
        delivered = await attempt_delivery(
            self.notifier.send_digest(digest), description=f"{kind} to {user.email}"
        )
        record_notification(
            self.uow_factory,
            user_id=user.id,
            kind=kind,
            delivered=delivered,
            details={"release_count": digest.total},
        )
        return delivered
