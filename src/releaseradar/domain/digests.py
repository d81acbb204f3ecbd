"""Digest assembly and the weekly calendar summary."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from releaseradar.domain.delivery import attempt_delivery, record_notification
from releaseradar.domain.model import Digest, DigestEntry, NotificationKind
from releaseradar.domain.time_windows import calendar_week, utcnow

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from releaseradar.domain.model import NotificationPreference, Release, User
    from releaseradar.domain.ports import ReleaseNotifier, UnitOfWorkFactory
    from releaseradar.domain.time_windows import Clock

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DigestRunResult:
    users: int
    sent: int


def build_digest(
    user: User,
    releases: Iterable[Release],
    period_start: datetime,
    period_end: datetime,
    kind: NotificationKind,
) -> Digest:
    """Entries are ordered by release date, then artist and title."""

    ordered = sorted(releases, key=lambda r: (r.release_date, r.artist.name, r.name))
    return Digest(
        recipient=user,
        kind=kind,
        period_start=period_start,
        period_end=period_end,
        entries=tuple(
            DigestEntry(
                release_name=release.name,
                artist_name=release.artist.name,
                release_type=release.release_type,
                release_date=release.release_date,
                spotify_url=release.spotify_url,
                deezer_url=release.deezer_url,
                image_url=release.image_url,
            )
            for release in ordered
        ),
    )


@dataclass(slots=True)
class DigestBuilder:
    """Sends the weekly summary of releases dated in the current calendar week."""

    uow_factory: UnitOfWorkFactory
    notifier: ReleaseNotifier
    clock: Clock = field(default=utcnow)

    async def build_weekly_summary(self) -> DigestRunResult:
        week_start, week_end = calendar_week(self.clock())
        with self.uow_factory() as uow:
            emailable = uow.repositories.preferences.list_emailable()
            preferences = [pref for pref in emailable if pref.weekly_summary]

        sent = 0
        for preference in preferences:
            try:
                if await self._summarize_for(preference, week_start, week_end):
                    sent += 1
            except Exception:
                log.exception("Weekly summary for user %s failed", preference.user_id)

        log.info("Weekly summary sent to %s/%s user(s)", sent, len(preferences))
        return DigestRunResult(users=len(preferences), sent=sent)

    async def _summarize_for(
        self,
        preference: NotificationPreference,
        week_start: datetime,
        week_end: datetime,
    ) -> bool:
        with self.uow_factory() as uow:
            repos = uow.repositories
            user = repos.users.get(preference.user_id)
            if user is None:
                return False
            artist_ids = [fav.artist.id for fav in repos.favorites.list_for_user(user.id)]
            releases = repos.releases.list_released_between(
                artist_ids, week_start.date(), week_end.date()
            )

        if not releases:
            log.debug("No releases this week for %s; skipping summary", user.email)
            return False

        digest = build_digest(user, releases, week_start, week_end, NotificationKind.WEEKLY_SUMMARY)
        delivered = await attempt_delivery(
            self.notifier.send_digest(digest), description=f"weekly summary to {user.email}"
        )
        record_notification(
            self.uow_factory,
            user_id=user.id,
            kind=NotificationKind.WEEKLY_SUMMARY,
            delivered=delivered,
            details={"release_count": digest.total},
        )
        return delivered
