"""Render release notifications with Jinja2 and deliver them by email."""

from __future__ import annotations

from datetime import UTC, date, datetime
from logging import getLogger
from typing import TYPE_CHECKING, Final, Protocol

from jinja2 import Environment, PackageLoader, StrictUndefined, select_autoescape

from releaseradar.domain.model import NotificationKind, ReleaseType

if TYPE_CHECKING:
    from releaseradar.domain.model import Digest, ReleaseNotification, User

log = getLogger(__name__)

_RELEASE_LABELS: Final[dict[ReleaseType, str]] = {
    ReleaseType.ALBUM: "album",
    ReleaseType.SINGLE: "single",
    ReleaseType.EP: "EP",
}

_DIGEST_HEADINGS: Final[dict[NotificationKind, str]] = {
    NotificationKind.DAILY_DIGEST: "Your daily release digest",
    NotificationKind.WEEKLY_DIGEST: "Your weekly release digest",
    NotificationKind.WEEKLY_SUMMARY: "This week's releases",
}


class EmailSender(Protocol):
    async def send(
        self,
        to: str,
        subject: str,
        html: str,
        text: str | None = None,
        *,
        to_name: str | None = None,
    ) -> bool: ...


def release_label(release_type: ReleaseType) -> str:
    return _RELEASE_LABELS.get(release_type, "release")


def _long_date(value: date | datetime) -> str:
    return f"{value.day} {value:%B %Y}"


def build_environment() -> Environment:
    env = Environment(
        loader=PackageLoader("releaseradar.adapters.email", "templates"),
        autoescape=select_autoescape(enabled_extensions=("html",), default_for_string=False),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["longdate"] = _long_date
    env.filters["release_label"] = release_label
    return env


class EmailNotifier:
    """``ReleaseNotifier`` implementation rendering HTML and plain-text bodies."""

    def __init__(
        self,
        *,
        sender: EmailSender,
        sender_name: str,
        app_url: str | None = None,
        environment: Environment | None = None,
    ) -> None:
        self._sender = sender
        self._sender_name = sender_name
        self._app_url = app_url
        self._env = environment or build_environment()

    async def send_new_release(self, notification: ReleaseNotification) -> bool:
        label = release_label(notification.release.release_type)
        context = self._context(
            recipient=notification.recipient,
            artist=notification.artist,
            release=notification.release,
            release_type_label=label,
        )
        subject = f"New {label} from {notification.artist.name}: {notification.release.name}"
        return await self._deliver(notification.recipient, subject, "release", context)

    async def send_digest(self, digest: Digest) -> bool:
        heading = _DIGEST_HEADINGS.get(digest.kind, "Your release digest")
        plural = "s" if digest.total != 1 else ""
        subject = f"{heading}: {digest.total} new release{plural}"
        context = self._context(recipient=digest.recipient, digest=digest, heading=heading)
        return await self._deliver(digest.recipient, subject, "digest", context)

    def render(self, template: str, context: dict[str, object]) -> tuple[str, str]:
        html = self._env.get_template(f"{template}.html").render(context)
        text = self._env.get_template(f"{template}.txt").render(context)
        return html, text

    def _context(self, **values: object) -> dict[str, object]:
        return {
            "app_url": self._app_url,
            "sender_name": self._sender_name,
            "year": datetime.now(UTC).year,
            **values,
        }

    async def _deliver(
        self,
        recipient: User,
        subject: str,
        template: str,
        context: dict[str, object],
    ) -> bool:
        html, text = self.render(template, context)
        return await self._sender.send(
            recipient.email, subject, html, text, to_name=recipient.display_name
        )


class DisabledNotifier:
    """Stand-in used when no email provider is configured: logs and reports failure."""

    async def send_new_release(self, notification: ReleaseNotification) -> bool:
        log.info(
            "[email not sent] %s: new release %s by %s",
            notification.recipient.email,
            notification.release.name,
            notification.artist.name,
        )
        return False

    async def send_digest(self, digest: Digest) -> bool:
        log.info(
            "[email not sent] %s: %s with %s release(s)",
            digest.recipient.email,
            digest.kind,
            digest.total,
        )
        return False
