"""Application wiring: build the adapters and domain services from configuration."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from releaseradar.adapters.deezer import DeezerCatalog
from releaseradar.adapters.email import DisabledNotifier, EmailNotifier, SendGridClient
from releaseradar.adapters.spotify import SpotifyCatalog
from releaseradar.adapters.sqlalchemy.unit_of_work import SqlAlchemyUnitOfWork, is_started, startup
from releaseradar.config import (
    MissingConfigurationError,
    get_deezer_config,
    get_email_config,
    get_scheduler_config,
    get_spotify_config,
)
from releaseradar.domain.artists import ArtistResolver
from releaseradar.domain.digests import DigestBuilder
from releaseradar.domain.favorites import FavoritesService
from releaseradar.domain.notifications import NotificationDispatcher
from releaseradar.domain.release_sync import ReleaseSynchronizer
from releaseradar.domain.time_windows import utcnow
from releaseradar.scheduler import Scheduler, build_jobs

if TYPE_CHECKING:
    from releaseradar.config import DeezerConfig, EmailConfig, SchedulerConfig, SpotifyConfig
    from releaseradar.domain.ports import ReleaseNotifier, UnitOfWorkFactory
    from releaseradar.domain.time_windows import Clock

log = getLogger(__name__)


@dataclass(slots=True)
class ReleaseRadar:
    """The assembled application: catalogs, notifier and domain services."""

    uow_factory: UnitOfWorkFactory
    spotify: SpotifyCatalog
    deezer: DeezerCatalog
    sendgrid: SendGridClient | None
    resolver: ArtistResolver
    favorites: FavoritesService
    synchronizer: ReleaseSynchronizer
    dispatcher: NotificationDispatcher
    digests: DigestBuilder

    async def aclose(self) -> None:
        await self.spotify.aclose()
        await self.deezer.aclose()
        if self.sendgrid is not None:
            await self.sendgrid.aclose()

    async def test_connections(self) -> dict[str, bool]:
        results = {
            "spotify": await self.spotify.test_connection(),
            "deezer": await self.deezer.test_connection(),
        }
        if self.sendgrid is not None:
            results["sendgrid"] = await self.sendgrid.test_connection()
        return results


def optional_email_config() -> EmailConfig | None:
    try:
        return get_email_config()
    except MissingConfigurationError as exc:
        log.warning("Email delivery disabled: %s", exc)
        return None


def build_notifier(
    email_config: EmailConfig | None,
) -> tuple[ReleaseNotifier, SendGridClient | None]:
    if email_config is None:
        log.warning("SendGrid is not configured; notifications will be logged but not sent")
        return DisabledNotifier(), None
    sendgrid = SendGridClient(config=email_config)
    notifier = EmailNotifier(
        sender=sendgrid,
        sender_name=email_config.from_name,
        app_url=email_config.app_url,
    )
    return notifier, sendgrid


def default_uow_factory() -> UnitOfWorkFactory:
    """Start the SQLAlchemy adapter on first use and return its unit of work factory."""

    if not is_started():
        startup()
    return SqlAlchemyUnitOfWork


def build_app(
    *,
    spotify_config: SpotifyConfig | None = None,
    deezer_config: DeezerConfig | None = None,
    email_config: EmailConfig | None = None,
    uow_factory: UnitOfWorkFactory | None = None,
    clock: Clock = utcnow,
) -> ReleaseRadar:
    """Assemble the application; starts the SQLAlchemy adapter unless a factory is given."""

    if uow_factory is None:
        uow_factory = default_uow_factory()

    effective_spotify = spotify_config or get_spotify_config()
    spotify = SpotifyCatalog(config=effective_spotify, clock=clock)
    deezer = DeezerCatalog(config=deezer_config or get_deezer_config())
    notifier, sendgrid = build_notifier(email_config)

    resolver = ArtistResolver(
        uow_factory=uow_factory, primary=spotify, secondary=deezer, clock=clock
    )
    dispatcher = NotificationDispatcher(uow_factory=uow_factory, notifier=notifier, clock=clock)
    synchronizer = ReleaseSynchronizer(
        uow_factory=uow_factory,
        primary=spotify,
        secondary=deezer,
        handler=dispatcher,
        clock=clock,
        market=effective_spotify.market,
    )
    return ReleaseRadar(
        uow_factory=uow_factory,
        spotify=spotify,
        deezer=deezer,
        sendgrid=sendgrid,
        resolver=resolver,
        favorites=FavoritesService(uow_factory=uow_factory, resolver=resolver),
        synchronizer=synchronizer,
        dispatcher=dispatcher,
        digests=DigestBuilder(uow_factory=uow_factory, notifier=notifier, clock=clock),
    )


def build_scheduler(app: ReleaseRadar, config: SchedulerConfig | None = None) -> Scheduler:
    effective = config or get_scheduler_config()
    jobs = build_jobs(
        effective,
        synchronizer=app.synchronizer,
        dispatcher=app.dispatcher,
        digests=app.digests,
    )
    return Scheduler(jobs, timezone=effective.timezone, clock=app.synchronizer.clock)
