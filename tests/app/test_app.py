from __future__ import annotations

from datetime import UTC
from typing import TYPE_CHECKING

import pytest

from releaseradar.adapters.email import DisabledNotifier, EmailNotifier
from releaseradar.app import build_app, build_scheduler, optional_email_config
from releaseradar.config import DeezerConfig, EmailConfig, SchedulerConfig, SpotifyConfig
from releaseradar.scheduler import SYNC_JOB, WEEKLY_SUMMARY_JOB

if TYPE_CHECKING:
    from releaseradar.domain.ports import UnitOfWorkFactory
    from tests.helpers.catalogs import FixedClock


@pytest.mark.asyncio
async def test_build_app_without_email_uses_disabled_notifier(
    uow_factory: UnitOfWorkFactory, clock: FixedClock
) -> None:
    app = build_app(
        spotify_config=SpotifyConfig(client_id="id", client_secret="secret", market="DE"),
        deezer_config=DeezerConfig(),
        email_config=None,
        uow_factory=uow_factory,
        clock=clock,
    )

    assert isinstance(app.dispatcher.notifier, DisabledNotifier)
    assert app.sendgrid is None
    assert app.synchronizer.handler is app.dispatcher
    assert app.synchronizer.market == "DE"
    assert app.resolver.secondary is app.deezer

    scheduler = build_scheduler(app, SchedulerConfig(timezone=UTC))
    assert SYNC_JOB in scheduler.job_names
    assert WEEKLY_SUMMARY_JOB in scheduler.job_names
    await app.aclose()


@pytest.mark.asyncio
async def test_build_app_with_email_uses_sendgrid(
    uow_factory: UnitOfWorkFactory, clock: FixedClock
) -> None:
    app = build_app(
        spotify_config=SpotifyConfig(client_id="id", client_secret="secret"),
        deezer_config=DeezerConfig(),
        email_config=EmailConfig(api_key="SG.key", from_address="radar@example.com"),
        uow_factory=uow_factory,
        clock=clock,
    )

    assert isinstance(app.digests.notifier, EmailNotifier)
    assert app.sendgrid is not None
    await app.aclose()


def test_optional_email_config_is_none_when_unconfigured(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SENDGRID_API_KEY", raising=False)
    monkeypatch.delenv("EMAIL_FROM_ADDRESS", raising=False)

    assert optional_email_config() is None
