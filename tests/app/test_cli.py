from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import pytest

from releaseradar.domain.digests import DigestRunResult
from releaseradar.domain.errors import SyncError
from releaseradar.domain.model import Frequency
from releaseradar.domain.release_sync import SyncResult
from releaseradar.ui import cli as cli_module

if TYPE_CHECKING:
    from uuid import UUID

    from releaseradar.domain.ports import UnitOfWorkFactory


@dataclass
class FakeSynchronizer:
    fail: bool = False
    synced: list[UUID] = field(default_factory=list)

    async def sync_for_user(self, user_id: UUID) -> SyncResult:
        if self.fail:
            raise SyncError("favourites unavailable")
        self.synced.append(user_id)
        return SyncResult(0, [], "0 new release(s) synchronized")


@dataclass
class FakeDispatcher:
    batches: list[Frequency] = field(default_factory=list)
    purged_with: list[dict[str, Any]] = field(default_factory=list)

    async def send_batch(self, frequency: Frequency) -> DigestRunResult:
        self.batches.append(frequency)
        return DigestRunResult(users=2, sent=1)

    def purge_logs(self, **kwargs: Any) -> int:
        self.purged_with.append(kwargs)
        return 3


@dataclass
class FakeApp:
    synchronizer: FakeSynchronizer = field(default_factory=FakeSynchronizer)
    dispatcher: FakeDispatcher = field(default_factory=FakeDispatcher)
    closed: bool = False

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_app(monkeypatch: pytest.MonkeyPatch) -> FakeApp:
    app = FakeApp()
    monkeypatch.setattr(cli_module, "build_app", lambda **_: app)
    monkeypatch.setattr(cli_module, "optional_email_config", lambda: None)
    return app


@pytest.fixture
def cli_uow(monkeypatch: pytest.MonkeyPatch, uow_factory: UnitOfWorkFactory) -> UnitOfWorkFactory:
    monkeypatch.setattr(cli_module, "default_uow_factory", lambda: uow_factory)
    return uow_factory


def test_sync_runs_for_user(fake_app: FakeApp) -> None:
    user_id = uuid4()

    cli_module.main(["sync", "--user-id", str(user_id)])

    assert fake_app.synchronizer.synced == [user_id]
    assert fake_app.closed


def test_invalid_uuid_exits_with_validation_code(fake_app: FakeApp) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["sync", "--user-id", "not-a-uuid"])

    assert excinfo.value.code == 2
    assert fake_app.synchronizer.synced == []


def test_domain_failure_exits_with_runtime_code(fake_app: FakeApp) -> None:
    fake_app.synchronizer.fail = True

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["sync", "--user-id", str(uuid4())])

    assert excinfo.value.code == 1
    assert fake_app.closed


def test_notify_batch_and_purge(fake_app: FakeApp) -> None:
    cli_module.main(["notify-batch", "daily"])
    cli_module.main(["purge-logs"])
    cli_module.main(["purge-logs", "--months", "6"])

    assert fake_app.dispatcher.batches == [Frequency.DAILY]
    assert fake_app.dispatcher.purged_with == [{}, {"months": 6}]


def test_purge_rejects_non_positive_months(fake_app: FakeApp) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["purge-logs", "--months", "0"])

    assert excinfo.value.code == 2


def test_releases_rejects_inverted_dates(fake_app: FakeApp) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(
            ["releases", "--user-id", str(uuid4()), "--start", "2024-06-01", "--end", "2024-01-01"]
        )

    assert excinfo.value.code == 2


def test_user_create_and_preferences(
    cli_uow: UnitOfWorkFactory, capsys: pytest.CaptureFixture[str]
) -> None:
    cli_module.main(["user", "create", "--email", "Fan@Example.com", "--username", "fan"])
    capsys.readouterr()
    cli_module.main(["user", "list"])
    users = json.loads(capsys.readouterr().out)
    user_id = users[0]["id"]

    cli_module.main(
        [
            "preferences",
            "set",
            "--user-id",
            user_id,
            '{"frequency": "weekly", "notificationTypes": {"newSingle": false}}',
        ]
    )
    capsys.readouterr()
    cli_module.main(["preferences", "show", "--user-id", user_id])
    shown = json.loads(capsys.readouterr().out)

    assert users[0]["email"] == "fan@example.com"
    assert shown["frequency"] == "weekly"
    assert shown["notificationTypes"]["newSingle"] is False
    assert shown["emailNotifications"] is True


def test_invalid_preferences_payload(cli_uow: UnitOfWorkFactory) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(
            ["preferences", "set", "--user-id", str(uuid4()), '{"frequency": "hourly"}']
        )

    assert excinfo.value.code == 2


def test_history_for_unknown_user_is_empty(
    cli_uow: UnitOfWorkFactory, capsys: pytest.CaptureFixture[str]
) -> None:
    cli_module.main(["history", "--user-id", str(uuid4())])

    assert json.loads(capsys.readouterr().out) == []


def test_duplicate_user_exits_with_runtime_code(cli_uow: UnitOfWorkFactory) -> None:
    cli_module.main(["user", "create", "--email", "fan@example.com", "--username", "fan"])

    with pytest.raises(SystemExit) as excinfo:
        cli_module.main(["user", "create", "--email", "fan@example.com", "--username", "again"])

    assert excinfo.value.code == 1
