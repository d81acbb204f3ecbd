from __future__ import annotations

import logging
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

import pytest

from releaseradar.adapters.sqlalchemy.repositories import SqlAlchemyReleaseRepository
from releaseradar.domain.release_sync import ReleaseSynchronizer
from tests.helpers.catalogs import (
    FakePrimaryCatalog,
    FakeSecondaryCatalog,
    FixedClock,
    RecordingHandler,
    make_catalog_release,
)
from tests.helpers.persistence import follow, seed_artist, seed_release, seed_user

if TYPE_CHECKING:
    from releaseradar.domain.ports import UnitOfWorkFactory


def _synchronizer(
    uow_factory: UnitOfWorkFactory,
    clock: FixedClock,
    primary: FakePrimaryCatalog,
    *,
    secondary: FakeSecondaryCatalog | None = None,
    handler: RecordingHandler | None = None,
) -> ReleaseSynchronizer:
    return ReleaseSynchronizer(
        uow_factory=uow_factory,
        primary=primary,
        secondary=secondary,
        handler=handler,
        clock=clock,
    )


@pytest.mark.asyncio
async def test_sync_stores_releases_inside_the_window(
    uow_factory: UnitOfWorkFactory, clock: FixedClock
) -> None:
    user = seed_user(uow_factory)
    artist = seed_artist(uow_factory)
    follow(uow_factory, user, artist)
    primary = FakePrimaryCatalog(
        releases={
            artist.spotify_id: [
                make_catalog_release("recent", "Recent", date(2024, 6, 10)),
                make_catalog_release("spring", "Spring", date(2024, 3, 1)),
                make_catalog_release("ancient", "Ancient", date(2023, 1, 1)),
                make_catalog_release("upcoming", "Upcoming", date(2024, 6, 20)),
                make_catalog_release("undated", "Undated", None),
            ]
        }
    )
    handler = RecordingHandler()

    synchronizer = _synchronizer(uow_factory, clock, primary, handler=handler)
    result = await synchronizer.sync_for_user(user.id)

    assert result.created_count == 3
    assert {release.spotify_id for release in result.releases} == {"recent", "spring", "upcoming"}
    recent = next(r for r in result.releases if r.spotify_id == "recent")
    assert handler.release_ids == [recent.id]
    assert recent.spotify_url == "https://open.spotify.com/album/recent"
    assert recent.created_at == clock.now


@pytest.mark.asyncio
async def test_window_bounds_are_inclusive(
    uow_factory: UnitOfWorkFactory, clock: FixedClock
) -> None:
    user = seed_user(uow_factory)
    artist = seed_artist(uow_factory)
    follow(uow_factory, user, artist)
    primary = FakePrimaryCatalog(
        releases={
            artist.spotify_id: [
                make_catalog_release("first-day", "First Day", date(2023, 12, 12)),
                make_catalog_release("last-day", "Last Day", date(2024, 12, 12)),
                make_catalog_release("too-early", "Too Early", date(2023, 12, 11)),
                make_catalog_release("too-late", "Too Late", date(2024, 12, 13)),
            ]
        }
    )

    result = await _synchronizer(uow_factory, clock, primary).sync_for_user(user.id)

    assert {release.spotify_id for release in result.releases} == {"first-day", "last-day"}


@pytest.mark.asyncio
async def test_resync_is_idempotent(uow_factory: UnitOfWorkFactory, clock: FixedClock) -> None:
    user = seed_user(uow_factory)
    artist = seed_artist(uow_factory)
    follow(uow_factory, user, artist)
    primary = FakePrimaryCatalog(
        releases={artist.spotify_id: [make_catalog_release("recent", "Recent", date(2024, 6, 10))]}
    )
    handler = RecordingHandler()
    synchronizer = _synchronizer(uow_factory, clock, primary, handler=handler)

    first = await synchronizer.sync_for_user(user.id)
    second = await synchronizer.sync_for_user(user.id)

    assert first.created_count == 1
    assert second.created_count == 0
    assert len(handler.release_ids) == 1


@pytest.mark.asyncio
async def test_duplicate_candidates_in_one_response_are_stored_once(
    uow_factory: UnitOfWorkFactory, clock: FixedClock
) -> None:
    user = seed_user(uow_factory)
    artist = seed_artist(uow_factory)
    follow(uow_factory, user, artist)
    release = make_catalog_release("dup", "Dup", date(2024, 5, 1))
    primary = FakePrimaryCatalog(releases={artist.spotify_id: [release, release]})

    result = await _synchronizer(uow_factory, clock, primary).sync_for_user(user.id)

    assert result.created_count == 1


@pytest.mark.asyncio
async def test_failing_artist_does_not_stop_the_others(
    uow_factory: UnitOfWorkFactory, clock: FixedClock
) -> None:
    user = seed_user(uow_factory)
    first = seed_artist(uow_factory, "sp-first", "First")
    broken = seed_artist(uow_factory, "sp-broken", "Broken")
    last = seed_artist(uow_factory, "sp-last", "Last")
    # Favourites are synced newest first, which puts the broken artist in the middle.
    follow(uow_factory, user, first, added_at=datetime(2024, 6, 3, tzinfo=UTC))
    follow(uow_factory, user, broken, added_at=datetime(2024, 6, 2, tzinfo=UTC))
    follow(uow_factory, user, last, added_at=datetime(2024, 6, 1, tzinfo=UTC))
    primary = FakePrimaryCatalog(
        releases={
            "sp-first": [make_catalog_release("one", "One", date(2024, 5, 1))],
            "sp-last": [make_catalog_release("three", "Three", date(2024, 4, 1))],
        },
        failing_artists={"sp-broken"},
    )

    result = await _synchronizer(uow_factory, clock, primary).sync_for_user(user.id)

    assert primary.release_calls == ["sp-first", "sp-broken", "sp-last"]
    assert result.created_count == 2
    assert sorted(release.spotify_id for release in result.releases) == ["one", "three"]
    assert result.message == "2 new release(s) synchronized"


@pytest.mark.asyncio
async def test_failing_artist_is_logged_with_its_name(
    uow_factory: UnitOfWorkFactory, clock: FixedClock, caplog: pytest.LogCaptureFixture
) -> None:
    user = seed_user(uow_factory)
    broken = seed_artist(uow_factory, "sp-broken", "Broken")
    follow(uow_factory, user, broken)
    primary = FakePrimaryCatalog(failing_artists={"sp-broken"})

    with caplog.at_level(logging.ERROR, logger="releaseradar.domain.release_sync"):
        await _synchronizer(uow_factory, clock, primary).sync_for_user(user.id)

    [record] = [r for r in caplog.records if r.name == "releaseradar.domain.release_sync"]
    assert record.msg == "Release sync for artist %s failed"
    assert record.args == ("Broken",)
    assert record.getMessage() == "Release sync for artist Broken failed"
    assert record.exc_info is not None


@pytest.mark.asyncio
async def test_deezer_cross_reference_uses_exact_normalized_names(
    uow_factory: UnitOfWorkFactory, clock: FixedClock
) -> None:
    user = seed_user(uow_factory)
    artist = seed_artist(uow_factory, deezer_id="dz-1")
    follow(uow_factory, user, artist)
    primary = FakePrimaryCatalog(
        releases={
            artist.spotify_id: [
                make_catalog_release("a", "Café Society", date(2024, 5, 1)),
                make_catalog_release("b", "Something Else", date(2024, 5, 2)),
            ]
        }
    )
    secondary = FakeSecondaryCatalog(
        albums={
            "dz-1": [
                make_catalog_release(
                    "dz-album", "cafe society!", date(2024, 5, 1), url="https://deezer/album/1"
                ),
                make_catalog_release("dz-other", "Something", date(2024, 5, 2)),
            ]
        }
    )

    result = await _synchronizer(
        uow_factory, clock, primary, secondary=secondary
    ).sync_for_user(user.id)

    by_id = {release.spotify_id: release for release in result.releases}
    assert by_id["a"].deezer_id == "dz-album"
    assert by_id["a"].deezer_url == "https://deezer/album/1"
    assert by_id["b"].deezer_id is None
    assert secondary.album_calls == ["dz-1"]


@pytest.mark.asyncio
async def test_secondary_is_not_called_when_nothing_is_new(
    uow_factory: UnitOfWorkFactory, clock: FixedClock
) -> None:
    user = seed_user(uow_factory)
    artist = seed_artist(uow_factory, deezer_id="dz-1")
    follow(uow_factory, user, artist)
    seed_release(
        uow_factory, artist, "known", release_date=date(2024, 5, 1), created_at=clock.now
    )
    primary = FakePrimaryCatalog(
        releases={artist.spotify_id: [make_catalog_release("known", "Known", date(2024, 5, 1))]}
    )
    secondary = FakeSecondaryCatalog()

    result = await _synchronizer(
        uow_factory, clock, primary, secondary=secondary
    ).sync_for_user(user.id)

    assert result.created_count == 0
    assert secondary.album_calls == []


@pytest.mark.asyncio
async def test_unavailable_secondary_still_stores_release(
    uow_factory: UnitOfWorkFactory, clock: FixedClock
) -> None:
    user = seed_user(uow_factory)
    artist = seed_artist(uow_factory, deezer_id="dz-1")
    follow(uow_factory, user, artist)
    primary = FakePrimaryCatalog(
        releases={artist.spotify_id: [make_catalog_release("a", "Album", date(2024, 5, 1))]}
    )

    result = await _synchronizer(
        uow_factory, clock, primary, secondary=FakeSecondaryCatalog(unavailable=True)
    ).sync_for_user(user.id)

    assert result.created_count == 1
    assert result.releases[0].deezer_id is None


@pytest.mark.asyncio
async def test_concurrent_insert_counts_as_already_synced(
    uow_factory: UnitOfWorkFactory,
    clock: FixedClock,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    user = seed_user(uow_factory)
    artist = seed_artist(uow_factory)
    follow(uow_factory, user, artist)
    seed_release(uow_factory, artist, "raced", release_date=date(2024, 6, 10), created_at=clock.now)
    # Pretend the existence check ran before the other writer committed.
    monkeypatch.setattr(SqlAlchemyReleaseRepository, "exists", lambda self, spotify_id: False)
    primary = FakePrimaryCatalog(
        releases={artist.spotify_id: [make_catalog_release("raced", "Raced", date(2024, 6, 10))]}
    )
    handler = RecordingHandler()

    synchronizer = _synchronizer(uow_factory, clock, primary, handler=handler)
    result = await synchronizer.sync_for_user(user.id)

    assert result.created_count == 0
    assert handler.release_ids == []


@pytest.mark.asyncio
async def test_user_without_favorites(uow_factory: UnitOfWorkFactory, clock: FixedClock) -> None:
    user = seed_user(uow_factory)

    result = await _synchronizer(uow_factory, clock, FakePrimaryCatalog()).sync_for_user(user.id)

    assert result.created_count == 0
    assert result.message == "No favourite artists found"


@pytest.mark.asyncio
async def test_sync_all_covers_every_user(
    uow_factory: UnitOfWorkFactory, clock: FixedClock
) -> None:
    first = seed_user(uow_factory, "one@example.com")
    second = seed_user(uow_factory, "two@example.com")
    artist_a = seed_artist(uow_factory, "sp-a", "A")
    artist_b = seed_artist(uow_factory, "sp-b", "B")
    follow(uow_factory, first, artist_a)
    follow(uow_factory, second, artist_b)
    follow(uow_factory, second, artist_a)
    primary = FakePrimaryCatalog(
        releases={
            "sp-a": [make_catalog_release("a1", "A1", date(2024, 5, 1))],
            "sp-b": [make_catalog_release("b1", "B1", date(2024, 5, 1))],
        }
    )

    result = await _synchronizer(uow_factory, clock, primary).sync_all()

    assert result.users == 2
    assert result.created_count == 2
    assert result.failures == 0
