from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from datetime import date
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv
from pydantic import ValidationError

from releaseradar.app import (
    build_app,
    build_scheduler,
    default_uow_factory,
    optional_email_config,
)
from releaseradar.config import configure_logging
from releaseradar.domain.errors import ReleaseRadarError
from releaseradar.domain.model import Frequency, NotificationSettings
from releaseradar.domain.preferences import (
    DEFAULT_HISTORY_LIMIT,
    get_preferences,
    notification_history,
    update_preferences,
)
from releaseradar.domain.users import create_user, list_users

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from releaseradar.app import ReleaseRadar

log = logging.getLogger(__name__)

_CATALOG_COMMANDS = frozenset(
    {
        "favorite",
        "releases",
        "sync",
        "sync-all",
        "notify-batch",
        "weekly-summary",
        "purge-logs",
        "refresh-artists",
        "check",
        "run",
    }
)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Track new releases from favourite artists")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    user = subparsers.add_parser("user", help="User management commands")
    user_sub = user.add_subparsers(dest="user_command", required=True)
    user_create = user_sub.add_parser("create", help="Create a user")
    user_create.add_argument("--email", type=str, required=True, help="Email address")
    user_create.add_argument("--username", type=str, required=True, help="Username")
    user_create.add_argument("--first-name", type=str, help="Optional first name used in emails")
    user_sub.add_parser("list", help="List users")

    favorite = subparsers.add_parser("favorite", help="Favourite artist commands")
    favorite_sub = favorite.add_subparsers(dest="favorite_command", required=True)
    favorite_add = favorite_sub.add_parser("add", help="Follow an artist by Spotify id")
    favorite_add.add_argument("--user-id", type=str, required=True)
    favorite_add.add_argument("--spotify-id", type=str, required=True, help="Spotify artist id")
    favorite_add.add_argument("--category", type=str, default=None, help="Optional category")
    favorite_remove = favorite_sub.add_parser("remove", help="Unfollow an artist")
    favorite_remove.add_argument("--user-id", type=str, required=True)
    favorite_remove.add_argument("--artist-id", type=str, required=True, help="Internal artist id")
    favorite_list = favorite_sub.add_parser("list", help="List followed artists")
    favorite_list.add_argument("--user-id", type=str, required=True)
    favorite_search = favorite_sub.add_parser("search", help="Search the catalog for artists")
    favorite_search.add_argument("query", type=str)
    favorite_search.add_argument("--limit", type=int, default=10)

    releases = subparsers.add_parser("releases", help="List stored releases of followed artists")
    releases.add_argument("--user-id", type=str, required=True)
    releases.add_argument("--start", type=str, help="Inclusive ISO date (YYYY-MM-DD)")
    releases.add_argument("--end", type=str, help="Inclusive ISO date (YYYY-MM-DD)")

    sync = subparsers.add_parser("sync", help="Sync releases for one user")
    sync.add_argument("--user-id", type=str, required=True)
    subparsers.add_parser("sync-all", help="Sync releases for every user")

    batch = subparsers.add_parser("notify-batch", help="Send daily or weekly digests")
    batch.add_argument("frequency", choices=[Frequency.DAILY.value, Frequency.WEEKLY.value])

    subparsers.add_parser("weekly-summary", help="Send the weekly release summary")

    purge = subparsers.add_parser("purge-logs", help="Delete old notification logs")
    purge.add_argument("--months", type=int, default=None, help="Retention in months")

    subparsers.add_parser("refresh-artists", help="Refresh stored artist metadata")

    history = subparsers.add_parser("history", help="Show a user's notification history")
    history.add_argument("--user-id", type=str, required=True)
    history.add_argument("--limit", type=int, default=DEFAULT_HISTORY_LIMIT)

    preferences = subparsers.add_parser("preferences", help="Notification preference commands")
    preferences_sub = preferences.add_subparsers(dest="preferences_command", required=True)
    preferences_show = preferences_sub.add_parser("show", help="Print preferences as JSON")
    preferences_show.add_argument("--user-id", type=str, required=True)
    preferences_set = preferences_sub.add_parser("set", help="Replace preferences from JSON")
    preferences_set.add_argument("--user-id", type=str, required=True)
    preferences_set.add_argument(
        "settings",
        type=str,
        help='camelCase JSON, e.g. \'{"frequency": "daily", "weeklySummary": false}\'',
    )

    subparsers.add_parser("check", help="Check connectivity to the external services")
    subparsers.add_parser("run", help="Run the scheduler until interrupted")

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _parse_date(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid ISO date: {value}") from exc


def _parse_settings(raw: str) -> NotificationSettings:
    try:
        return NotificationSettings.model_validate_json(raw)
    except ValidationError as exc:
        raise ValueError(f"Invalid preference payload: {exc}") from exc


def _validate(args: argparse.Namespace) -> None:
    """Reject malformed identifiers and dates before anything touches the network."""

    for name in ("user_id", "artist_id"):
        value = getattr(args, name, None)
        if value is not None:
            _parse_uuid(value)
    if args.command == "releases":
        start, end = _parse_date(args.start), _parse_date(args.end)
        if start and end and start > end:
            raise ValueError("--start must not be after --end")
    if args.command == "preferences" and args.preferences_command == "set":
        _parse_settings(args.settings)
    if getattr(args, "months", None) is not None and args.months < 1:
        raise ValueError("--months must be positive")
    if getattr(args, "limit", None) is not None and args.limit < 1:
        raise ValueError("--limit must be positive")


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2, default=str))  # noqa: T201


def _run_persistence_command(args: argparse.Namespace) -> None:
    uow_factory = default_uow_factory()
    if args.command == "user" and args.user_command == "create":
        user = create_user(
            uow_factory,
            email=args.email,
            username=args.username,
            first_name=args.first_name,
        )
        log.info("Created user %s", user.id)
    elif args.command == "user" and args.user_command == "list":
        _print_json(
            [
                {"id": str(user.id), "email": user.email, "username": user.username}
                for user in list_users(uow_factory)
            ]
        )
    elif args.command == "history":
        entries = notification_history(uow_factory, _parse_uuid(args.user_id), limit=args.limit)
        _print_json(
            [
                {
                    "sentAt": entry.sent_at.isoformat(),
                    "kind": entry.kind.value,
                    "status": entry.status.value,
                    "release": entry.release_name,
                    "artist": entry.artist_name,
                    "details": entry.details,
                }
                for entry in entries
            ]
        )
    elif args.command == "preferences" and args.preferences_command == "show":
        _print_json(get_preferences(uow_factory, _parse_uuid(args.user_id)).to_payload())
    elif args.command == "preferences" and args.preferences_command == "set":
        updated = update_preferences(
            uow_factory, _parse_uuid(args.user_id), _parse_settings(args.settings)
        )
        _print_json(updated.to_payload())
    else:
        raise ValueError(f"Unsupported command: {args.command}")


async def _run_scheduler(app: ReleaseRadar) -> None:
    scheduler = build_scheduler(app)
    scheduler.init()
    try:
        await asyncio.Event().wait()
    finally:
        await scheduler.shutdown()


async def _run_favorite_command(app: ReleaseRadar, args: argparse.Namespace) -> None:
    if args.favorite_command == "add":
        kwargs = {"category": args.category} if args.category else {}
        favorite = await app.favorites.add_favorite(
            _parse_uuid(args.user_id), args.spotify_id, **kwargs
        )
        log.info("Added favorite %s (%s)", favorite.artist.name, favorite.artist.id)
    elif args.favorite_command == "remove":
        app.favorites.remove_favorite(_parse_uuid(args.user_id), _parse_uuid(args.artist_id))
        log.info("Removed favorite %s", args.artist_id)
    elif args.favorite_command == "list":
        favorites = await app.favorites.list_favorites(_parse_uuid(args.user_id))
        _print_json(
            [
                {
                    "id": str(item.artist.id),
                    "name": item.artist.name,
                    "spotifyId": item.artist.spotify_id,
                    "deezerId": item.artist.deezer_id,
                    "followers": item.artist.followers,
                    "category": item.category,
                    "addedAt": item.added_at.isoformat(),
                }
                for item in favorites
            ]
        )
    else:
        artists = await app.spotify.search_artists(args.query, limit=args.limit)
        _print_json(
            [
                {"spotifyId": artist.catalog_id, "name": artist.name, "followers": artist.followers}
                for artist in artists
            ]
        )


async def _run_catalog_command(app: ReleaseRadar, args: argparse.Namespace) -> None:
    try:
        if args.command == "favorite":
            await _run_favorite_command(app, args)
        elif args.command == "releases":
            releases = app.favorites.list_user_releases(
                _parse_uuid(args.user_id), _parse_date(args.start), _parse_date(args.end)
            )
            _print_json(
                [
                    {
                        "name": release.name,
                        "artist": release.artist.name,
                        "type": release.release_type.value,
                        "releaseDate": release.release_date.isoformat(),
                        "spotifyUrl": release.spotify_url,
                    }
                    for release in releases
                ]
            )
        elif args.command == "sync":
            result = await app.synchronizer.sync_for_user(_parse_uuid(args.user_id))
            log.info(result.message)
        elif args.command == "notify-batch":
            batch = await app.dispatcher.send_batch(Frequency(args.frequency))
            log.info(
                "Batch %s finished: users=%s, sent=%s", args.frequency, batch.users, batch.sent
            )
        elif args.command == "purge-logs":
            kwargs = {"months": args.months} if args.months is not None else {}
            deleted = app.dispatcher.purge_logs(**kwargs)
            log.info("Purged %s notification log(s)", deleted)
        elif args.command == "run":
            await _run_scheduler(app)
        elif args.command == "sync-all":
            sync_result = await app.synchronizer.sync_all()
            log.info(
                "Synced %s user(s): %s new release(s)", sync_result.users, sync_result.created_count
            )
        elif args.command == "weekly-summary":
            summary = await app.digests.build_weekly_summary()
            log.info("Weekly summary sent to %s/%s user(s)", summary.sent, summary.users)
        elif args.command == "refresh-artists":
            refreshed = await app.resolver.refresh_all()
            log.info("Refreshed %s artist(s), %s failure(s)", refreshed.refreshed, refreshed.failed)
        elif args.command == "check":
            for service, ok in (await app.test_connections()).items():
                log.info("%s: %s", service, "ok" if ok else "unreachable")
        else:
            raise ValueError(f"Unsupported command: {args.command}")  # noqa: TRY301
    finally:
        await app.aclose()


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        _validate(parsed_args)
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command in _CATALOG_COMMANDS:
            app = build_app(email_config=optional_email_config())
            asyncio.run(_run_catalog_command(app, parsed_args))
        else:
            _run_persistence_command(parsed_args)
    except ReleaseRadarError as exc:
        log.error("%s: %s", type(exc).__name__, exc)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
