from __future__ import annotations

from datetime import date, timedelta

import httpx
import pytest

from releaseradar.adapters.spotify import AccessToken, SpotifyCatalog
from releaseradar.config import SpotifyConfig
from releaseradar.domain.errors import CatalogUnavailableError
from releaseradar.domain.model import ReleaseType
from tests.helpers.catalogs import FIXED_NOW, FixedClock
from tests.helpers.http_mocks import mock_client_factory

ARTIST_PAYLOAD = {
    "id": "sp-1",
    "name": "Example Artist",
    "genres": ["indie", "dream pop"],
    "images": [{"url": "https://i.scdn.co/large.jpg", "height": 640, "width": 640}],
    "popularity": 61,
    "followers": {"href": None, "total": 12345},
    "external_urls": {"spotify": "https://open.spotify.com/artist/sp-1"},
    "type": "artist",
}

ALBUMS_PAYLOAD = {
    "href": "https://api.spotify.com/v1/artists/sp-1/albums",
    "limit": 50,
    "next": None,
    "offset": 0,
    "total": 2,
    "items": [
        {
            "id": "alb-1",
            "name": "Full Length",
            "album_type": "album",
            "release_date": "2024-05-17",
            "release_date_precision": "day",
            "total_tracks": 11,
            "images": [],
            "external_urls": {"spotify": "https://open.spotify.com/album/alb-1"},
        },
        {
            "id": "alb-2",
            "name": "Old Compilation",
            "album_type": "compilation",
            "release_date": "1999",
            "release_date_precision": "year",
            "external_urls": {},
        },
    ],
}


class SpotifyStub:
    def __init__(self) -> None:
        self.token_requests = 0
        self.requests: list[httpx.Request] = []
        self.api_status = 200

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.host == "accounts.spotify.com":
            self.token_requests += 1
            assert request.headers["Authorization"].startswith("Basic ")
            assert request.content == b"grant_type=client_credentials"
            return httpx.Response(
                200,
                json={
                    "access_token": f"token-{self.token_requests}",
                    "token_type": "Bearer",
                    "expires_in": 3600,
                },
            )
        self.requests.append(request)
        if self.api_status != 200:
            return httpx.Response(self.api_status, json={"error": {"status": self.api_status}})
        if request.url.path.endswith("/albums"):
            return httpx.Response(200, json=ALBUMS_PAYLOAD)
        if request.url.path.startswith("/v1/artists/"):
            return httpx.Response(200, json=ARTIST_PAYLOAD)
        if request.url.path == "/v1/search":
            return httpx.Response(200, json={"artists": {"items": [ARTIST_PAYLOAD]}})
        return httpx.Response(404)


def _catalog(stub: SpotifyStub, clock: FixedClock, *, market: str | None = None) -> SpotifyCatalog:
    config = SpotifyConfig(client_id="id", client_secret="secret", market=market)
    return SpotifyCatalog(config=config, client_factory=mock_client_factory(stub), clock=clock)


def test_access_token_renewal_margin() -> None:
    token = AccessToken(value="t", expires_at=FIXED_NOW + timedelta(minutes=10))

    assert token.is_usable(FIXED_NOW)
    assert not token.is_usable(FIXED_NOW + timedelta(minutes=5))


@pytest.mark.asyncio
async def test_get_artist_translates_payload(clock: FixedClock) -> None:
    stub = SpotifyStub()

    async with _catalog(stub, clock) as catalog:
        artist = await catalog.get_artist_by_id("sp-1")

    assert artist is not None
    assert artist.catalog_id == "sp-1"
    assert artist.genres == ("indie", "dream pop")
    assert artist.followers == 12345
    assert artist.image_url == "https://i.scdn.co/large.jpg"
    assert stub.requests[0].headers["Authorization"] == "Bearer token-1"


@pytest.mark.asyncio
async def test_token_is_reused_until_close_to_expiry(clock: FixedClock) -> None:
    stub = SpotifyStub()
    catalog = _catalog(stub, clock)

    await catalog.get_artist_by_id("sp-1")
    clock.now += timedelta(minutes=50)
    await catalog.get_artist_by_id("sp-1")
    assert stub.token_requests == 1

    clock.now += timedelta(minutes=6)
    await catalog.get_artist_by_id("sp-1")
    await catalog.aclose()

    assert stub.token_requests == 2
    assert stub.requests[-1].headers["Authorization"] == "Bearer token-2"


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 404])
async def test_unknown_artist_returns_none(clock: FixedClock, status: int) -> None:
    stub = SpotifyStub()
    stub.api_status = status

    async with _catalog(stub, clock) as catalog:
        assert await catalog.get_artist_by_id("nope") is None


@pytest.mark.asyncio
async def test_unauthorized_response_drops_token(clock: FixedClock) -> None:
    stub = SpotifyStub()
    catalog = _catalog(stub, clock)
    await catalog.get_artist_by_id("sp-1")
    stub.api_status = 401

    with pytest.raises(CatalogUnavailableError):
        await catalog.get_artist_by_id("sp-1")
    stub.api_status = 200
    await catalog.get_artist_by_id("sp-1")
    await catalog.aclose()

    assert stub.token_requests == 2


@pytest.mark.asyncio
async def test_artist_releases_request_albums_and_singles(clock: FixedClock) -> None:
    stub = SpotifyStub()

    async with _catalog(stub, clock, market="FR") as catalog:
        releases = await catalog.get_artist_releases("sp-1", limit=200)

    params = stub.requests[0].url.params
    assert params["include_groups"] == "album,single"
    assert params["limit"] == "50"
    assert params["market"] == "FR"
    assert [release.catalog_id for release in releases] == ["alb-1", "alb-2"]
    assert releases[0].release_type is ReleaseType.ALBUM
    assert releases[0].release_date == date(2024, 5, 17)
    assert releases[1].release_type is ReleaseType.EP
    assert releases[1].release_date == date(1999, 1, 1)
    assert releases[1].url == "https://open.spotify.com/album/alb-2"


@pytest.mark.asyncio
async def test_explicit_market_overrides_config(clock: FixedClock) -> None:
    stub = SpotifyStub()

    async with _catalog(stub, clock, market="FR") as catalog:
        await catalog.get_artist_releases("sp-1", market="US")

    assert stub.requests[0].url.params["market"] == "US"


@pytest.mark.asyncio
async def test_search_skips_blank_queries(clock: FixedClock) -> None:
    stub = SpotifyStub()

    async with _catalog(stub, clock) as catalog:
        assert await catalog.search_artists("   ") == []
        found = await catalog.search_artists("example", limit=5)

    assert [artist.name for artist in found] == ["Example Artist"]
    assert stub.requests[0].url.params["type"] == "artist"
    assert stub.requests[0].url.params["limit"] == "5"


@pytest.mark.asyncio
async def test_server_error_raises_catalog_unavailable(clock: FixedClock) -> None:
    stub = SpotifyStub()
    stub.api_status = 503

    async with _catalog(stub, clock) as catalog:
        with pytest.raises(CatalogUnavailableError):
            await catalog.get_artist_releases("sp-1")


@pytest.mark.asyncio
async def test_rejected_credentials_fail_connection_test(clock: FixedClock) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        del request
        return httpx.Response(400, json={"error": "invalid_client"})

    catalog = SpotifyCatalog(
        config=SpotifyConfig(client_id="id", client_secret="bad"),
        client_factory=mock_client_factory(handler),
        clock=clock,
    )

    assert await catalog.test_connection() is False
    with pytest.raises(CatalogUnavailableError):
        await catalog.get_artist_by_id("sp-1")
    await catalog.aclose()
