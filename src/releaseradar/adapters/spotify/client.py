"""Spotify Web API catalog client using the client-credentials flow."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timedelta
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

import httpx
from pydantic import BaseModel, ValidationError

from releaseradar.adapters.http_resilience import default_client_factory
from releaseradar.domain.errors import CatalogUnavailableError
from releaseradar.domain.time_windows import utcnow

from .schema import ArtistSearchResponse, SpotifyAlbumsPage, SpotifyArtist, TokenResponse
from .translator import translate_album, translate_artist

if TYPE_CHECKING:
    from types import TracebackType

    from releaseradar.adapters.http_resilience import ClientFactory, ResilientClient
    from releaseradar.config.spotify import SpotifyConfig
    from releaseradar.domain.model import CatalogArtist, CatalogRelease
    from releaseradar.domain.time_windows import Clock

log = getLogger(__name__)

CATALOG_NAME: Final[str] = "spotify"
MAX_PAGE_SIZE: Final[int] = 50
TOKEN_RENEWAL_MARGIN: Final[timedelta] = timedelta(minutes=5)
_NOT_FOUND_STATUSES: Final[frozenset[int]] = frozenset({400, 404})


@dataclass(frozen=True, slots=True)
class AccessToken:
    value: str
    expires_at: datetime

    def is_usable(self, now: datetime, *, margin: timedelta = TOKEN_RENEWAL_MARGIN) -> bool:
        return now < self.expires_at - margin


class SpotifyCatalog:
    """Primary catalog backed by the Spotify Web API.

    One bearer token is cached per instance and renewed once fewer than five
    minutes of validity remain. Concurrent renewals are harmless: the last
    token stored wins and both remain valid.
    """

    def __init__(
        self,
        *,
        config: SpotifyConfig,
        client_factory: ClientFactory = default_client_factory,
        clock: Clock = utcnow,
    ) -> None:
        self._config = config
        self._client_factory = client_factory
        self._clock = clock
        self._client: ResilientClient | None = None
        self._token: AccessToken | None = None

    async def __aenter__(self) -> SpotifyCatalog:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def search_artists(self, query: str, limit: int = 20) -> list[CatalogArtist]:
        if not query.strip():
            return []
        response = await self._get(
            "/search",
            params={"q": query, "type": "artist", "limit": _page_size(limit)},
        )
        self._raise_for_status(response)
        payload = self._validate(ArtistSearchResponse, response)
        return [translate_artist(item) for item in payload.artists.items]

    async def get_artist_by_id(self, artist_id: str) -> CatalogArtist | None:
        response = await self._get(f"/artists/{artist_id}")
        if response.status_code in _NOT_FOUND_STATUSES:
            log.info("Spotify artist %s not found (%s)", artist_id, response.status_code)
            return None
        self._raise_for_status(response)
        return translate_artist(self._validate(SpotifyArtist, response))

    async def get_artist_releases(
        self,
        artist_id: str,
        *,
        market: str | None = None,
        limit: int = 50,
    ) -> list[CatalogRelease]:
        params: dict[str, str | int] = {
            "include_groups": "album,single",
            "limit": _page_size(limit),
        }
        effective_market = market or self._config.market
        if effective_market:
            params["market"] = effective_market
        response = await self._get(f"/artists/{artist_id}/albums", params=params)
        self._raise_for_status(response)
        payload = self._validate(SpotifyAlbumsPage, response)
        return [translate_album(item) for item in payload.items]

    async def test_connection(self) -> bool:
        try:
            await self._access_token()
        except CatalogUnavailableError as exc:
            log.warning("Spotify connection test failed: %s", exc)
            return False
        return True

    async def _get(self, path: str, *, params: dict[str, Any] | None = None) -> httpx.Response:
        token = await self._access_token()
        try:
            response = await self._http().get(
                path,
                params=params,
                headers={"Authorization": f"Bearer {token}"},
            )
        except httpx.HTTPError as exc:
            raise CatalogUnavailableError(CATALOG_NAME, f"request to {path} failed: {exc}") from exc
        if response.status_code == httpx.codes.UNAUTHORIZED:
            # Token revoked or expired early; the next call fetches a new one.
            self._token = None
        return response

    async def _access_token(self) -> str:
        token = self._token
        if token is not None and token.is_usable(self._clock()):
            return token.value
        token = await self._request_token()
        self._token = token
        return token.value

    async def _request_token(self) -> AccessToken:
        requested_at = self._clock()
        try:
            response = await self._http().post(
                self._config.auth_url,
                data={"grant_type": "client_credentials"},
                auth=(self._config.client_id, self._config.client_secret),
            )
        except httpx.HTTPError as exc:
            raise CatalogUnavailableError(CATALOG_NAME, f"token request failed: {exc}") from exc
        if response.status_code != httpx.codes.OK:
            raise CatalogUnavailableError(
                CATALOG_NAME, f"token request rejected with status {response.status_code}"
            )
        payload = self._validate(TokenResponse, response)
        log.debug("Obtained Spotify access token valid for %ss", payload.expires_in)
        return AccessToken(
            value=payload.access_token,
            expires_at=requested_at + timedelta(seconds=payload.expires_in),
        )

    def _http(self) -> ResilientClient:
        if self._client is None:
            self._client = self._client_factory(self._config.resilience)
        return self._client

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        if response.is_success:
            return
        raise CatalogUnavailableError(
            CATALOG_NAME,
            f"{response.request.method} {response.request.url.path} "
            f"returned status {response.status_code}",
        )

    @staticmethod
    def _validate[TModel: BaseModel](
        model: type[TModel], response: httpx.Response
    ) -> TModel:
        try:
            return model.model_validate(response.json())
        except (json.JSONDecodeError, ValidationError) as exc:
            raise CatalogUnavailableError(CATALOG_NAME, f"unexpected payload: {exc}") from exc


def _page_size(limit: int) -> int:
    return max(1, min(limit, MAX_PAGE_SIZE))
