"""HTTP client for the public Deezer API."""

from __future__ import annotations

import asyncio
import json
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final

import httpx
from pydantic import BaseModel, ValidationError

from releaseradar.adapters.http_resilience import default_client_factory
from releaseradar.domain.errors import CatalogUnavailableError

from .schema import (
    NO_DATA_CODE,
    QUOTA_EXCEEDED_CODE,
    ArtistAlbumsResponse,
    ArtistSearchResponse,
    DeezerArtist,
    ErrorResponse,
)
from .translator import translate_album, translate_artist

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from releaseradar.adapters.http_resilience import ClientFactory, ResilientClient
    from releaseradar.config.deezer import DeezerConfig
    from releaseradar.domain.model import CatalogArtist, CatalogRelease

log = getLogger(__name__)

CATALOG_NAME: Final[str] = "deezer"
MAX_PAGE_SIZE: Final[int] = 100
CONNECTION_TEST_ARTIST_ID: Final[str] = "27"


class _NoData(Exception):
    """Deezer answered with its "no data" error for the requested object."""


class DeezerCatalog:
    """Secondary catalog backed by the unauthenticated Deezer API.

    Deezer reports application errors with HTTP 200 and an ``error`` object.
    Quota errors are retried after a pause; any other error becomes
    ``CatalogUnavailableError`` except "no data" on a lookup, which is ``None``.
    """

    def __init__(
        self,
        *,
        config: DeezerConfig,
        client_factory: ClientFactory = default_client_factory,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._config = config
        self._client_factory = client_factory
        self._sleep = sleep
        self._client: ResilientClient | None = None

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def search_artists(self, query: str, limit: int = 20) -> list[CatalogArtist]:
        if not query.strip():
            return []
        try:
            payload = await self._get_json(
                "/search/artist", params={"q": query, "limit": _page_size(limit)}
            )
        except _NoData:
            return []
        result = _validate(ArtistSearchResponse, payload)
        return [translate_artist(item) for item in result.data]

    async def get_artist_by_id(self, artist_id: str) -> CatalogArtist | None:
        try:
            payload = await self._get_json(f"/artist/{artist_id}")
        except _NoData:
            return None
        return translate_artist(_validate(DeezerArtist, payload))

    async def get_artist_albums(self, artist_id: str, limit: int = 50) -> list[CatalogRelease]:
        try:
            payload = await self._get_json(
                f"/artist/{artist_id}/albums", params={"limit": _page_size(limit)}
            )
        except _NoData:
            return []
        result = _validate(ArtistAlbumsResponse, payload)
        return [translate_album(item) for item in result.data]

    async def test_connection(self) -> bool:
        try:
            artist = await self.get_artist_by_id(CONNECTION_TEST_ARTIST_ID)
        except CatalogUnavailableError as exc:
            log.warning("Deezer connection test failed: %s", exc)
            return False
        return artist is not None

    async def _get_json(self, path: str, *, params: dict[str, Any] | None = None) -> object:
        attempt = 0
        while True:
            attempt += 1
            try:
                response = await self._http().get(path, params=params)
                response.raise_for_status()
                payload = response.json()
            except (httpx.HTTPError, json.JSONDecodeError) as exc:
                raise CatalogUnavailableError(CATALOG_NAME, f"GET {path} failed: {exc}") from exc

            if not (isinstance(payload, dict) and "error" in payload):
                return payload

            error = _validate(ErrorResponse, payload).error
            if error.code == NO_DATA_CODE:
                raise _NoData
            if error.code == QUOTA_EXCEEDED_CODE and attempt <= self._config.quota_retries:
                log.warning(
                    "Deezer quota exceeded on %s; retrying in %ss (attempt %s)",
                    path,
                    self._config.quota_retry_delay_seconds,
                    attempt,
                )
                await self._sleep(self._config.quota_retry_delay_seconds)
                continue
            raise CatalogUnavailableError(
                CATALOG_NAME, f"GET {path} returned error {error.code}: {error.message}"
            )

    def _http(self) -> ResilientClient:
        if self._client is None:
            self._client = self._client_factory(self._config.resilience)
        return self._client


def _validate[TModel: BaseModel](model: type[TModel], payload: object) -> TModel:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise CatalogUnavailableError(CATALOG_NAME, f"unexpected payload: {exc}") from exc


def _page_size(limit: int) -> int:
    return max(1, min(limit, MAX_PAGE_SIZE))
