"""SendGrid REST client."""

from __future__ import annotations

import json
from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx
from pydantic import ValidationError

from releaseradar.adapters.http_resilience import default_client_factory

from .schema import Content, EmailAddress, MailPayload, Personalization, SendGridErrorResponse

if TYPE_CHECKING:
    from releaseradar.adapters.http_resilience import ClientFactory, ResilientClient
    from releaseradar.config.email import EmailConfig

log = getLogger(__name__)

_ACCEPTED_STATUSES: Final[frozenset[int]] = frozenset({200, 202})


class SendGridClient:
    """Sends single-recipient emails; failures are logged and reported as ``False``."""

    def __init__(
        self,
        *,
        config: EmailConfig,
        client_factory: ClientFactory = default_client_factory,
    ) -> None:
        self._config = config
        self._client_factory = client_factory
        self._client: ResilientClient | None = None

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def send(
        self,
        to: str,
        subject: str,
        html: str,
        text: str | None = None,
        *,
        to_name: str | None = None,
    ) -> bool:
        content: list[Content] = []
        # SendGrid requires text/plain to precede text/html.
        if text is not None:
            content.append(Content(type="text/plain", value=text))
        content.append(Content(type="text/html", value=html))
        payload = MailPayload(
            personalizations=[
                Personalization(to=[EmailAddress(email=to, name=to_name)], subject=subject)
            ],
            from_=EmailAddress(email=self._config.from_address, name=self._config.from_name),
            content=content,
        )

        try:
            response = await self._http().post(
                "/mail/send", json=payload.to_request_json(), headers=self._auth_headers
            )
        except httpx.HTTPError as exc:
            log.error("Email to %s failed: %s", to, exc)
            return False

        if response.status_code in _ACCEPTED_STATUSES:
            log.info("Email sent to %s: %s", to, response.status_code)
            return True

        log.error(
            "Email to %s rejected: %s %s", to, response.status_code, _describe_errors(response)
        )
        return False

    async def test_connection(self) -> bool:
        try:
            response = await self._http().get("/user/profile", headers=self._auth_headers)
        except httpx.HTTPError as exc:
            log.warning("SendGrid connection test failed: %s", exc)
            return False
        if not response.is_success:
            log.warning("SendGrid connection test failed: %s", response.status_code)
        return response.is_success

    def _http(self) -> ResilientClient:
        if self._client is None:
            self._client = self._client_factory(self._config.resilience)
        return self._client

    @property
    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._config.api_key}"}


def _describe_errors(response: httpx.Response) -> str:
    try:
        errors = SendGridErrorResponse.model_validate(response.json()).errors
    except (json.JSONDecodeError, ValidationError):
        return response.text
    return "; ".join(error.message or "unknown error" for error in errors) or response.text
