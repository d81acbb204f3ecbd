"""Outgoing email configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import optional_env_var, require_env_vars
from .http_resilience import ResilienceConfig, RetryPolicy

SENDGRID_API_URL = "https://api.sendgrid.com/v3"
DEFAULT_FROM_NAME = "Release Radar"


def default_sendgrid_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="sendgrid",
        base_url=SENDGRID_API_URL,
        timeout_seconds=20.0,
        retry=RetryPolicy(total=2),
        cache=None,
    )


@dataclass(frozen=True)
class EmailConfig:
    api_key: str
    from_address: str
    from_name: str = DEFAULT_FROM_NAME
    app_url: str | None = None
    resilience: ResilienceConfig = field(default_factory=default_sendgrid_resilience)


def get_email_config() -> EmailConfig:
    values = require_env_vars(("SENDGRID_API_KEY", "EMAIL_FROM_ADDRESS"))
    return EmailConfig(
        api_key=values["SENDGRID_API_KEY"],
        from_address=values["EMAIL_FROM_ADDRESS"],
        from_name=optional_env_var("EMAIL_FROM_NAME", DEFAULT_FROM_NAME) or DEFAULT_FROM_NAME,
        app_url=optional_env_var("APP_URL"),
    )
