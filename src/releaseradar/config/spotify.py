"""Spotify configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import optional_env_var, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

SPOTIFY_API_URL = "https://api.spotify.com/v1"
SPOTIFY_AUTH_URL = "https://accounts.spotify.com/api/token"
SPOTIFY_TIMEOUT_SECONDS = 15.0


def default_spotify_resilience() -> ResilienceConfig:
    # Responses depend on the bearer token, so they are never cached.
    return ResilienceConfig(
        name="spotify",
        base_url=SPOTIFY_API_URL,
        timeout_seconds=SPOTIFY_TIMEOUT_SECONDS,
        retry=RetryPolicy(total=3),
        ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
        cache=None,
    )


@dataclass(frozen=True)
class SpotifyConfig:
    client_id: str
    client_secret: str
    market: str | None = None
    auth_url: str = SPOTIFY_AUTH_URL
    resilience: ResilienceConfig = field(default_factory=default_spotify_resilience)


def get_spotify_config(*, resilience: ResilienceConfig | None = None) -> SpotifyConfig:
    values = require_env_vars(("SPOTIFY_CLIENT_ID", "SPOTIFY_CLIENT_SECRET"))
    return SpotifyConfig(
        client_id=values["SPOTIFY_CLIENT_ID"],
        client_secret=values["SPOTIFY_CLIENT_SECRET"],
        market=optional_env_var("SPOTIFY_MARKET"),
        resilience=resilience or default_spotify_resilience(),
    )
