"""Deezer configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import optional_env_var
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy

DEEZER_API_URL = "https://api.deezer.com"
DEEZER_TIMEOUT_SECONDS = 10.0
DEEZER_CACHE_TTL_SECONDS = 3600.0


def _is_cacheable_payload(payload: object) -> bool:
    # Quota and lookup errors arrive as HTTP 200 with an "error" object.
    return not (isinstance(payload, dict) and "error" in payload)


def default_deezer_resilience(base_url: str = DEEZER_API_URL) -> ResilienceConfig:
    # Deezer documents a quota of 50 requests per 5 seconds.
    return ResilienceConfig(
        name="deezer",
        base_url=base_url,
        timeout_seconds=DEEZER_TIMEOUT_SECONDS,
        retry=RetryPolicy(total=3),
        ratelimit=RateLimit(max_calls=50, per_seconds=5.0),
        cache=CacheConfig(
            backend="memory",
            default_ttl_seconds=DEEZER_CACHE_TTL_SECONDS,
            should_cache=_is_cacheable_payload,
        ),
    )


@dataclass(frozen=True)
class DeezerConfig:
    quota_retries: int = 3
    quota_retry_delay_seconds: float = 5.0
    resilience: ResilienceConfig = field(default_factory=default_deezer_resilience)


def get_deezer_config() -> DeezerConfig:
    base_url = optional_env_var("DEEZER_API_URL", DEEZER_API_URL) or DEEZER_API_URL
    return DeezerConfig(resilience=default_deezer_resilience(base_url))
