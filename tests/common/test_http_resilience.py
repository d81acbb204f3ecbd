from __future__ import annotations

import pytest

from releaseradar.adapters.http_resilience import (
    USER_AGENT,
    ResilientClient,
    _build_cache_components,  # type: ignore[reportPrivateUsage]
    _ShouldCacheResponseFilter,  # type: ignore[reportPrivateUsage]
    build_retry,
)
from releaseradar.config import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy


def test_build_retry_copies_policy() -> None:
    retry = build_retry(RetryPolicy(total=2, status_forcelist=frozenset({503})))

    assert retry.total == 2
    assert retry.is_retryable_status_code(503)
    assert not retry.is_retryable_status_code(500)


def test_cache_components_are_skipped_without_cache() -> None:
    assert _build_cache_components(None) == (None, None)
    assert _build_cache_components(CacheConfig(enabled=False)) == (None, None)


def test_cache_components_reject_unknown_backend() -> None:
    with pytest.raises(ValueError, match="Unsupported cache backend"):
        _build_cache_components(CacheConfig(backend="redis"))  # type: ignore[arg-type]


def test_should_cache_filter_delegates_to_predicate() -> None:
    def predicate(payload: object) -> bool:
        return not (isinstance(payload, dict) and "error" in payload)

    cache_filter = _ShouldCacheResponseFilter(predicate)

    assert cache_filter.needs_body() is True
    assert cache_filter.apply(None, b'{"data": []}') is True  # type: ignore[arg-type]
    assert cache_filter.apply(None, b'{"error": {"code": 4}}') is False  # type: ignore[arg-type]
    assert cache_filter.apply(None, b"not json") is True  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_resilient_client_builds_with_limiter() -> None:
    config = ResilienceConfig(
        name="test",
        base_url="https://example.test",
        ratelimit=RateLimit(max_calls=1, per_seconds=1.0),
        default_headers={"User-Agent": "releaseradar-tests"},
    )

    async with ResilientClient(config) as client:
        assert client.config is config


@pytest.mark.asyncio
async def test_resilient_client_sends_release_radar_user_agent() -> None:
    async with ResilientClient(ResilienceConfig(name="plain")) as client:
        assert client._client.headers["User-Agent"] == USER_AGENT

    custom = ResilienceConfig(name="custom", default_headers={"User-Agent": "custom/1.0"})
    async with ResilientClient(custom) as client:
        assert client._client.headers["User-Agent"] == "custom/1.0"


def test_rate_limit_rejects_empty_budget() -> None:
    with pytest.raises(ValueError, match="Invalid rate limit"):
        RateLimit(max_calls=0, per_seconds=1.0)
