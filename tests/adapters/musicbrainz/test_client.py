"""MusicBrainz client checks against an in-process transport."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import httpx
import pytest

from catalogsync.adapters.http_resilience import RateLimiter, ResilientClient
from catalogsync.adapters.musicbrainz import MusicBrainzClient, ProviderError
from catalogsync.config.http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from catalogsync.config.musicbrainz import MusicBrainzConfig

if TYPE_CHECKING:
    from collections.abc import Callable

BASE_URL = "https://mb.test/ws/2"
USER_AGENT = "HowManyMics/1.0 (contact: tests@example.com)"

type Handler = Callable[[httpx.Request], httpx.Response]


def _config(delay: float = 1.1) -> MusicBrainzConfig:
    return MusicBrainzConfig(
        resilience=ResilienceConfig(
            name="musicbrainz",
            base_url=BASE_URL,
            ratelimit=RateLimit(delay_seconds=delay),
            retry=RetryPolicy(total=0),
            default_headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
        )
    )


def _client(handler: Handler, sleeps: list[float]) -> MusicBrainzClient:
    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    limiter = RateLimiter(1.1, sleep=fake_sleep)
    transport = httpx.MockTransport(handler)
    return MusicBrainzClient(
        config=_config(),
        limiter=limiter,
        client_factory=lambda resilience: ResilientClient(
            resilience, limiter=limiter, transport=transport
        ),
    )


def test_search_artists_sends_query_and_headers() -> None:
    seen: list[httpx.Request] = []
    sleeps: list[float] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"count": 1, "artists": [{"id": "a-1", "name": "Nas", "score": 100}]},
        )

    client = _client(handler, sleeps)
    result = asyncio.run(client.search_artists(query='artist:"Nas"'))

    assert [a.name for a in result.artists] == ["Nas"]
    request = seen[0]
    assert request.url.path == "/ws/2/artist"
    assert request.url.params["fmt"] == "json"
    assert request.url.params["query"] == 'artist:"Nas"'
    assert request.url.params["limit"] == "10"
    assert request.headers["User-Agent"] == USER_AGENT
    assert request.headers["Accept"] == "application/json"
    assert sleeps == [1.1]


def test_every_call_waits_the_full_delay() -> None:
    sleeps: list[float] = []

    def handler(request: httpx.Request) -> httpx.Response:
        del request
        return httpx.Response(200, json={"release-groups": []})

    client = _client(handler, sleeps)

    async def three_calls() -> None:
        for _ in range(3):
            await client.browse_release_groups(artist_mbid="a-1")

    asyncio.run(three_calls())

    assert sleeps == [1.1, 1.1, 1.1]
    assert client.limiter.calls == 3


def test_browse_endpoints_use_documented_parameters() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        if request.url.path.endswith("release-group"):
            return httpx.Response(200, json={"release-groups": []})
        return httpx.Response(200, json={"releases": []})

    client = _client(handler, [])

    async def calls() -> None:
        await client.browse_release_groups(artist_mbid="a-1")
        await client.browse_official_releases(release_group_mbid="rg-1")

    asyncio.run(calls())

    groups, editions = seen
    assert groups.url.params["artist"] == "a-1"
    assert groups.url.params["type"] == "album"
    assert groups.url.params["limit"] == "100"
    assert editions.url.path == "/ws/2/release"
    assert editions.url.params["release-group"] == "rg-1"
    assert editions.url.params["status"] == "official"


def test_fetch_release_requests_recordings_and_credits() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"id": "r-1", "title": "Illmatic", "media": []})

    client = _client(handler, [])
    result = asyncio.run(client.fetch_release(mbid="r-1"))

    assert result.title == "Illmatic"
    assert seen[0].url.path == "/ws/2/release/r-1"
    assert seen[0].url.params["inc"] == "recordings+artist-credits+media"


def test_non_success_status_raises_provider_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        del request
        return httpx.Response(503, text="slow down")

    client = _client(handler, [])

    with pytest.raises(ProviderError) as exc:
        asyncio.run(client.search_releases(query='release:"Illmatic"'))

    assert exc.value.status == 503
    assert exc.value.url is not None
    assert "/ws/2/release" in exc.value.url


def test_non_json_body_raises_provider_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        del request
        return httpx.Response(200, text="<html>maintenance</html>")

    client = _client(handler, [])

    with pytest.raises(ProviderError) as exc:
        asyncio.run(client.fetch_release(mbid="r-1"))

    assert exc.value.status == 200


def test_non_object_body_raises_provider_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        del request
        return httpx.Response(200, json=["not", "an", "object"])

    client = _client(handler, [])

    with pytest.raises(ProviderError):
        asyncio.run(client.search_artists(query="x"))


def test_transport_failure_raises_provider_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler, [])

    with pytest.raises(ProviderError) as exc:
        asyncio.run(client.search_artists(query="x"))

    assert exc.value.status is None


def test_payload_failing_validation_raises_provider_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        del request
        return httpx.Response(200, json={"title": "no id"})

    client = _client(handler, [])

    with pytest.raises(ProviderError):
        asyncio.run(client.fetch_release(mbid="r-1"))


def test_rate_limiter_skips_sleep_when_delay_is_zero() -> None:
    sleeps: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    limiter = RateLimiter(0, sleep=fake_sleep)

    async def use() -> None:
        async with limiter:
            pass
        await limiter.acquire()

    asyncio.run(use())

    assert sleeps == []
    assert limiter.calls == 2


def test_rate_limiter_rejects_negative_delay() -> None:
    with pytest.raises(ValueError, match="non-negative"):
        RateLimiter(-0.5)
