"""MusicBrainz configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Final

from .errors import ConfigurationError
from .http_resilience import CacheConfig, RateLimit, ResilienceConfig, RetryPolicy
from .storage import get_storage_config

DEFAULT_MUSICBRAINZ_BASE_URL: Final[str] = "https://musicbrainz.org/ws/2"
DEFAULT_APP_NAME: Final[str] = "HowManyMics/1.0"
DEFAULT_CONTACT: Final[str] = "contact: admin@example.com"
DEFAULT_REQUEST_DELAY_SECONDS: Final[float] = 1.1


@dataclass(frozen=True, slots=True)
class MusicBrainzConfig:
    resilience: ResilienceConfig

    @property
    def request_delay_seconds(self) -> float:
        ratelimit = self.resilience.ratelimit
        return ratelimit.delay_seconds if ratelimit is not None else 0.0

    @property
    def user_agent(self) -> str | None:
        headers = self.resilience.default_headers or {}
        return headers.get("User-Agent")


def _request_delay() -> float:
    raw = os.getenv("MUSICBRAINZ_REQUEST_DELAY")
    if raw is None or not raw.strip():
        return DEFAULT_REQUEST_DELAY_SECONDS
    try:
        delay = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid MUSICBRAINZ_REQUEST_DELAY: {raw!r}") from exc
    if delay < 0:
        raise ConfigurationError("MUSICBRAINZ_REQUEST_DELAY must be non-negative")
    return delay


def _cache_config() -> CacheConfig | None:
    mode = (os.getenv("MUSICBRAINZ_HTTP_CACHE") or "off").strip().lower()
    if mode in {"", "off", "0", "false", "no"}:
        return None
    if mode == "sqlite":
        path = get_storage_config().http_cache_path()
        return CacheConfig(enabled=True, backend="sqlite", sqlite_path=str(path))
    raise ConfigurationError(f"Unsupported MUSICBRAINZ_HTTP_CACHE mode: {mode!r}")


def get_musicbrainz_config() -> MusicBrainzConfig:
    app_name = (os.getenv("MUSICBRAINZ_APP_NAME") or DEFAULT_APP_NAME).strip()
    contact = (os.getenv("MUSICBRAINZ_CONTACT") or DEFAULT_CONTACT).strip()
    user_agent = f"{app_name} ({contact})"
    base_url = (os.getenv("MUSICBRAINZ_BASE_URL") or DEFAULT_MUSICBRAINZ_BASE_URL).rstrip("/")

    resilience = ResilienceConfig(
        name="musicbrainz",
        base_url=base_url,
        ratelimit=RateLimit(delay_seconds=_request_delay()),
        retry=RetryPolicy(total=0),
        cache=_cache_config(),
        default_headers={"User-Agent": user_agent, "Accept": "application/json"},
    )

    return MusicBrainzConfig(resilience=resilience)
