"""MusicBrainz API client."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import BaseModel, ValidationError

from catalogsync.adapters.http_resilience import RateLimiter, ResilientClient
from catalogsync.domain.ports.fetching import ProviderError

from .schema import (
    MBEntityType,
    MusicBrainzArtistSearch,
    MusicBrainzRelease,
    MusicBrainzReleaseGroupBrowse,
    MusicBrainzReleaseList,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from catalogsync.config.http_resilience import ResilienceConfig
    from catalogsync.config.musicbrainz import MusicBrainzConfig

log = getLogger(__name__)

RELEASE_INC = ("recordings", "artist-credits", "media")
DEFAULT_BROWSE_LIMIT = 100


class MusicBrainzClient:
    """Rate-limited HTTP client for the MusicBrainz web service.

    Every call waits on the shared :class:`RateLimiter` before it is sent, and no
    call is retried here; callers decide whether to broaden a query, skip the
    item, or abort.
    """

    def __init__(
        self,
        *,
        config: MusicBrainzConfig,
        limiter: RateLimiter | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self.limiter = limiter or RateLimiter(config.request_delay_seconds)
        self._client_factory = client_factory or self._default_client

    def _default_client(self, resilience: ResilienceConfig) -> ResilientClient:
        return ResilientClient(resilience, limiter=self.limiter)

    async def search_artists(self, *, query: str, limit: int = 10) -> MusicBrainzArtistSearch:
        payload = await self.get(
            MBEntityType.ARTIST,
            {"query": query, "limit": str(limit)},
        )
        return _validate(MusicBrainzArtistSearch, payload, path=MBEntityType.ARTIST)

    async def browse_release_groups(
        self,
        *,
        artist_mbid: str,
        release_type: str = "album",
        limit: int = DEFAULT_BROWSE_LIMIT,
    ) -> MusicBrainzReleaseGroupBrowse:
        payload = await self.get(
            MBEntityType.RELEASE_GROUP,
            {"artist": artist_mbid, "type": release_type, "limit": str(limit)},
        )
        return _validate(MusicBrainzReleaseGroupBrowse, payload, path=MBEntityType.RELEASE_GROUP)

    async def browse_official_releases(
        self,
        *,
        release_group_mbid: str,
        limit: int = DEFAULT_BROWSE_LIMIT,
    ) -> MusicBrainzReleaseList:
        payload = await self.get(
            MBEntityType.RELEASE,
            {"release-group": release_group_mbid, "status": "official", "limit": str(limit)},
        )
        return _validate(MusicBrainzReleaseList, payload, path=MBEntityType.RELEASE)

    async def fetch_release(
        self,
        *,
        mbid: str,
        inc: tuple[str, ...] = RELEASE_INC,
    ) -> MusicBrainzRelease:
        path = f"{MBEntityType.RELEASE}/{mbid}"
        params = {"inc": "+".join(inc)} if inc else {}
        payload = await self.get(path, params)
        return _validate(MusicBrainzRelease, payload, path=path)

    async def search_releases(self, *, query: str, limit: int = 5) -> MusicBrainzReleaseList:
        payload = await self.get(MBEntityType.RELEASE, {"query": query, "limit": str(limit)})
        return _validate(MusicBrainzReleaseList, payload, path=MBEntityType.RELEASE)

    async def get(self, path: str, params: dict[str, str]) -> dict[str, object]:
        """Issue one GET and return the decoded JSON object."""

        base_url = self._resilience.base_url
        if base_url is None:
            raise ProviderError("Missing MusicBrainz base_url in resilience configuration")
        query = {"fmt": "json", **params}
        url = f"{base_url}/{path}"

        try:
            async with self._client_factory(self._resilience) as client:
                response = await client.get(path, params=query)
        except httpx.HTTPError as exc:
            raise ProviderError(f"MusicBrainz request failed: {exc}", url=url) from exc

        if not response.is_success:
            raise ProviderError(
                f"MusicBrainz {response.status_code} {response.reason_phrase} {response.url}",
                status=response.status_code,
                url=str(response.url),
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderError(
                "Malformed MusicBrainz response payload",
                status=response.status_code,
                url=str(response.url),
            ) from exc
        if not isinstance(payload, dict):
            raise ProviderError(
                "Unexpected MusicBrainz response payload",
                status=response.status_code,
                url=str(response.url),
            )
        log.debug("MusicBrainz GET %s -> %s", response.url, response.status_code)
        return payload


def _validate[TModel: BaseModel](
    model: type[TModel],
    payload: dict[str, object],
    *,
    path: str,
) -> TModel:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise ProviderError(f"Unexpected MusicBrainz {path} payload: {exc}") from exc
