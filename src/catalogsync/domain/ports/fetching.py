"""Ports for fetching external catalog metadata."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from catalogsync.adapters.musicbrainz.schema import (
        MusicBrainzArtistSearch,
        MusicBrainzRelease,
        MusicBrainzReleaseGroupBrowse,
        MusicBrainzReleaseList,
    )


class ProviderError(RuntimeError):
    """Raised when the metadata provider answers with a failure or an unusable payload."""

    def __init__(self, message: str, *, status: int | None = None, url: str | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.url = url


@runtime_checkable
class ArtistCatalogProvider(Protocol):
    """Provider calls needed for a full artist import."""

    async def search_artists(self, *, query: str, limit: int = 10) -> MusicBrainzArtistSearch: ...

    async def browse_release_groups(
        self,
        *,
        artist_mbid: str,
        release_type: str = "album",
        limit: int = 100,
    ) -> MusicBrainzReleaseGroupBrowse: ...

    async def browse_official_releases(
        self,
        *,
        release_group_mbid: str,
        limit: int = 100,
    ) -> MusicBrainzReleaseList: ...

    async def fetch_release(self, *, mbid: str) -> MusicBrainzRelease: ...


@runtime_checkable
class ReleaseSearchProvider(Protocol):
    """Provider calls needed to hydrate a single release on demand."""

    async def search_releases(self, *, query: str, limit: int = 5) -> MusicBrainzReleaseList: ...

    async def fetch_release(self, *, mbid: str) -> MusicBrainzRelease: ...
