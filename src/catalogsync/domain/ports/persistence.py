"""Ports for persisting catalog rows."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from catalogsync.domain.model import (
        Artist,
        CreditRole,
        Release,
        ReleaseArtistCredit,
        Track,
        TrackArtistCredit,
    )


@runtime_checkable
class Repository[TEntity](Protocol):
    """Minimal repository contract for a persistent row store."""

    def add(self, entity: TEntity) -> TEntity: ...


@runtime_checkable
class ArtistRepository(Repository["Artist"], Protocol):
    def get(self, artist_id: int) -> Artist | None: ...

    def get_by_mbid(self, mbid: str) -> Artist | None: ...

    def get_by_slug(self, slug: str) -> Artist | None: ...

    def find_by_name(self, name: str) -> Artist | None:
        """Case-insensitive exact name match."""
        ...

    def set_mbid(self, artist: Artist, mbid: str) -> None: ...


@runtime_checkable
class ReleaseRepository(Repository["Release"], Protocol):
    def get_by_mbid(self, mbid: str) -> Release | None: ...

    def get_by_slug(self, slug: str) -> Release | None: ...

    def set_mbid(self, release: Release, mbid: str) -> None: ...

    def set_artist(self, release: Release, artist_id: int) -> None: ...


@runtime_checkable
class TrackRepository(Repository["Track"], Protocol):
    def get_at(self, *, release_id: int, disc_no: int, track_no: int) -> Track | None: ...

    def update(self, track: Track, *, title: str, duration_seconds: int | None) -> Track: ...

    def for_release(self, release_id: int) -> list[Track]: ...


@runtime_checkable
class CreditRepository(Protocol):
    """Link tables, written with conflict-tolerant upserts on their composite keys."""

    def upsert_release_artist(
        self,
        *,
        release_id: int,
        artist_id: int,
        position: int,
        is_primary: bool,
    ) -> None: ...

    def release_artists(self, release_id: int) -> list[ReleaseArtistCredit]: ...

    def upsert_track_artist(self, *, track_id: int, artist_id: int, role: CreditRole) -> None: ...

    def track_artists(self, track_id: int) -> list[TrackArtistCredit]: ...
