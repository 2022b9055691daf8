"""Catalog entities. Rows carry integer ids assigned by the store."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False, kw_only=True)
class Artist:
    name: str
    slug: str
    mbid: str | None = None
    id: int | None = None

    @property
    def is_persisted(self) -> bool:
        return self.id is not None


@dataclass(eq=False, kw_only=True)
class Release:
    title: str
    slug: str
    # legacy single-artist pointer; mirrored by the primary ReleaseArtistCredit
    artist_id: int | None
    year: int | None = None
    mbid: str | None = None
    id: int | None = None

    @property
    def is_persisted(self) -> bool:
        return self.id is not None


@dataclass(eq=False, kw_only=True)
class Track:
    release_id: int
    disc_no: int
    track_no: int
    title: str
    duration_seconds: int | None = None
    id: int | None = None
