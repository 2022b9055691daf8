"""Link entities between catalog rows, keyed by their natural composite keys."""

from __future__ import annotations

from dataclasses import dataclass

from catalogsync.domain.model.enums import CreditRole


@dataclass(frozen=True, slots=True)
class ReleaseArtistCredit:
    release_id: int
    artist_id: int
    position: int
    is_primary: bool


@dataclass(frozen=True, slots=True)
class TrackArtistCredit:
    track_id: int
    artist_id: int
    role: CreditRole
