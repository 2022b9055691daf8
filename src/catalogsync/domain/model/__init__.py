"""Catalog domain model."""

from __future__ import annotations

from .associations import ReleaseArtistCredit, TrackArtistCredit
from .enums import ArtistMatch, CreditRole, ReleaseOutcomeStatus
from .music import Artist, Release, Track

__all__ = [
    "Artist",
    "ArtistMatch",
    "CreditRole",
    "Release",
    "ReleaseArtistCredit",
    "ReleaseOutcomeStatus",
    "Track",
    "TrackArtistCredit",
]
