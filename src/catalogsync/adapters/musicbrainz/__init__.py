"""MusicBrainz provider adapter."""

from __future__ import annotations

from .client import MusicBrainzClient, ProviderError

__all__ = [
    "MusicBrainzClient",
    "ProviderError",
]
