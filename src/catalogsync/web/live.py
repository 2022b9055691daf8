"""Live tracklist hydration endpoint."""

from __future__ import annotations

from functools import cache
from logging import getLogger
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from catalogsync.adapters.musicbrainz import MusicBrainzClient
from catalogsync.config import get_musicbrainz_config
from catalogsync.domain.hydration import Tracklist, hydrate_tracklist
from catalogsync.domain.ports.fetching import ReleaseSearchProvider

log = getLogger(__name__)

router = APIRouter()


class TrackEntryResponse(BaseModel):
    title: str
    features: list[str] = Field(default_factory=list)


class TracklistResponse(BaseModel):
    disc1: list[TrackEntryResponse] = Field(default_factory=list)
    disc2: list[TrackEntryResponse] = Field(default_factory=list)

    @classmethod
    def from_tracklist(cls, tracklist: Tracklist) -> TracklistResponse:
        return cls(
            disc1=[TrackEntryResponse(title=t.title, features=t.features) for t in tracklist.disc1],
            disc2=[TrackEntryResponse(title=t.title, features=t.features) for t in tracklist.disc2],
        )


@cache
def get_release_search_provider() -> ReleaseSearchProvider:
    """Process-wide client, so every request shares one rate limiter."""

    return MusicBrainzClient(config=get_musicbrainz_config())


@router.get("/api/mb", response_model=TracklistResponse)
async def live_tracklist(
    provider: Annotated[ReleaseSearchProvider, Depends(get_release_search_provider)],
    title: Annotated[str, Query()] = "",
    primary: Annotated[list[str] | None, Query()] = None,
) -> TracklistResponse:
    tracklist = await hydrate_tracklist(provider, title, primary or [])
    if tracklist.is_empty:
        log.debug("No tracklist found for %r", title)
    return TracklistResponse.from_tracklist(tracklist)
