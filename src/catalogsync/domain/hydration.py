"""On-demand tracklist lookup for a single release title.

Search results are ranked by hydrating a few candidates and scoring each by
track count, with a bonus when tracks carry artist credits. Provider failures
never propagate: the caller gets an empty tracklist instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

from catalogsync.domain.credits import extract_features, primary_keys_for
from catalogsync.domain.ports.fetching import ProviderError
from catalogsync.domain.text import quoted_field

if TYPE_CHECKING:
    from collections.abc import Sequence

    from catalogsync.adapters.musicbrainz.schema import MusicBrainzRelease, MusicBrainzTrack
    from catalogsync.domain.ports.fetching import ReleaseSearchProvider

log = getLogger(__name__)

SEARCH_LIMIT: Final[int] = 5
MAX_CANDIDATES: Final[int] = 5
CREDIT_BONUS: Final[int] = 5


@dataclass(frozen=True, slots=True)
class TrackEntry:
    title: str
    features: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class Tracklist:
    disc1: list[TrackEntry] = field(default_factory=list)
    disc2: list[TrackEntry] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.disc1 and not self.disc2


def display_title(track: MusicBrainzTrack) -> str | None:
    for candidate in (track.title, track.recording.title if track.recording else None):
        if candidate and candidate.strip():
            return candidate.strip()
    return None


def discs_from_release(
    release: MusicBrainzRelease,
    primary_keys: frozenset[str],
) -> list[list[TrackEntry]]:
    """One list per medium that has at least one titled track."""

    discs: list[list[TrackEntry]] = []
    for medium in release.media:
        rows = [
            TrackEntry(title=title, features=extract_features(track, primary_keys))
            for track in medium.tracks
            if (title := display_title(track))
        ]
        if rows:
            discs.append(rows)
    return discs


def has_credit_data(release: MusicBrainzRelease) -> bool:
    return any(
        track.artist_credit or (track.recording and track.recording.artist_credit)
        for medium in release.media
        for track in medium.tracks
    )


def score_release(release: MusicBrainzRelease, primary_keys: frozenset[str]) -> int:
    tracks = sum(len(disc) for disc in discs_from_release(release, primary_keys))
    return tracks + (CREDIT_BONUS if has_credit_data(release) else 0)


def release_queries(title: str, primary_names: Sequence[str]) -> list[str]:
    """Scoped query first (when a primary artist is known), then the bare title."""

    title_clause = quoted_field("release", title)
    first_primary = next((name for name in primary_names if name.strip()), None)
    if first_primary is None:
        return [title_clause]
    return [f"{title_clause} AND {quoted_field('artist', first_primary)}", title_clause]


async def hydrate_tracklist(
    provider: ReleaseSearchProvider,
    title: str,
    primary_names: Sequence[str] = (),
) -> Tracklist:
    if not title.strip():
        return Tracklist()

    primary_keys = primary_keys_for(primary_names)
    candidates = await _search_candidates(provider, release_queries(title, primary_names))

    best: MusicBrainzRelease | None = None
    best_score = -1
    for candidate in candidates[:MAX_CANDIDATES]:
        try:
            hydrated = await provider.fetch_release(mbid=candidate.id)
        except ProviderError as exc:
            log.info("Skipping candidate %s: %s", candidate.id, exc)
            continue
        score = score_release(hydrated, primary_keys)
        if score > best_score:
            best, best_score = hydrated, score

    if best is None:
        return Tracklist()
    discs = discs_from_release(best, primary_keys)
    return Tracklist(
        disc1=discs[0] if discs else [],
        disc2=discs[1] if len(discs) > 1 else [],
    )


async def _search_candidates(
    provider: ReleaseSearchProvider,
    queries: Sequence[str],
) -> list[MusicBrainzRelease]:
    """Results of the first query that returns any; a failing scoped query falls through."""

    for query in queries:
        try:
            result = await provider.search_releases(query=query, limit=SEARCH_LIMIT)
        except ProviderError as exc:
            log.warning("Release search %r failed: %s", query, exc)
            continue
        if result.releases:
            return result.releases
    return []
