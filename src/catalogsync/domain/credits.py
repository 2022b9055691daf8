"""Guest-performer extraction from structured credits and track titles.

Structured artist credits are authoritative but often missing, so the title is
scanned as well. Title parsing is split into small matchers, tried in order:

1. parenthetical ``Song (feat. A, B)``
2. bracketed ``Song [feat. A & B]``
3. trailing ``Song feat. A and B``

The first matcher that captures a non-empty clause wins; the clause is then split
into individual names.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from catalogsync.domain.text import normalize_name

if TYPE_CHECKING:
    from catalogsync.adapters.musicbrainz.schema import MusicBrainzArtistCredit, MusicBrainzTrack

type TitleMatcher = Callable[[str], str | None]

_FEAT_MARKER = r"\b(?:featuring|feat\.|ft\.)"
_PARENTHETICAL = re.compile(rf"\(\s*{_FEAT_MARKER}\s+([^)]+)\)", re.IGNORECASE)
_BRACKETED = re.compile(rf"\[\s*{_FEAT_MARKER}\s+([^\]]+)\]", re.IGNORECASE)
_TRAILING = re.compile(rf"{_FEAT_MARKER}\s+(.+)$", re.IGNORECASE)
_NAME_SEPARATORS = re.compile(r",|&|;|·|•|\s+and\s+", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class FeatureCredit:
    """A guest name, with the provider artist id when a structured credit supplied one."""

    name: str
    mbid: str | None = None

    @property
    def key(self) -> str:
        return normalize_name(self.name)


def match_parenthetical(title: str) -> str | None:
    found = _PARENTHETICAL.search(title)
    return found.group(1) if found else None


def match_bracketed(title: str) -> str | None:
    found = _BRACKETED.search(title)
    return found.group(1) if found else None


def match_trailing(title: str) -> str | None:
    found = _TRAILING.search(title)
    if found is None:
        return None
    # "Song feat. A (Remix)": the qualifier after the names is not a guest
    return re.split(r"[()\[\]]", found.group(1), maxsplit=1)[0]


TITLE_MATCHERS: tuple[TitleMatcher, ...] = (match_parenthetical, match_bracketed, match_trailing)


def split_feature_names(clause: str) -> list[str]:
    return [part.strip() for part in _NAME_SEPARATORS.split(clause) if part.strip()]


def parse_title_features(
    title: str | None,
    matchers: Sequence[TitleMatcher] = TITLE_MATCHERS,
) -> list[str]:
    """Return the guest names embedded in ``title`` (possibly empty)."""

    if not title:
        return []
    for matcher in matchers:
        clause = matcher(title)
        if clause and clause.strip():
            return split_feature_names(clause)
    return []


def credit_name(credit: MusicBrainzArtistCredit) -> str | None:
    """Credited name, else the nested artist's name, else a bare-string artist."""

    if credit.name and credit.name.strip():
        return credit.name.strip()
    artist = credit.artist
    if isinstance(artist, str):
        return artist.strip() or None
    if artist is not None and artist.name and artist.name.strip():
        return artist.name.strip()
    return None


def credit_names(credits: Iterable[MusicBrainzArtistCredit]) -> list[str]:
    return [name for credit in credits if (name := credit_name(credit))]


def track_title(track: MusicBrainzTrack) -> str | None:
    for candidate in (track.title, track.recording.title if track.recording else None):
        if candidate and candidate.strip():
            return candidate.strip()
    return None


def primary_keys_for(names: Iterable[str]) -> frozenset[str]:
    return frozenset(key for name in names if (key := normalize_name(name)))


def extract_feature_credits(
    track: MusicBrainzTrack,
    primary_keys: frozenset[str],
    *,
    primary_ids: frozenset[str] = frozenset(),
) -> list[FeatureCredit]:
    """Merge structured and title-derived guests, first-seen order, no duplicates.

    A name is dropped when it normalizes to one of ``primary_keys`` or, for
    structured credits, when its provider id is one of ``primary_ids``.
    """

    candidates: list[FeatureCredit] = []
    for credit in track.effective_credits:
        name = credit_name(credit)
        if name is None:
            continue
        if credit.artist_id is not None and credit.artist_id in primary_ids:
            continue
        candidates.append(FeatureCredit(name=name, mbid=credit.artist_id))
    candidates.extend(FeatureCredit(name=name) for name in parse_title_features(track_title(track)))

    seen: set[str] = set()
    features: list[FeatureCredit] = []
    for candidate in candidates:
        key = candidate.key
        if not key or key in primary_keys or key in seen:
            continue
        seen.add(key)
        features.append(candidate)
    return features


def extract_features(track: MusicBrainzTrack, primary_keys: frozenset[str]) -> list[str]:
    return [feature.name for feature in extract_feature_credits(track, primary_keys)]


def has_primary_credit(
    track: MusicBrainzTrack,
    primary_keys: frozenset[str],
    *,
    primary_ids: frozenset[str] = frozenset(),
) -> bool:
    """Whether the track's structured credits name one of the primary artists."""

    for credit in track.effective_credits:
        if credit.artist_id is not None and credit.artist_id in primary_ids:
            return True
        name = credit_name(credit)
        if name is not None and normalize_name(name) in primary_keys:
            return True
    return False
