"""Map external identities onto catalog rows.

Artists are matched by external id, then slug, then case-insensitive name.
Releases are matched by external id, else placed by probing slug candidates::

    madvillainy -> madvillainy-2004 -> madvillainy-2 -> madvillainy-3 -> ...

A candidate already owned by the same artist with the same title (and a
compatible year) is the same release; a free candidate is where a new row goes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final, Protocol

from catalogsync.domain.errors import WriteConflictError
from catalogsync.domain.model import ArtistMatch
from catalogsync.domain.text import normalize_name, slugify

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from catalogsync.domain.model import Artist, Release
    from catalogsync.domain.ports.unit_of_work import CatalogRepositories

log = getLogger(__name__)

MAX_SLUG_CANDIDATES: Final[int] = 25
FALLBACK_RELEASE_SLUG: Final[str] = "release"
FALLBACK_ARTIST_SLUG: Final[str] = "artist"


@dataclass(frozen=True, slots=True)
class ArtistIdentity:
    """An artist as the provider (or a track title) names it."""

    name: str
    mbid: str | None = None

    @property
    def slug(self) -> str:
        return slugify(self.name)


@dataclass(frozen=True, slots=True)
class ReleasePlacement:
    slug: str
    existing: Release | None = None
    match: str | None = None  # "external-id" or "slug"

    @property
    def is_new(self) -> bool:
        return self.existing is None


@dataclass(slots=True)
class PendingRows:
    """Rows a dry run would have created, so later lookups in the same run see them."""

    artists: dict[str, Artist] = field(default_factory=dict)
    releases: dict[str, Release] = field(default_factory=dict)


class EditionLike(Protocol):
    @property
    def country(self) -> str | None: ...

    @property
    def date(self) -> str | None: ...


class EntityResolver:
    def __init__(
        self,
        repositories: CatalogRepositories,
        *,
        pending: PendingRows | None = None,
        max_slug_candidates: int = MAX_SLUG_CANDIDATES,
    ) -> None:
        self.repositories = repositories
        self.pending = pending or PendingRows()
        self.max_slug_candidates = max_slug_candidates

    # Artists -----------------------------------------------------------------

    def find_artist(self, identity: ArtistIdentity) -> tuple[Artist, ArtistMatch] | None:
        artists = self.repositories.artists
        if identity.mbid:
            found = artists.get_by_mbid(identity.mbid)
            if found is not None:
                return found, ArtistMatch.EXTERNAL_ID

        slug = identity.slug
        if slug:
            found = artists.get_by_slug(slug) or self.pending.artists.get(slug)
            if found is not None and _same_external_artist(found, identity):
                return found, ArtistMatch.SLUG

        if identity.name.strip():
            found = artists.find_by_name(identity.name)
            if found is not None and _same_external_artist(found, identity):
                return found, ArtistMatch.NAME
        return None

    def free_artist_slug(self, identity: ArtistIdentity) -> str:
        """First slug not taken by another artist row."""

        base = identity.slug or FALLBACK_ARTIST_SLUG
        for candidate in _counter_candidates(base, self.max_slug_candidates):
            if not self._artist_slug_taken(candidate):
                return candidate
        raise WriteConflictError(f"No free artist slug for {identity.name!r} (base {base!r})")

    def _artist_slug_taken(self, slug: str) -> bool:
        return (
            self.repositories.artists.get_by_slug(slug) is not None
            or slug in self.pending.artists
        )

    # Releases ----------------------------------------------------------------

    def plan_release(
        self,
        *,
        artist_id: int | None,
        title: str,
        year: int | None,
        mbid: str | None = None,
    ) -> ReleasePlacement:
        if mbid:
            found = self.repositories.releases.get_by_mbid(mbid)
            if found is not None:
                return ReleasePlacement(slug=found.slug, existing=found, match="external-id")

        key = normalize_name(title)
        for candidate in release_slug_candidates(title, year, limit=self.max_slug_candidates):
            existing = self._release_at(candidate)
            if existing is None:
                return ReleasePlacement(slug=candidate)
            if _is_same_release(existing, artist_id=artist_id, key=key, year=year, mbid=mbid):
                return ReleasePlacement(slug=candidate, existing=existing, match="slug")
            log.debug("Release slug %s is taken by %r", candidate, existing.title)

        raise WriteConflictError(
            f"No free release slug for {title!r} after {self.max_slug_candidates} candidates"
        )

    def _release_at(self, slug: str) -> Release | None:
        return self.repositories.releases.get_by_slug(slug) or self.pending.releases.get(slug)


def release_slug_candidates(title: str, year: int | None, *, limit: int) -> Iterator[str]:
    base = slugify(title) or FALLBACK_RELEASE_SLUG
    emitted = 0
    candidates = _counter_candidates(base, limit)
    first = next(candidates)
    yield first
    emitted += 1
    if year is not None and emitted < limit:
        yield f"{base}-{year}"
        emitted += 1
    for candidate in candidates:
        if emitted >= limit:
            return
        yield candidate
        emitted += 1


def _counter_candidates(base: str, limit: int) -> Iterator[str]:
    yield base
    for counter in range(2, limit + 1):
        yield f"{base}-{counter}"


def _same_external_artist(artist: Artist, identity: ArtistIdentity) -> bool:
    # a row already bound to another provider id is a namesake, not a match
    return artist.mbid is None or identity.mbid is None or artist.mbid == identity.mbid


def _is_same_release(
    existing: Release,
    *,
    artist_id: int | None,
    key: str,
    year: int | None,
    mbid: str | None,
) -> bool:
    if existing.mbid and mbid and existing.mbid != mbid:
        return False
    if existing.artist_id != artist_id:
        return False
    if normalize_name(existing.title) != key:
        return False
    return existing.year is None or year is None or existing.year == year


def select_edition[TEdition: EditionLike](editions: Sequence[TEdition]) -> TEdition | None:
    """Pick the edition to import: US first, else the latest dated, else the first."""

    if not editions:
        return None
    for edition in editions:
        if edition.country == "US":
            return edition
    # sorted() is stable under reverse=True, so undated editions keep input order
    return sorted(editions, key=lambda edition: edition.date or "", reverse=True)[0]
