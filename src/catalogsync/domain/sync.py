"""End-to-end import of one artist's studio albums.

States, in order::

    RESOLVE_ARTIST -> FETCH_GROUPS -> (SELECT_EDITION -> HYDRATE_TRACKS -> WRITE_RELEASE)* -> DONE

Failures before FETCH_GROUPS completes abort the import. Per release group,
provider failures skip that group and write conflicts fail it; the loop always
moves on to the next group.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from catalogsync.domain.catalog_writer import CatalogWriter, ReleasePlan, TrackPlan
from catalogsync.domain.credits import extract_feature_credits, has_primary_credit, primary_keys_for
from catalogsync.domain.errors import ArtistNotFoundError, ImportCancelled, WriteConflictError
from catalogsync.domain.model import ReleaseOutcomeStatus
from catalogsync.domain.ports.fetching import ProviderError
from catalogsync.domain.release_filter import FilterOptions, filter_groups
from catalogsync.domain.resolution import ArtistIdentity, PendingRows, select_edition
from catalogsync.domain.text import quoted_field

if TYPE_CHECKING:
    from catalogsync.adapters.musicbrainz.schema import (
        MusicBrainzArtist,
        MusicBrainzRelease,
        MusicBrainzReleaseGroup,
        MusicBrainzTrack,
    )
    from catalogsync.domain.ports.fetching import ArtistCatalogProvider
    from catalogsync.domain.ports.unit_of_work import CatalogUnitOfWork

log = getLogger(__name__)

ARTIST_SEARCH_LIMIT = 10

type ArtistChooser = Callable[[Sequence[MusicBrainzArtist]], MusicBrainzArtist | None]
type UnitOfWorkFactory = Callable[[], CatalogUnitOfWork]


class SyncState(StrEnum):
    RESOLVE_ARTIST = "resolve-artist"
    FETCH_GROUPS = "fetch-groups"
    SELECT_EDITION = "select-edition"
    HYDRATE_TRACKS = "hydrate-tracks"
    WRITE_RELEASE = "write-release"
    DONE = "done"


@dataclass(frozen=True, slots=True)
class ReleaseOutcome:
    group_mbid: str
    title: str
    year: int | None
    status: ReleaseOutcomeStatus
    slug: str | None = None
    detail: str | None = None


@dataclass(slots=True)
class ImportReport:
    artist: ArtistIdentity
    dry_run: bool = False
    outcomes: list[ReleaseOutcome] = field(default_factory=list)

    @property
    def imported(self) -> int:
        return self._count(ReleaseOutcomeStatus.IMPORTED)

    @property
    def skipped(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status.is_skip)

    @property
    def failed(self) -> int:
        return self._count(ReleaseOutcomeStatus.FAILED_WRITE)

    def _count(self, status: ReleaseOutcomeStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is status)


def choose_first(candidates: Sequence[MusicBrainzArtist]) -> MusicBrainzArtist | None:
    return candidates[0] if candidates else None


def duration_seconds(length_ms: int | None) -> int | None:
    """Whole seconds, rounded half up."""

    if length_ms is None or length_ms < 0:
        return None
    return (length_ms + 500) // 1000


def track_write_title(track: MusicBrainzTrack, fallback_no: int) -> str:
    for candidate in (track.recording.title if track.recording else None, track.title):
        if candidate and candidate.strip():
            return candidate.strip()
    return f"Track {fallback_no}"


def build_release_plan(
    artist: ArtistIdentity,
    group: MusicBrainzReleaseGroup,
    release: MusicBrainzRelease,
) -> ReleasePlan:
    """Translate a hydrated edition into a write plan for ``artist``."""

    primary_keys = primary_keys_for([artist.name])
    primary_ids = frozenset({artist.mbid}) if artist.mbid else frozenset()

    tracks: list[TrackPlan] = []
    for medium_index, medium in enumerate(release.media, start=1):
        disc_no = medium.position or medium_index
        for track_index, track in enumerate(medium.tracks, start=1):
            track_no = track.position or track_index
            features = extract_feature_credits(track, primary_keys, primary_ids=primary_ids)
            tracks.append(
                TrackPlan(
                    disc_no=disc_no,
                    track_no=track_no,
                    title=track_write_title(track, track_no),
                    duration_seconds=duration_seconds(track.length_ms),
                    credits_primary=has_primary_credit(
                        track, primary_keys, primary_ids=primary_ids
                    ),
                    features=tuple(
                        ArtistIdentity(name=feature.name, mbid=feature.mbid)
                        for feature in features
                    ),
                )
            )

    return ReleasePlan(
        artist=artist,
        title=group.title or release.title,
        year=group.year,
        mbid=group.id,
        tracks=tuple(tracks),
    )


class ArtistImporter:
    """Drive one artist import through the sync states."""

    def __init__(
        self,
        *,
        provider: ArtistCatalogProvider,
        unit_of_work_factory: UnitOfWorkFactory,
        chooser: ArtistChooser | None = None,
        options: FilterOptions | None = None,
        dry_run: bool = False,
    ) -> None:
        self.provider = provider
        self.unit_of_work_factory = unit_of_work_factory
        self.chooser = chooser or choose_first
        self.options = options or FilterOptions()
        self.dry_run = dry_run
        self.state = SyncState.RESOLVE_ARTIST
        self._pending = PendingRows()

    async def run(self, query: str) -> ImportReport:
        log.info("Importing %s%s", query, " (dry-run)" if self.dry_run else "")

        self.state = SyncState.RESOLVE_ARTIST
        chosen = await self.resolve_artist(query)
        identity = ArtistIdentity(name=(chosen.name or query).strip(), mbid=chosen.id)
        log.info("MusicBrainz artist: %s (%s)", identity.name, identity.mbid)

        self.state = SyncState.FETCH_GROUPS
        groups = await self.fetch_groups(identity)
        log.info("Studio album groups (filtered): %d", len(groups))

        report = ImportReport(artist=identity, dry_run=self.dry_run)
        for group in groups:
            outcome = await self.import_group(identity, group)
            report.outcomes.append(outcome)
            _log_outcome(outcome)

        self.state = SyncState.DONE
        log.info(
            "Done. Imported: %d. Skipped: %d. Failed: %d.",
            report.imported,
            report.skipped,
            report.failed,
        )
        return report

    async def resolve_artist(self, query: str) -> MusicBrainzArtist:
        result = await self.provider.search_artists(
            query=quoted_field("artist", query), limit=ARTIST_SEARCH_LIMIT
        )
        candidates = sorted(
            (artist for artist in result.artists if artist.id and artist.name),
            key=lambda artist: artist.score or 0,
            reverse=True,
        )
        if not candidates:
            raise ArtistNotFoundError(query)

        chosen = self.chooser(candidates)
        if chosen is None:
            raise ImportCancelled(f"Import of {query!r} cancelled")
        return chosen

    async def fetch_groups(self, artist: ArtistIdentity) -> list[MusicBrainzReleaseGroup]:
        if artist.mbid is None:
            raise ArtistNotFoundError(artist.name)
        browse = await self.provider.browse_release_groups(artist_mbid=artist.mbid)
        return filter_groups(browse.release_groups, self.options)

    async def import_group(
        self,
        artist: ArtistIdentity,
        group: MusicBrainzReleaseGroup,
    ) -> ReleaseOutcome:
        def outcome(status: ReleaseOutcomeStatus, **extra: str | None) -> ReleaseOutcome:
            return ReleaseOutcome(
                group_mbid=group.id, title=group.title, year=group.year, status=status, **extra
            )

        try:
            self.state = SyncState.SELECT_EDITION
            editions = await self.provider.browse_official_releases(release_group_mbid=group.id)
            edition = select_edition(editions.releases)
            if edition is None:
                return outcome(ReleaseOutcomeStatus.SKIPPED_NO_OFFICIAL)

            self.state = SyncState.HYDRATE_TRACKS
            release = await self.provider.fetch_release(mbid=edition.id)
        except ProviderError as exc:
            log.warning("Provider error for %s: %s", group.title, exc)
            return outcome(ReleaseOutcomeStatus.SKIPPED_PROVIDER_ERROR, detail=str(exc))

        self.state = SyncState.WRITE_RELEASE
        plan = build_release_plan(artist, group, release)
        try:
            slug = self.write(plan)
        except WriteConflictError as exc:
            log.exception("Write failed for %s", group.title)
            return outcome(ReleaseOutcomeStatus.FAILED_WRITE, detail=str(exc))
        return outcome(ReleaseOutcomeStatus.IMPORTED, slug=slug)

    def write(self, plan: ReleasePlan) -> str:
        """Write one release in its own unit of work; return its slug."""

        with self.unit_of_work_factory() as uow:
            writer = CatalogWriter(uow.repositories, dry_run=self.dry_run, pending=self._pending)
            written = writer.write_release(plan)
            if not self.dry_run:
                uow.commit()
        return written.release.slug


def _log_outcome(outcome: ReleaseOutcome) -> None:
    label = f"{outcome.title} ({outcome.year or '-'})"
    if outcome.status is ReleaseOutcomeStatus.IMPORTED:
        log.info("  * %s imported as %s", label, outcome.slug)
    elif outcome.status is ReleaseOutcomeStatus.SKIPPED_NO_OFFICIAL:
        log.info("  * %s: no official release found, skipping", label)
    elif outcome.status is ReleaseOutcomeStatus.SKIPPED_PROVIDER_ERROR:
        log.info("  * %s: provider error, skipping", label)
    else:
        log.info("  * %s: write failed", label)


async def import_artist(
    query: str,
    *,
    provider: ArtistCatalogProvider,
    unit_of_work_factory: UnitOfWorkFactory,
    chooser: ArtistChooser | None = None,
    options: FilterOptions | None = None,
    dry_run: bool = False,
) -> ImportReport:
    importer = ArtistImporter(
        provider=provider,
        unit_of_work_factory=unit_of_work_factory,
        chooser=chooser,
        options=options,
        dry_run=dry_run,
    )
    return await importer.run(query)
