"""Idempotent writes of planned releases into the catalog."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from catalogsync.domain.errors import WriteConflictError
from catalogsync.domain.model import Artist, CreditRole, Release, Track
from catalogsync.domain.resolution import ArtistIdentity, EntityResolver, PendingRows

if TYPE_CHECKING:
    from catalogsync.domain.ports.unit_of_work import CatalogRepositories

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TrackPlan:
    disc_no: int
    track_no: int
    title: str
    duration_seconds: int | None = None
    credits_primary: bool = False
    features: tuple[ArtistIdentity, ...] = ()


@dataclass(frozen=True, slots=True)
class ReleasePlan:
    """Everything needed to write one release, already fetched and normalised."""

    artist: ArtistIdentity
    title: str
    year: int | None = None
    mbid: str | None = None
    tracks: tuple[TrackPlan, ...] = ()


@dataclass(slots=True)
class WriteStats:
    artists_created: int = 0
    artists_backfilled: int = 0
    releases_created: int = 0
    releases_backfilled: int = 0
    tracks_created: int = 0
    tracks_updated: int = 0
    credits_upserted: int = 0


@dataclass(frozen=True, slots=True)
class WrittenRelease:
    release: Release
    created: bool
    track_count: int


@dataclass(slots=True)
class CatalogWriter:
    """Create-or-update catalog rows inside one unit of work.

    With ``dry_run`` every lookup still runs but nothing is inserted, updated or
    backfilled; rows that would be created come back transient (``id is None``).
    """

    repositories: CatalogRepositories
    dry_run: bool = False
    pending: PendingRows = field(default_factory=PendingRows)
    stats: WriteStats = field(default_factory=WriteStats)
    resolver: EntityResolver = field(init=False)

    def __post_init__(self) -> None:
        self.resolver = EntityResolver(self.repositories, pending=self.pending)

    # Artists -----------------------------------------------------------------

    def ensure_artist(self, identity: ArtistIdentity) -> Artist:
        found = self.resolver.find_artist(identity)
        if found is not None:
            artist, match = found
            if identity.mbid and artist.mbid is None:
                log.debug("Backfilling mbid for artist %s (matched by %s)", artist.slug, match)
                self.stats.artists_backfilled += 1
                if not self.dry_run:
                    self.repositories.artists.set_mbid(artist, identity.mbid)
            return artist

        artist = Artist(
            name=identity.name.strip(),
            slug=self.resolver.free_artist_slug(identity),
            mbid=identity.mbid,
        )
        self.stats.artists_created += 1
        if self.dry_run:
            self.pending.artists[artist.slug] = artist
            return artist
        log.debug("Creating artist %s", artist.slug)
        return self.repositories.artists.add(artist)

    # Releases ----------------------------------------------------------------

    def ensure_release(
        self,
        *,
        artist: Artist,
        title: str,
        year: int | None,
        mbid: str | None = None,
    ) -> tuple[Release, bool]:
        """Return the release row and whether it was created by this call."""

        placement = self.resolver.plan_release(
            artist_id=artist.id, title=title, year=year, mbid=mbid
        )
        existing = placement.existing
        if existing is not None:
            if mbid and existing.mbid is None:
                self.stats.releases_backfilled += 1
                if not self.dry_run:
                    self.repositories.releases.set_mbid(existing, mbid)
            if existing.artist_id is None and artist.id is not None and not self.dry_run:
                self.repositories.releases.set_artist(existing, artist.id)
            return existing, False

        release = Release(
            title=title.strip(),
            slug=placement.slug,
            artist_id=artist.id,
            year=year,
            mbid=mbid,
        )
        self.stats.releases_created += 1
        if self.dry_run:
            self.pending.releases[release.slug] = release
            return release, True
        log.debug("Creating release %s", release.slug)
        return self.repositories.releases.add(release), True

    def ensure_primary_release_artist(self, release: Release, artist: Artist) -> None:
        """Primary credit mirrors ``release.artist_id``; a differing importer is appended."""

        primary_id = release.artist_id if release.artist_id is not None else artist.id
        if self.dry_run or release.id is None or primary_id is None:
            self.stats.credits_upserted += 1
            return

        credits = self.repositories.credits
        credits.upsert_release_artist(
            release_id=release.id, artist_id=primary_id, position=1, is_primary=True
        )
        self.stats.credits_upserted += 1
        if artist.id is None or artist.id == primary_id:
            return

        existing = credits.release_artists(release.id)
        if any(credit.artist_id == artist.id for credit in existing):
            return
        position = max((credit.position for credit in existing), default=1) + 1
        credits.upsert_release_artist(
            release_id=release.id, artist_id=artist.id, position=position, is_primary=False
        )
        self.stats.credits_upserted += 1

    # Tracks ------------------------------------------------------------------

    def upsert_track(self, release: Release, plan: TrackPlan) -> Track:
        if release.id is None:
            # the release itself is still transient (dry run)
            self.stats.tracks_created += 1
            return Track(
                release_id=0,
                disc_no=plan.disc_no,
                track_no=plan.track_no,
                title=plan.title,
                duration_seconds=plan.duration_seconds,
            )

        tracks = self.repositories.tracks
        existing = tracks.get_at(
            release_id=release.id, disc_no=plan.disc_no, track_no=plan.track_no
        )
        if existing is not None:
            if (existing.title, existing.duration_seconds) != (plan.title, plan.duration_seconds):
                self.stats.tracks_updated += 1
                if not self.dry_run:
                    tracks.update(
                        existing, title=plan.title, duration_seconds=plan.duration_seconds
                    )
            return existing

        track = Track(
            release_id=release.id,
            disc_no=plan.disc_no,
            track_no=plan.track_no,
            title=plan.title,
            duration_seconds=plan.duration_seconds,
        )
        self.stats.tracks_created += 1
        if self.dry_run:
            return track
        return tracks.add(track)

    def ensure_track_artist(self, track: Track, artist: Artist, role: CreditRole) -> None:
        self.stats.credits_upserted += 1
        if self.dry_run or track.id is None or artist.id is None:
            return
        self.repositories.credits.upsert_track_artist(
            track_id=track.id, artist_id=artist.id, role=role
        )

    # Whole release -----------------------------------------------------------

    def release_primary_artist(self, release: Release, importer: Artist) -> Artist:
        """The artist ``release.artist_id`` points at; the importer when unset."""

        if release.artist_id is None or release.artist_id == importer.id:
            return importer
        owner = self.repositories.artists.get(release.artist_id)
        if owner is None:
            raise WriteConflictError(
                f"Release {release.slug!r} points at missing artist {release.artist_id}"
            )
        return owner

    def write_release(self, plan: ReleasePlan) -> WrittenRelease:
        """Release row, its primary credit, then tracks in disc/track order with their credits."""

        artist = self.ensure_artist(plan.artist)
        release, created = self.ensure_release(
            artist=artist, title=plan.title, year=plan.year, mbid=plan.mbid
        )
        self.ensure_primary_release_artist(release, artist)
        primary = self.release_primary_artist(release, artist)

        ordered = sorted(plan.tracks, key=lambda track: (track.disc_no, track.track_no))
        for track_plan in ordered:
            track = self.upsert_track(release, track_plan)
            self._write_track_credits(track, track_plan, artist, primary)

        return WrittenRelease(release=release, created=created, track_count=len(ordered))

    def _write_track_credits(
        self,
        track: Track,
        plan: TrackPlan,
        importer: Artist,
        primary: Artist,
    ) -> None:
        # only the release's primary artist is credited PRIMARY on its tracks
        credited: set[int] = set()
        candidates = [importer] if plan.credits_primary else []
        candidates.extend(self.ensure_artist(feature) for feature in plan.features)
        for artist in candidates:
            if id(artist) in credited:
                continue
            credited.add(id(artist))
            role = CreditRole.PRIMARY if _same_row(artist, primary) else CreditRole.FEATURE
            self.ensure_track_artist(track, artist, role)


def _same_row(left: Artist, right: Artist) -> bool:
    return left is right or (left.id is not None and left.id == right.id)
