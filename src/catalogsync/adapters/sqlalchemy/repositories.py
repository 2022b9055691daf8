"""Repository implementations backed by SQLAlchemy sessions."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError

from catalogsync.adapters.sqlalchemy.mappings import (
    artist_table,
    release_artist_table,
    release_table,
    track_artist_table,
    track_table,
)
from catalogsync.domain.errors import WriteConflictError
from catalogsync.domain.model import (
    Artist,
    CreditRole,
    Release,
    ReleaseArtistCredit,
    Track,
    TrackArtistCredit,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sqlalchemy import Table
    from sqlalchemy.orm import Session


def flush_or_conflict(session: Session) -> None:
    """Flush pending writes, translating constraint violations for the domain."""

    try:
        session.flush()
    except IntegrityError as exc:
        raise WriteConflictError(f"Catalog write rejected: {exc.orig}") from exc


def upsert(
    session: Session,
    table: Table,
    values: Mapping[str, object],
    *,
    conflict_columns: Sequence[str],
    update_columns: Sequence[str],
) -> None:
    """INSERT … ON CONFLICT DO UPDATE for the session's dialect."""

    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        stmt: Any = postgresql.insert(table).values(**values)
    elif dialect == "sqlite":
        stmt = sqlite.insert(table).values(**values)
    else:
        raise NotImplementedError(f"Upsert is not supported for dialect {dialect!r}")
    stmt = stmt.on_conflict_do_update(
        index_elements=list(conflict_columns),
        set_={column: stmt.excluded[column] for column in update_columns},
    )
    try:
        session.execute(stmt)
    except IntegrityError as exc:
        raise WriteConflictError(f"Catalog upsert rejected: {exc.orig}") from exc


class SqlAlchemyArtistRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Artist) -> Artist:
        self.session.add(entity)
        flush_or_conflict(self.session)
        return entity

    def get(self, artist_id: int) -> Artist | None:
        return self.session.get(Artist, artist_id)

    def get_by_mbid(self, mbid: str) -> Artist | None:
        stmt = select(Artist).where(artist_table.c.mbid == mbid)
        return self.session.execute(stmt).scalar_one_or_none()

    def get_by_slug(self, slug: str) -> Artist | None:
        stmt = select(Artist).where(artist_table.c.slug == slug)
        return self.session.execute(stmt).scalar_one_or_none()

    def find_by_name(self, name: str) -> Artist | None:
        stmt = (
            select(Artist)
            .where(func.lower(artist_table.c.name) == name.strip().lower())
            .order_by(artist_table.c.id)
            .limit(1)
        )
        return self.session.execute(stmt).scalars().first()

    def set_mbid(self, artist: Artist, mbid: str) -> None:
        artist.mbid = mbid
        flush_or_conflict(self.session)


class SqlAlchemyReleaseRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Release) -> Release:
        self.session.add(entity)
        flush_or_conflict(self.session)
        return entity

    def get_by_mbid(self, mbid: str) -> Release | None:
        stmt = select(Release).where(release_table.c.mbid == mbid)
        return self.session.execute(stmt).scalar_one_or_none()

    def get_by_slug(self, slug: str) -> Release | None:
        stmt = select(Release).where(release_table.c.slug == slug)
        return self.session.execute(stmt).scalar_one_or_none()

    def set_mbid(self, release: Release, mbid: str) -> None:
        release.mbid = mbid
        flush_or_conflict(self.session)

    def set_artist(self, release: Release, artist_id: int) -> None:
        release.artist_id = artist_id
        flush_or_conflict(self.session)


class SqlAlchemyTrackRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def add(self, entity: Track) -> Track:
        self.session.add(entity)
        flush_or_conflict(self.session)
        return entity

    def get_at(self, *, release_id: int, disc_no: int, track_no: int) -> Track | None:
        stmt = (
            select(Track)
            .where(track_table.c.release_id == release_id)
            .where(track_table.c.disc_no == disc_no)
            .where(track_table.c.track_no == track_no)
        )
        return self.session.execute(stmt).scalar_one_or_none()

    def update(self, track: Track, *, title: str, duration_seconds: int | None) -> Track:
        track.title = title
        track.duration_seconds = duration_seconds
        flush_or_conflict(self.session)
        return track

    def for_release(self, release_id: int) -> list[Track]:
        stmt = (
            select(Track)
            .where(track_table.c.release_id == release_id)
            .order_by(track_table.c.disc_no, track_table.c.track_no)
        )
        return list(self.session.execute(stmt).scalars())


class SqlAlchemyCreditRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def upsert_release_artist(
        self,
        *,
        release_id: int,
        artist_id: int,
        position: int,
        is_primary: bool,
    ) -> None:
        upsert(
            self.session,
            release_artist_table,
            {
                "release_id": release_id,
                "artist_id": artist_id,
                "position": position,
                "is_primary": is_primary,
            },
            conflict_columns=("release_id", "artist_id"),
            update_columns=("position", "is_primary"),
        )

    def release_artists(self, release_id: int) -> list[ReleaseArtistCredit]:
        stmt = (
            select(release_artist_table)
            .where(release_artist_table.c.release_id == release_id)
            .order_by(release_artist_table.c.position)
        )
        return [
            ReleaseArtistCredit(
                release_id=row.release_id,
                artist_id=row.artist_id,
                position=row.position,
                is_primary=bool(row.is_primary),
            )
            for row in self.session.execute(stmt)
        ]

    def upsert_track_artist(self, *, track_id: int, artist_id: int, role: CreditRole) -> None:
        upsert(
            self.session,
            track_artist_table,
            {"track_id": track_id, "artist_id": artist_id, "role": role},
            conflict_columns=("track_id", "artist_id"),
            update_columns=("role",),
        )

    def track_artists(self, track_id: int) -> list[TrackArtistCredit]:
        stmt = (
            select(track_artist_table)
            .where(track_artist_table.c.track_id == track_id)
            .order_by(track_artist_table.c.artist_id)
        )
        return [
            TrackArtistCredit(
                track_id=row.track_id,
                artist_id=row.artist_id,
                role=CreditRole(row.role),
            )
            for row in self.session.execute(stmt)
        ]


if TYPE_CHECKING:
    from catalogsync.domain.ports.persistence import (
        ArtistRepository,
        CreditRepository,
        ReleaseRepository,
        TrackRepository,
    )

    _session_stub = cast("Session", object())
    _artist_repo: ArtistRepository = SqlAlchemyArtistRepository(_session_stub)
    _release_repo: ReleaseRepository = SqlAlchemyReleaseRepository(_session_stub)
    _track_repo: TrackRepository = SqlAlchemyTrackRepository(_session_stub)
    _credit_repo: CreditRepository = SqlAlchemyCreditRepository(_session_stub)
