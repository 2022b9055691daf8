from __future__ import annotations

import pytest
from sqlalchemy.orm import Session  # noqa: TC002

from catalogsync.adapters.sqlalchemy.repositories import (
    SqlAlchemyArtistRepository,
    SqlAlchemyCreditRepository,
    SqlAlchemyReleaseRepository,
    SqlAlchemyTrackRepository,
)
from catalogsync.domain.errors import WriteConflictError
from catalogsync.domain.model import Artist, CreditRole, Release, Track


def _artist(session: Session, name: str = "Nas", slug: str = "nas", mbid: str | None = None) -> Artist:
    return SqlAlchemyArtistRepository(session).add(Artist(name=name, slug=slug, mbid=mbid))


def _release(session: Session, artist: Artist, title: str = "Illmatic") -> Release:
    return SqlAlchemyReleaseRepository(session).add(
        Release(title=title, slug=title.lower(), artist_id=artist.id, year=1994)
    )


def test_artist_lookups(sqlite_session: Session) -> None:
    repo = SqlAlchemyArtistRepository(sqlite_session)
    nas = _artist(sqlite_session, mbid="mb-nas")

    assert nas.id is not None
    assert repo.get(nas.id) is nas
    assert repo.get(nas.id + 1) is None
    assert repo.get_by_mbid("mb-nas") is nas
    assert repo.get_by_slug("nas") is nas
    assert repo.find_by_name("  NAS ") is nas
    assert repo.find_by_name("Nasir") is None


def test_artist_set_mbid_backfills(sqlite_session: Session) -> None:
    repo = SqlAlchemyArtistRepository(sqlite_session)
    artist = _artist(sqlite_session)

    repo.set_mbid(artist, "mb-nas")

    assert repo.get_by_mbid("mb-nas") is artist


def test_duplicate_slug_is_a_write_conflict(sqlite_session: Session) -> None:
    _artist(sqlite_session)

    with pytest.raises(WriteConflictError):
        _artist(sqlite_session, name="NAS")


def test_release_lookups(sqlite_session: Session) -> None:
    repo = SqlAlchemyReleaseRepository(sqlite_session)
    artist = _artist(sqlite_session)
    release = _release(sqlite_session, artist)

    repo.set_mbid(release, "rg-illmatic")

    assert repo.get_by_slug("illmatic") is release
    assert repo.get_by_mbid("rg-illmatic") is release
    assert repo.get_by_mbid("rg-other") is None


def test_tracks_are_addressed_by_disc_and_number(sqlite_session: Session) -> None:
    repo = SqlAlchemyTrackRepository(sqlite_session)
    release = _release(sqlite_session, _artist(sqlite_session))
    assert release.id is not None

    repo.add(Track(release_id=release.id, disc_no=2, track_no=1, title="Disc Two Opener"))
    first = repo.add(Track(release_id=release.id, disc_no=1, track_no=1, title="The Genesis"))

    assert repo.get_at(release_id=release.id, disc_no=1, track_no=1) is first
    assert repo.get_at(release_id=release.id, disc_no=1, track_no=2) is None

    repo.update(first, title="The Genesis (Intro)", duration_seconds=105)
    ordered = repo.for_release(release.id)

    assert [(t.disc_no, t.track_no) for t in ordered] == [(1, 1), (2, 1)]
    assert ordered[0].title == "The Genesis (Intro)"
    assert ordered[0].duration_seconds == 105


def test_duplicate_track_position_is_a_write_conflict(sqlite_session: Session) -> None:
    repo = SqlAlchemyTrackRepository(sqlite_session)
    release = _release(sqlite_session, _artist(sqlite_session))
    assert release.id is not None
    repo.add(Track(release_id=release.id, disc_no=1, track_no=1, title="One"))

    with pytest.raises(WriteConflictError):
        repo.add(Track(release_id=release.id, disc_no=1, track_no=1, title="Also One"))


def test_release_artist_upsert_is_idempotent(sqlite_session: Session) -> None:
    credits = SqlAlchemyCreditRepository(sqlite_session)
    artist = _artist(sqlite_session)
    release = _release(sqlite_session, artist)
    assert release.id is not None
    assert artist.id is not None

    for _ in range(3):
        credits.upsert_release_artist(
            release_id=release.id, artist_id=artist.id, position=1, is_primary=True
        )

    rows = credits.release_artists(release.id)
    assert len(rows) == 1
    assert rows[0].is_primary is True
    assert rows[0].position == 1


def test_track_artist_upsert_updates_role(sqlite_session: Session) -> None:
    credits = SqlAlchemyCreditRepository(sqlite_session)
    artist = _artist(sqlite_session)
    guest = _artist(sqlite_session, name="AZ", slug="az")
    release = _release(sqlite_session, artist)
    assert release.id is not None
    track = SqlAlchemyTrackRepository(sqlite_session).add(
        Track(release_id=release.id, disc_no=1, track_no=3, title="Life's a Bitch")
    )
    assert track.id is not None
    assert guest.id is not None

    credits.upsert_track_artist(track_id=track.id, artist_id=guest.id, role=CreditRole.PRIMARY)
    credits.upsert_track_artist(track_id=track.id, artist_id=guest.id, role=CreditRole.FEATURE)

    rows = credits.track_artists(track.id)
    assert len(rows) == 1
    assert rows[0].role is CreditRole.FEATURE
