from __future__ import annotations

from catalogsync.adapters.musicbrainz.schema import (
    MusicBrainzArtistCredit,
    MusicBrainzRelease,
    MusicBrainzReleaseGroup,
    MusicBrainzTrack,
)


def test_release_tolerates_missing_optional_fields() -> None:
    release = MusicBrainzRelease.model_validate({"id": "r-1"})

    assert release.title == ""
    assert release.media == []
    assert release.artist_credit == []
    assert release.release_group is None


def test_unknown_keys_are_kept() -> None:
    group = MusicBrainzReleaseGroup.model_validate(
        {"id": "rg-1", "title": "Illmatic", "primary-type-id": "f529b476"}
    )

    assert group.model_extra == {"primary-type-id": "f529b476"}


def test_release_group_year_comes_from_first_release_date() -> None:
    dated = MusicBrainzReleaseGroup.model_validate(
        {"id": "rg-1", "first-release-date": "1994-04-19"}
    )
    undated = MusicBrainzReleaseGroup.model_validate({"id": "rg-2", "first-release-date": ""})

    assert dated.year == 1994
    assert undated.year is None


def test_artist_credit_accepts_bare_string_artist() -> None:
    nested = MusicBrainzArtistCredit.model_validate(
        {"name": "Nas", "artist": {"id": "a-1", "name": "Nas"}}
    )
    bare = MusicBrainzArtistCredit.model_validate({"artist": "AZ"})

    assert nested.artist_id == "a-1"
    assert bare.artist == "AZ"
    assert bare.artist_id is None


def test_track_credits_fall_back_to_recording() -> None:
    track = MusicBrainzTrack.model_validate(
        {
            "title": "Life's a Bitch",
            "length": 210_000,
            "recording": {
                "title": "Life's a Bitch",
                "length": 210_400,
                "artist-credit": [{"name": "AZ", "artist": {"id": "a-2", "name": "AZ"}}],
            },
        }
    )

    assert [credit.name for credit in track.effective_credits] == ["AZ"]
    assert track.length_ms == 210_400
