from __future__ import annotations

import pytest

from catalogsync.domain.release_filter import FilterOptions, filter_groups, should_keep_group
from tests.support.musicbrainz import group

EVERYTHING = FilterOptions(include_mixtapes=True, include_compilations=True)


def test_plain_album_is_kept() -> None:
    assert should_keep_group(group("Illmatic", "rg-1"))


@pytest.mark.parametrize("primary_type", ["album", "ALBUM", "Album"])
def test_primary_type_is_case_insensitive(primary_type: str) -> None:
    assert should_keep_group(group("Illmatic", "rg-1", primary_type=primary_type))


@pytest.mark.parametrize("primary_type", ["Single", "EP", "Broadcast", "Other", None])
def test_non_album_primary_types_are_rejected(primary_type: str | None) -> None:
    assert not should_keep_group(group("x", "rg-1", primary_type=primary_type), EVERYTHING)


@pytest.mark.parametrize(
    "secondary",
    [
        "Live",
        "Remix",
        "DJ-mix",
        "Soundtrack",
        "Spokenword",
        "Interview",
        "Audiobook",
        "Demo",
        "Other",
        "EP",
        "Single",
    ],
)
def test_excluded_secondary_types_reject_regardless_of_flags(secondary: str) -> None:
    assert not should_keep_group(group("x", "rg-1", secondary_types=[secondary]), EVERYTHING)


def test_mixtapes_follow_their_flag() -> None:
    mixtape = group("Dedication 2", "rg-1", secondary_types=["Mixtape/Street"])

    assert not should_keep_group(mixtape)
    assert should_keep_group(mixtape, FilterOptions(include_mixtapes=True))
    assert not should_keep_group(mixtape, FilterOptions(include_compilations=True))


def test_compilations_follow_their_flag() -> None:
    greatest = group("Greatest Hits", "rg-1", secondary_types=["Compilation"])

    assert not should_keep_group(greatest)
    assert should_keep_group(greatest, FilterOptions(include_compilations=True))
    assert not should_keep_group(greatest, FilterOptions(include_mixtapes=True))


def test_combined_tags_need_every_flag() -> None:
    both = group("x", "rg-1", secondary_types=["Mixtape/Street", "Compilation"])

    assert not should_keep_group(both, FilterOptions(include_mixtapes=True))
    assert should_keep_group(both, EVERYTHING)


def test_excluded_tag_wins_over_opt_in() -> None:
    live_mixtape = group("x", "rg-1", secondary_types=["Mixtape/Street", "Live"])

    assert not should_keep_group(live_mixtape, EVERYTHING)


def test_unknown_secondary_types_are_rejected() -> None:
    assert not should_keep_group(group("x", "rg-1", secondary_types=["Field recording"]), EVERYTHING)


def test_filter_groups_preserves_order() -> None:
    groups = [
        group("Illmatic", "rg-1"),
        group("Live at the BBQ", "rg-2", secondary_types=["Live"]),
        group("It Was Written", "rg-3"),
        group("Lost Tapes", "rg-4", secondary_types=["Compilation"]),
    ]

    kept = filter_groups(groups, FilterOptions(include_compilations=True))

    assert [g.title for g in kept] == ["Illmatic", "It Was Written", "Lost Tapes"]
