from __future__ import annotations

import asyncio

from catalogsync.adapters.musicbrainz.schema import MusicBrainzRelease  # noqa: TC001
from catalogsync.domain.credits import primary_keys_for
from catalogsync.domain.hydration import (
    TrackEntry,
    Tracklist,
    discs_from_release,
    has_credit_data,
    hydrate_tracklist,
    release_queries,
    score_release,
)
from catalogsync.domain.ports.fetching import ProviderError
from tests.support.musicbrainz import FakeMusicBrainzProvider, credit, edition, release, track

SCOPED = 'release:"Aquemini" AND artist:"OutKast"'
UNSCOPED = 'release:"Aquemini"'


def _aquemini(mbid: str, *, tracks: int, credited: bool) -> MusicBrainzRelease:
    credits = [credit("OutKast")] if credited else []
    return release(
        mbid,
        "Aquemini",
        [track(f"Track {n}", credits=credits) for n in range(1, tracks + 1)],
    )


def test_blank_title_returns_empty_without_calls() -> None:
    provider = FakeMusicBrainzProvider()

    result = asyncio.run(hydrate_tracklist(provider, "   ", ["OutKast"]))

    assert result == Tracklist()
    assert provider.calls == []


def test_release_queries() -> None:
    assert release_queries("Aquemini", ["OutKast", "Goodie Mob"]) == [SCOPED, UNSCOPED]
    assert release_queries("Aquemini", []) == [UNSCOPED]
    assert release_queries('Say "Hi"', []) == ['release:"Say \\"Hi\\""']


def test_scoped_search_is_tried_first() -> None:
    provider = FakeMusicBrainzProvider(
        searches={SCOPED: [edition("r-1")], UNSCOPED: [edition("r-2")]},
        releases={"r-1": release("r-1", "Aquemini", [track("Hold On, Be Strong")])},
    )

    result = asyncio.run(hydrate_tracklist(provider, "Aquemini", ["OutKast"]))

    assert [entry.title for entry in result.disc1] == ["Hold On, Be Strong"]
    assert ("search_releases", UNSCOPED) not in provider.calls


def test_falls_back_to_unscoped_search() -> None:
    provider = FakeMusicBrainzProvider(
        searches={UNSCOPED: [edition("r-2")]},
        releases={"r-2": release("r-2", "Aquemini", [track("Return of the G")])},
    )

    result = asyncio.run(hydrate_tracklist(provider, "Aquemini", ["Outkast"]))

    assert [entry.title for entry in result.disc1] == ["Return of the G"]
    assert [query for name, query in provider.calls if name == "search_releases"] == [
        'release:"Aquemini" AND artist:"Outkast"',
        UNSCOPED,
    ]


def test_best_scored_candidate_wins() -> None:
    provider = FakeMusicBrainzProvider(
        searches={SCOPED: [edition("short"), edition("credited"), edition("long")]},
        releases={
            "short": _aquemini("short", tracks=3, credited=False),
            "credited": _aquemini("credited", tracks=10, credited=True),
            "long": _aquemini("long", tracks=14, credited=False),
        },
    )

    result = asyncio.run(hydrate_tracklist(provider, "Aquemini", ["OutKast"]))

    assert len(result.disc1) == 10


def test_ties_keep_the_earlier_candidate() -> None:
    provider = FakeMusicBrainzProvider(
        searches={UNSCOPED: [edition("first"), edition("second")]},
        releases={
            "first": release("first", "Aquemini", [track("A")]),
            "second": release("second", "Aquemini", [track("B")]),
        },
    )

    result = asyncio.run(hydrate_tracklist(provider, "Aquemini"))

    assert [entry.title for entry in result.disc1] == ["A"]


def test_at_most_five_candidates_are_hydrated() -> None:
    candidates = [edition(f"r-{n}") for n in range(5)]
    provider = FakeMusicBrainzProvider(searches={UNSCOPED: candidates + [edition("r-5")]})

    asyncio.run(hydrate_tracklist(provider, "Aquemini"))

    assert len([name for name, _ in provider.calls if name == "fetch_release"]) == 5


def test_failed_hydrations_are_skipped() -> None:
    provider = FakeMusicBrainzProvider(
        searches={UNSCOPED: [edition("broken"), edition("ok")]},
        releases={"ok": release("ok", "Aquemini", [track("Synthesizer")])},
        errors={"broken": ProviderError("MusicBrainz 500", status=500)},
    )

    result = asyncio.run(hydrate_tracklist(provider, "Aquemini"))

    assert [entry.title for entry in result.disc1] == ["Synthesizer"]


def test_provider_failure_degrades_to_empty() -> None:
    provider = FakeMusicBrainzProvider(
        errors={
            SCOPED: ProviderError("MusicBrainz 503", status=503),
            UNSCOPED: ProviderError("MusicBrainz 503", status=503),
        }
    )

    result = asyncio.run(hydrate_tracklist(provider, "Aquemini", ["OutKast"]))

    assert result.is_empty


def test_discs_skip_empty_media_and_untitled_tracks() -> None:
    hydrated = release(
        "r-1",
        "Speakerboxxx/The Love Below",
        [],
        [track("GhettoMusick", credits=[credit("OutKast")])],
        [track("", recording_title="Happy Valentine's Day"), track("", recording_title="")],
    )

    discs = discs_from_release(hydrated, primary_keys_for(["OutKast"]))

    assert discs == [
        [TrackEntry(title="GhettoMusick", features=[])],
        [TrackEntry(title="Happy Valentine's Day", features=[])],
    ]


def test_features_exclude_primary_names() -> None:
    hydrated = release(
        "r-1",
        "Aquemini",
        [track("Skew It on the Bar-B (feat. Raekwon)", credits=[credit("OutKast"), credit("Raekwon")])],
    )

    [[entry]] = discs_from_release(hydrated, primary_keys_for(["Outkast"]))

    assert entry.features == ["Raekwon"]


def test_score_counts_tracks_plus_credit_bonus() -> None:
    keys = primary_keys_for(["OutKast"])

    assert score_release(_aquemini("a", tracks=4, credited=False), keys) == 4
    assert score_release(_aquemini("b", tracks=4, credited=True), keys) == 9


def test_credit_bonus_when_any_track_is_credited() -> None:
    hydrated = release(
        "r-late",
        "Aquemini",
        [track("Hold On, Be Strong"), track("Return of the G", credits=[credit("OutKast")])],
    )

    assert has_credit_data(hydrated)
    assert score_release(hydrated, primary_keys_for(["OutKast"])) == 7
