from __future__ import annotations

import math
from dataclasses import replace
from datetime import timedelta

import pytest

from tests.support.records import ALICE, BOB, CAROL, DAY, NOW, NOW_TS, make_track
from tsunami.domain.ingest.engagement import EngagementTallies
from tsunami.domain.model import Coordinate, Playlist, ProfileInfo, RecordKind, TrackReference
from tsunami.domain.ranking.featured import (
    ArtistMetrics,
    FeaturedSettings,
    passes_quality_bar,
    recency_boost,
    select_featured_artists,
)


def _playlist(author: str, *, created_at: int = NOW_TS) -> Playlist:
    return Playlist(
        global_id=f"pl-{author[:4]}",
        author_id=author,
        coordinate=Coordinate(author, RecordKind.MUSIC_PLAYLIST, "album"),
        created_at=created_at,
        identifier="album",
        title="Album",
        tracks=(TrackReference(author_id=author, identifier="song"),),
    )


def _profile(author: str, name: str) -> ProfileInfo:
    return ProfileInfo(
        global_id=f"profile-{name}", author_id=author, coordinate=None, created_at=1, name=name
    )


@pytest.mark.parametrize(
    ("age", "expected"),
    [
        (timedelta(days=2), 1.2),
        (timedelta(days=20), 1.1),
        (timedelta(days=60), 1.0),
        (timedelta(days=90 + 365), 0.5),
    ],
)
def test_recency_boost_steps(age: timedelta, expected: float) -> None:
    last_release = int((NOW - age).timestamp())

    assert recency_boost(last_release, now=NOW) == pytest.approx(expected)


def test_quality_bar_requires_release_and_activity() -> None:
    assert not passes_quality_bar(ArtistMetrics(author_id=ALICE, recent_activity=3))
    assert not passes_quality_bar(ArtistMetrics(author_id=ALICE, release_count=1))
    assert passes_quality_bar(ArtistMetrics(author_id=ALICE, release_count=1, total_zaps=1))


def test_select_featured_artists_orders_by_final_score() -> None:
    tracks = [
        make_track("song", author=ALICE, global_id="alice-song"),
        make_track("song", author=BOB, global_id="bob-song", created_at=NOW_TS - 300 * DAY),
        make_track("song", author=CAROL, global_id="carol-song"),
    ]
    playlists = [
        _playlist(ALICE),
        _playlist(BOB, created_at=NOW_TS - 300 * DAY),
    ]
    tallies = EngagementTallies()
    zapped = tallies.bucket("bob-song")
    zapped.zap_count = 2
    zapped.zap_amount = 5000

    featured = select_featured_artists(
        {ALICE: _profile(ALICE, "alice")},
        tracks,
        playlists,
        tallies,
        now=NOW,
    )

    # carol has no release and is filtered out
    assert [result.artist.author_id for result in featured] == [ALICE, BOB]
    assert featured[0].artist.name == "alice"
    assert featured[1].artist.display == f"Artist {BOB[:8]}..."
    assert featured[1].metrics.total_sats == 5000
    assert featured[0].final_score == pytest.approx(featured[0].featured_score * 1.2)


def test_select_featured_artists_respects_limit() -> None:
    authors = [f"{n:064x}" for n in range(1, 6)]
    tracks = [make_track("song", author=author) for author in authors]
    playlists = [_playlist(author) for author in authors]

    featured = select_featured_artists(
        {}, tracks, playlists, EngagementTallies(), now=NOW, settings=FeaturedSettings(limit=3)
    )

    assert len(featured) == 3


def test_follower_count_from_profile_breaks_even_scores() -> None:
    tracks = [make_track("song", author=author) for author in (ALICE, BOB)]
    playlists = [_playlist(ALICE), _playlist(BOB)]
    profiles = {
        ALICE: _profile(ALICE, "alice"),
        BOB: replace(_profile(BOB, "bob"), follower_count=99),
    }

    featured = select_featured_artists(profiles, tracks, playlists, EngagementTallies(), now=NOW)

    assert [result.artist.author_id for result in featured] == [BOB, ALICE]
    assert featured[0].follower_score == pytest.approx(math.log(100) * 0.1)
    assert featured[1].follower_score == 0
