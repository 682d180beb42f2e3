from __future__ import annotations

import math

import pytest

from tests.support.records import ALICE, BOB, CAROL, DAY, NOW, NOW_TS, fixed_clock, make_track
from tsunami.domain.ingest.engagement import EngagementTallies
from tsunami.domain.ranking.trending import (
    TrendingSettings,
    TrendingWeights,
    composite_score,
    rank_trending,
    recency_score,
)


def _tallies(zaps: dict[str, tuple[int, int]]) -> EngagementTallies:
    tallies = EngagementTallies()
    for target, (count, amount) in zaps.items():
        bucket = tallies.bucket(target)
        bucket.zap_count = count
        bucket.zap_amount = amount
    return tallies


@pytest.mark.parametrize(
    ("age_days", "expected"),
    [(0, 1.0), (3.5, 0.5), (7, 0.0), (30, 0.0), (-1, 1.0)],
)
def test_recency_decays_linearly_over_window(age_days: float, expected: float) -> None:
    created_at = int(NOW_TS - age_days * DAY)

    assert recency_score(created_at, now=NOW) == pytest.approx(expected)


def test_missing_or_negative_timestamps_are_maximally_stale() -> None:
    assert recency_score(None, now=NOW) == 0.0
    assert recency_score(-5, now=NOW) == 0.0


def test_composite_score_formula() -> None:
    score = composite_score(amount=1000, count=3, recency=0.5)

    expected = 0.6 * math.log(1001) + 0.25 * math.log(4) + 0.15 * 0.5
    assert score == pytest.approx(expected)


def test_weights_are_used_as_given() -> None:
    doubled = TrendingWeights(amount=1.2, count=0.5, recency=0.3)

    assert composite_score(amount=10, count=1, recency=1.0, weights=doubled) == pytest.approx(
        2 * composite_score(amount=10, count=1, recency=1.0)
    )


def test_more_engagement_never_ranks_lower() -> None:
    low = make_track("low", author=ALICE, global_id="low")
    high = make_track("high", author=BOB, global_id="high")

    ranked = rank_trending(
        [low, high], _tallies({"low": (1, 10), "high": (5, 5000)}), clock=fixed_clock
    )

    assert [entry.track.global_id for entry in ranked] == ["high", "low"]
    assert ranked[0].engagement_count == 5
    assert ranked[0].engagement_amount == 5000


def test_diversity_cap_limits_entries_per_author() -> None:
    tracks = [make_track(f"a{n}", author=ALICE, global_id=f"a{n}") for n in range(4)]
    tracks.append(make_track("b0", author=BOB, global_id="b0"))
    tallies = _tallies({f"a{n}": (10, 10_000) for n in range(4)})

    ranked = rank_trending(tracks, tallies, clock=fixed_clock)

    authors = [entry.track.author_id for entry in ranked]
    assert authors.count(ALICE) == 2
    assert authors[-1] == BOB


def test_zero_engagement_cohort_orders_by_timestamp() -> None:
    tracks = [
        make_track("old", author=ALICE, global_id="old", created_at=NOW_TS - 20 * DAY),
        make_track("new", author=BOB, global_id="new", created_at=NOW_TS - DAY),
        make_track("older", author=CAROL, global_id="older", created_at=NOW_TS - 40 * DAY),
    ]

    ranked = rank_trending(tracks, EngagementTallies(), clock=fixed_clock)

    assert [entry.track.global_id for entry in ranked] == ["new", "old", "older"]
    assert not any(entry.has_engagement for entry in ranked)


def test_negative_timestamps_still_order_newest_first() -> None:
    tracks = [
        make_track("minus-ten", author=ALICE, global_id="minus-ten", created_at=-10),
        make_track("minus-five", author=BOB, global_id="minus-five", created_at=-5),
    ]

    ranked = rank_trending(tracks, EngagementTallies(), clock=fixed_clock)

    assert [entry.track.global_id for entry in ranked] == ["minus-five", "minus-ten"]
    assert all(entry.recency_score == 0 for entry in ranked)


def test_excluded_ids_and_coordinates_never_appear() -> None:
    by_id = make_track("one", author=ALICE, global_id="one")
    by_coordinate = make_track("two", author=BOB, global_id="two")
    kept = make_track("three", author=CAROL, global_id="three")
    tallies = _tallies({"one": (100, 1_000_000), "two": (100, 1_000_000)})

    ranked = rank_trending(
        [by_id, by_coordinate, kept],
        tallies,
        exclude={"one", str(by_coordinate.coordinate)},
        clock=fixed_clock,
    )

    assert [entry.track.global_id for entry in ranked] == ["three"]


def test_limit_applies_after_diversity() -> None:
    tracks = [make_track(f"t{n}", author=f"{n:064x}", global_id=f"t{n}") for n in range(20)]

    ranked = rank_trending(tracks, EngagementTallies(), settings=TrendingSettings(limit=5))

    assert len(ranked) == 5
