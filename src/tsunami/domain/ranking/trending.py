"""Trending ranking: weighted engagement and recency under an author-diversity cap.

``score = w_amount * log(amount + 1) + w_count * log(count + 1) + w_recency * recency``

Recency decays linearly from 1 (published now) to 0 at the end of the window.
The weights are used as given; they are not required to sum to 1, so they
also set the overall scale of the score.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable

    from tsunami.domain.context import Clock
    from tsunami.domain.ingest.engagement import EngagementTallies
    from tsunami.domain.model import Track

SECONDS_PER_DAY = 86_400
WINDOW_DAYS = 7
MAX_PER_AUTHOR = 2
DEFAULT_LIMIT = 12


@dataclass(frozen=True, slots=True)
class TrendingWeights:
    amount: float = 0.6
    count: float = 0.25
    recency: float = 0.15


@dataclass(frozen=True, slots=True)
class TrendingSettings:
    weights: TrendingWeights = field(default_factory=TrendingWeights)
    window_days: float = WINDOW_DAYS
    max_per_author: int = MAX_PER_AUTHOR
    limit: int = DEFAULT_LIMIT


DEFAULT_WEIGHTS = TrendingWeights()
DEFAULT_SETTINGS = TrendingSettings()


@dataclass(frozen=True, slots=True)
class TrendingEntry:
    track: Track
    engagement_count: int
    engagement_amount: int
    recency_score: float
    composite_score: float

    @property
    def has_engagement(self) -> bool:
        return self.engagement_count > 0 or self.engagement_amount > 0


def recency_score(
    created_at: int | None, *, now: datetime, window_days: float = WINDOW_DAYS
) -> float:
    """Linear decay over ``window_days``. Missing or negative timestamps score 0."""

    if created_at is None or created_at < 0 or window_days <= 0:
        return 0.0
    days_since = (now.timestamp() - created_at) / SECONDS_PER_DAY
    return min(1.0, max(0.0, (window_days - days_since) / window_days))


def composite_score(
    *, amount: int, count: int, recency: float, weights: TrendingWeights = DEFAULT_WEIGHTS
) -> float:
    return (
        weights.amount * math.log(max(amount, 0) + 1)
        + weights.count * math.log(max(count, 0) + 1)
        + weights.recency * recency
    )


def score_tracks(
    tracks: Iterable[Track],
    tallies: EngagementTallies,
    *,
    now: datetime,
    settings: TrendingSettings = DEFAULT_SETTINGS,
) -> list[TrendingEntry]:
    entries: list[TrendingEntry] = []
    for track in tracks:
        tally = tallies.for_record(track.global_id, track.coordinate)
        recency = recency_score(track.created_at, now=now, window_days=settings.window_days)
        entries.append(
            TrendingEntry(
                track=track,
                engagement_count=tally.zap_count,
                engagement_amount=tally.zap_amount,
                recency_score=recency,
                composite_score=composite_score(
                    amount=tally.zap_amount,
                    count=tally.zap_count,
                    recency=recency,
                    weights=settings.weights,
                ),
            )
        )
    return entries


def rank_entries(
    entries: Iterable[TrendingEntry],
    *,
    exclude: Collection[str] = (),
    settings: TrendingSettings = DEFAULT_SETTINGS,
) -> list[TrendingEntry]:
    """Order scored entries and apply exclusion, the diversity cap and the limit.

    Entries are sorted by composite score, newest first on ties. Within the
    zero-engagement cohort the score only depends on recency, which never
    increases with age, so that cohort ends up in pure timestamp order.
    """

    excluded = set(exclude)
    candidates = [
        entry
        for entry in entries
        if entry.track.global_id not in excluded and str(entry.track.coordinate) not in excluded
    ]
    candidates.sort(key=lambda entry: (-entry.composite_score, -entry.track.created_at))

    admitted: list[TrendingEntry] = []
    per_author: Counter[str] = Counter()
    for entry in candidates:
        author = entry.track.author_id
        if per_author[author] >= settings.max_per_author:
            continue
        per_author[author] += 1
        admitted.append(entry)
    return admitted[: max(settings.limit, 0)]


def rank_trending(
    tracks: Iterable[Track],
    tallies: EngagementTallies,
    *,
    exclude: Collection[str] = (),
    settings: TrendingSettings = DEFAULT_SETTINGS,
    clock: Clock | None = None,
) -> list[TrendingEntry]:
    now = clock() if clock is not None else datetime.now(UTC)
    entries = score_tracks(tracks, tallies, now=now, settings=settings)
    return rank_entries(entries, exclude=exclude, settings=settings)
