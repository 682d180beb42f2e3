"""Featured artist selection from catalog size, engagement and recent activity."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tsunami.domain.model import ProfileInfo
from tsunami.domain.ranking.trending import SECONDS_PER_DAY

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence
    from datetime import datetime

    from tsunami.domain.ingest.engagement import EngagementTallies
    from tsunami.domain.model import Playlist, Track

ACTIVITY_WINDOW_DAYS = 30
MIN_RELEASES = 1
DEFAULT_LIMIT = 12


@dataclass(frozen=True, slots=True)
class FeaturedWeights:
    releases: float = 0.4
    zaps: float = 0.3
    activity: float = 0.2
    followers: float = 0.1


@dataclass(frozen=True, slots=True)
class FeaturedSettings:
    weights: FeaturedWeights = field(default_factory=FeaturedWeights)
    activity_window_days: float = ACTIVITY_WINDOW_DAYS
    min_releases: int = MIN_RELEASES
    limit: int = DEFAULT_LIMIT


DEFAULT_SETTINGS = FeaturedSettings()


@dataclass(frozen=True, slots=True)
class ArtistMetrics:
    author_id: str
    release_count: int = 0
    track_count: int = 0
    total_sats: int = 0
    total_zaps: int = 0
    recent_activity: int = 0
    follower_count: int = 0
    last_release_at: int | None = None


@dataclass(frozen=True, slots=True)
class FeaturedArtist:
    artist: ProfileInfo
    metrics: ArtistMetrics
    featured_score: float
    release_score: float
    zap_score: float
    activity_score: float
    follower_score: float
    final_score: float


def artist_metrics(
    author_id: str,
    tracks: Sequence[Track],
    playlists: Sequence[Playlist],
    tallies: EngagementTallies,
    *,
    now: datetime,
    follower_count: int = 0,
    activity_window_days: float = ACTIVITY_WINDOW_DAYS,
) -> ArtistMetrics:
    own_tracks = [track for track in tracks if track.author_id == author_id]
    own_playlists = [playlist for playlist in playlists if playlist.author_id == author_id]

    total_sats = 0
    total_zaps = 0
    for track in own_tracks:
        tally = tallies.for_record(track.global_id, track.coordinate)
        total_sats += tally.zap_amount
        total_zaps += tally.zap_count

    stamps = [record.created_at for record in (*own_tracks, *own_playlists)]
    cutoff = now.timestamp() - activity_window_days * SECONDS_PER_DAY
    return ArtistMetrics(
        author_id=author_id,
        release_count=len(own_playlists),
        track_count=len(own_tracks),
        total_sats=total_sats,
        total_zaps=total_zaps,
        recent_activity=sum(1 for stamp in stamps if stamp > cutoff),
        follower_count=follower_count,
        last_release_at=max(stamps) if stamps else None,
    )


def recency_boost(last_release_at: int | None, *, now: datetime) -> float:
    """Multiplier favouring artists who released recently.

    1.2 within a week, 1.1 within a month, 1.0 within three months, then a
    linear decay over a year down to 0.5. No release at all yields 0.
    """

    if last_release_at is None:
        return 0.0
    days_since = (now.timestamp() - last_release_at) / SECONDS_PER_DAY
    if days_since <= 7:  # noqa: PLR2004
        return 1.2
    if days_since <= 30:  # noqa: PLR2004
        return 1.1
    if days_since <= 90:  # noqa: PLR2004
        return 1.0
    return max(0.5, 1 - (days_since - 90) / 365)


def score_artist(
    artist: ProfileInfo,
    metrics: ArtistMetrics,
    *,
    now: datetime,
    weights: FeaturedWeights = DEFAULT_SETTINGS.weights,
) -> FeaturedArtist:
    content = metrics.release_count + metrics.track_count * 0.5
    release_score = math.log(content + 1) * weights.releases
    zap_score = math.log(metrics.total_sats / 1000 + metrics.total_zaps + 1) * weights.zaps
    activity_score = math.log(metrics.recent_activity + 1) * weights.activity
    follower_score = math.log(metrics.follower_count + 1) * weights.followers
    featured_score = release_score + zap_score + activity_score + follower_score
    return FeaturedArtist(
        artist=artist,
        metrics=metrics,
        featured_score=featured_score,
        release_score=release_score,
        zap_score=zap_score,
        activity_score=activity_score,
        follower_score=follower_score,
        final_score=featured_score * recency_boost(metrics.last_release_at, now=now),
    )


def passes_quality_bar(metrics: ArtistMetrics, *, min_releases: int = MIN_RELEASES) -> bool:
    if metrics.release_count < min_releases:
        return False
    return bool(metrics.total_zaps or metrics.total_sats or metrics.recent_activity)


def select_featured_artists(
    profiles: Mapping[str, ProfileInfo],
    tracks: Iterable[Track],
    playlists: Iterable[Playlist],
    tallies: EngagementTallies,
    *,
    now: datetime,
    settings: FeaturedSettings = DEFAULT_SETTINGS,
) -> list[FeaturedArtist]:
    """Score every artist with published content and return the top of the list.

    Artists are ordered by featured score times recency boost, ties going to
    the most recent release.
    """

    track_list = list(tracks)
    playlist_list = list(playlists)
    authors = dict.fromkeys(record.author_id for record in (*track_list, *playlist_list))

    results: list[FeaturedArtist] = []
    for author_id in authors:
        profile = profiles.get(author_id)
        artist = profile if profile is not None else ProfileInfo.placeholder(author_id)
        metrics = artist_metrics(
            author_id,
            track_list,
            playlist_list,
            tallies,
            now=now,
            follower_count=artist.follower_count,
            activity_window_days=settings.activity_window_days,
        )
        if not passes_quality_bar(metrics, min_releases=settings.min_releases):
            continue
        results.append(score_artist(artist, metrics, now=now, weights=settings.weights))

    results.sort(
        key=lambda result: (-result.final_score, -(result.metrics.last_release_at or 0))
    )
    return results[: max(settings.limit, 0)]
