"""The artifact set published by one snapshot build."""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

from tsunami.config.snapshots import ArtifactCaps
from tsunami.domain.ranking.featured import DEFAULT_SETTINGS as DEFAULT_FEATURED
from tsunami.domain.ranking.featured import FeaturedSettings, select_featured_artists
from tsunami.domain.ranking.trending import DEFAULT_SETTINGS as DEFAULT_TRENDING
from tsunami.domain.ranking.trending import TrendingSettings, rank_trending
from tsunami.domain.releases import latest_release
from tsunami.domain.snapshots.model import CacheHealth
from tsunami.domain.snapshots.writer import ArtifactSpec

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from tsunami.domain.context import PipelineStats
    from tsunami.domain.ingest.catalog import CatalogBundle
    from tsunami.domain.model import Release
    from tsunami.domain.ranking import FeaturedArtist, TrendingEntry

RELEASES = "releases"
LATEST_RELEASE = "latest-release"
TRENDING_TRACKS = "trending-tracks"
FEATURED_ARTISTS = "featured-artists"
CACHE_HEALTH = "cache-health"
RELEASE_PREFIX = "releases/"
DEFAULT_CAPS = ArtifactCaps()


def release_artifact_name(global_id: str) -> str:
    return f"{RELEASE_PREFIX}{global_id}"


def hero_track_ids(release: Release | None) -> tuple[str, ...]:
    """Tracks already shown with the newest release, kept out of trending."""

    if release is None:
        return ()
    return tuple(track.global_id for track in release.tracks if track.global_id)


def _releases(bundle: CatalogBundle, cap: int) -> Sequence[Release]:
    return bundle.releases[:cap]


def _latest(bundle: CatalogBundle) -> Sequence[Release]:
    latest = latest_release(bundle.releases)
    return () if latest is None else (latest,)


def _single(release: Release) -> Sequence[Release]:
    return (release,)


def _trending(
    bundle: CatalogBundle, *, settings: TrendingSettings, now: datetime
) -> Sequence[TrendingEntry]:
    return rank_trending(
        bundle.tracks,
        bundle.tallies,
        exclude=hero_track_ids(latest_release(bundle.releases)),
        settings=settings,
        clock=lambda: now,
    )


def _featured(
    bundle: CatalogBundle, *, settings: FeaturedSettings, now: datetime
) -> Sequence[FeaturedArtist]:
    return select_featured_artists(
        bundle.profiles,
        bundle.tracks,
        bundle.playlists,
        bundle.tallies,
        now=now,
        settings=settings,
    )


def _health(
    bundle: CatalogBundle,
    *,
    artist_id: str,
    sources_configured: Sequence[str],
    stats: PipelineStats | None,
) -> Sequence[CacheHealth]:
    return (
        CacheHealth(
            status="degraded" if bundle.degraded else "ok",
            artist_id=artist_id,
            track_count=len(bundle.tracks),
            release_count=len(bundle.releases),
            artist_count=len(bundle.artist_ids),
            artist_metadata_found=artist_id in bundle.artist_metadata,
            sources_configured=tuple(sources_configured),
            sources_used=bundle.sources_used,
            counters=stats.as_dict() if stats is not None else {},
        ),
    )


def plan_artifacts(
    bundle: CatalogBundle,
    *,
    artist_id: str,
    now: datetime,
    caps: ArtifactCaps = DEFAULT_CAPS,
    trending: TrendingSettings = DEFAULT_TRENDING,
    featured: FeaturedSettings = DEFAULT_FEATURED,
    sources_configured: Sequence[str] = (),
    stats: PipelineStats | None = None,
) -> list[ArtifactSpec]:
    """Describe every artifact of a build; nothing is computed until a spec is built."""

    specs = [
        ArtifactSpec(RELEASES, caps.releases, partial(_releases, bundle, caps.releases)),
        ArtifactSpec(LATEST_RELEASE, 1, partial(_latest, bundle)),
        ArtifactSpec(
            TRENDING_TRACKS,
            caps.trending,
            partial(_trending, bundle, settings=trending, now=now),
        ),
        ArtifactSpec(
            FEATURED_ARTISTS,
            caps.featured_artists,
            partial(_featured, bundle, settings=featured, now=now),
        ),
        ArtifactSpec(
            CACHE_HEALTH,
            1,
            partial(
                _health,
                bundle,
                artist_id=artist_id,
                sources_configured=sources_configured,
                stats=stats,
            ),
        ),
    ]
    specs.extend(
        ArtifactSpec(
            release_artifact_name(release.global_id),
            1,
            partial(_single, release),
            release_id=release.global_id,
        )
        for release in bundle.releases[: caps.per_release]
        if release.global_id
    )
    return specs
