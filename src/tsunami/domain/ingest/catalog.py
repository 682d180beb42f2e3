"""Two-phase catalog collection across the source pool.

Phase one fans out the track and playlist queries. Phase two asks for the
profiles, artist metadata and engagement of whatever phase one discovered.
Every batch flows through validation, conversion and deduplication before it
is used; source failures only mark the bundle as degraded.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from tsunami.domain.filters import (
    ArtistMetadataQuery,
    DeletionQuery,
    EngagementQuery,
    PlaylistQuery,
    ProfileQuery,
    TrackQuery,
)
from tsunami.domain.ingest.conversion import convert_batch, select
from tsunami.domain.ingest.deduplication import TieBreak, dedupe_by_global_id, dedupe_latest
from tsunami.domain.ingest.engagement import EngagementTallies, aggregate_engagement
from tsunami.domain.ingest.fanout import FanOutResult, fan_out
from tsunami.domain.model import (
    ArtistMetadata,
    Comment,
    Deletion,
    EngagementReceipt,
    Playlist,
    ProfileInfo,
    ReceiptType,
    Severity,
    Track,
)
from tsunami.domain.releases import build_releases

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime

    from tsunami.domain.context import PipelineContext
    from tsunami.domain.filters import Query
    from tsunami.domain.model import Release
    from tsunami.domain.ports import Source


@dataclass(frozen=True, slots=True)
class CatalogSettings:
    catalog_timeout: float = 10.0
    profile_timeout: float = 8.0
    metadata_timeout: float = 5.0
    engagement_timeout: float = 10.0
    track_limit: int = 400
    playlist_limit: int = 200
    engagement_limit: int = 1000
    profiles_per_artist: int = 2
    metadata_per_artist: int = 5
    tie_break: TieBreak = TieBreak.LAST_SEEN
    include_playlists: bool = True
    include_artist_metadata: bool = True


@dataclass(slots=True)
class CatalogBundle:
    """Everything one run knows about the catalog, deduplicated."""

    fetched_at: datetime
    tracks: list[Track] = field(default_factory=list[Track])
    playlists: list[Playlist] = field(default_factory=list[Playlist])
    releases: list[Release] = field(default_factory=list["Release"])
    profiles: dict[str, ProfileInfo] = field(default_factory=dict[str, ProfileInfo])
    artist_metadata: dict[str, ArtistMetadata] = field(default_factory=dict[str, ArtistMetadata])
    tallies: EngagementTallies = field(default_factory=EngagementTallies)
    sources_used: tuple[str, ...] = ()
    degraded: bool = False

    @property
    def artist_ids(self) -> tuple[str, ...]:
        return _authors(self.tracks, self.playlists)


class _FanOutLog:
    """Collects the outcome of every fan-out issued during one collection."""

    def __init__(self) -> None:
        self.results: list[FanOutResult] = []

    def add(self, result: FanOutResult) -> FanOutResult:
        self.results.append(result)
        return result

    @property
    def degraded(self) -> bool:
        return any(result.degraded for result in self.results)

    @property
    def sources_used(self) -> tuple[str, ...]:
        used: dict[str, None] = {}
        for result in self.results:
            used.update(dict.fromkeys(result.sources_used))
        return tuple(used)


def _authors(tracks: Sequence[Track], playlists: Sequence[Playlist]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(record.author_id for record in (*tracks, *playlists)))


async def _fetch(
    sources: Sequence[Source],
    query: Query,
    *,
    timeout: float,
    context: PipelineContext,
    log: _FanOutLog,
) -> FanOutResult:
    result = await fan_out(
        sources, query, timeout=timeout, observer=context.observer, stats=context.stats
    )
    return log.add(result)


async def _empty() -> FanOutResult:
    return FanOutResult(records=(), outcomes=())


async def collect_catalog(
    sources: Sequence[Source],
    *,
    settings: CatalogSettings,
    context: PipelineContext,
) -> CatalogBundle:
    log = _FanOutLog()
    fetched_at = context.now()

    # Phase 1: catalog records
    track_result, playlist_result = await asyncio.gather(
        _fetch(
            sources,
            TrackQuery(limit=settings.track_limit),
            timeout=settings.catalog_timeout,
            context=context,
            log=log,
        ),
        _fetch(
            sources,
            PlaylistQuery(limit=settings.playlist_limit),
            timeout=settings.catalog_timeout,
            context=context,
            log=log,
        )
        if settings.include_playlists
        else _empty(),
    )
    tracks = dedupe_latest(
        select(convert_batch(track_result.records, context=context), Track),
        tie_break=settings.tie_break,
        stats=context.stats,
    )
    playlists = dedupe_latest(
        select(convert_batch(playlist_result.records, context=context), Playlist),
        tie_break=settings.tie_break,
        stats=context.stats,
    )
    context.observer.emit(
        "catalog.phase1", Severity.INFO, tracks=len(tracks), playlists=len(playlists)
    )

    # Phase 2: who made it and how it was received
    authors = _authors(tracks, playlists)
    target_ids = tuple(record.global_id for record in (*tracks, *playlists))
    profile_result, metadata_result, engagement_result = await asyncio.gather(
        _fetch(
            sources,
            ProfileQuery(authors=authors, limit=len(authors) * settings.profiles_per_artist),
            timeout=settings.profile_timeout,
            context=context,
            log=log,
        )
        if authors
        else _empty(),
        _fetch(
            sources,
            ArtistMetadataQuery(
                authors=authors, limit=len(authors) * settings.metadata_per_artist
            ),
            timeout=settings.metadata_timeout,
            context=context,
            log=log,
        )
        if authors and settings.include_artist_metadata
        else _empty(),
        _fetch(
            sources,
            EngagementQuery(target_ids=target_ids, limit=settings.engagement_limit),
            timeout=settings.engagement_timeout,
            context=context,
            log=log,
        )
        if target_ids
        else _empty(),
    )

    profiles = dedupe_latest(
        select(convert_batch(profile_result.records, context=context), ProfileInfo),
        tie_break=settings.tie_break,
        stats=context.stats,
    )
    context.profiles.put_many(profiles)
    profile_index = {profile.author_id: profile for profile in profiles}
    for author_id in authors:
        if author_id not in profile_index:
            profile_index[author_id] = ProfileInfo.placeholder(author_id)

    metadata = dedupe_latest(
        select(convert_batch(metadata_result.records, context=context), ArtistMetadata),
        tie_break=settings.tie_break,
        stats=context.stats,
    )

    engagement = dedupe_by_global_id(
        convert_batch(engagement_result.records, context=context), stats=context.stats
    )
    reaction_ids = tuple(
        record.global_id
        for record in engagement
        if isinstance(record, EngagementReceipt) and record.receipt_type is ReceiptType.REACTION
    )
    if reaction_ids:
        deletion_result = await _fetch(
            sources,
            DeletionQuery(target_ids=reaction_ids),
            timeout=settings.engagement_timeout,
            context=context,
            log=log,
        )
        engagement.extend(
            dedupe_by_global_id(
                select(convert_batch(deletion_result.records, context=context), Deletion),
                stats=context.stats,
            )
        )
    tallies = aggregate_engagement(
        record
        for record in engagement
        if isinstance(record, EngagementReceipt | Comment | Deletion)
    )

    tracks = sorted(
        (_with_artist(track, profile_index.get(track.author_id)) for track in tracks),
        key=lambda track: track.created_at,
        reverse=True,
    )
    releases = build_releases(playlists, tracks, tallies=tallies, profiles=context.profiles)

    bundle = CatalogBundle(
        fetched_at=fetched_at,
        tracks=tracks,
        playlists=playlists,
        releases=releases,
        profiles=profile_index,
        artist_metadata={entry.author_id: entry for entry in metadata},
        tallies=tallies,
        sources_used=log.sources_used,
        degraded=log.degraded,
    )
    context.observer.emit(
        "catalog.collected",
        Severity.WARNING if bundle.degraded else Severity.INFO,
        tracks=len(bundle.tracks),
        releases=len(bundle.releases),
        artists=len(authors),
        engagement_targets=len(tallies),
        degraded=bundle.degraded,
        **context.stats.as_dict(),
    )
    return bundle


def _with_artist(track: Track, profile: ProfileInfo | None) -> Track:
    if profile is None:
        return track
    return replace(track, artist_name=profile.display, artist_image=profile.picture)
