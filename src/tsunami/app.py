"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from logging import getLogger
from typing import TYPE_CHECKING, Any

from tsunami.adapters.observability import LoggingObserver
from tsunami.adapters.payments import DescriptionAmountExtractor
from tsunami.adapters.relay import build_relay_sources
from tsunami.adapters.snapshot_files import (
    FileArtifactStore,
    SnapshotPersistenceError,
    trending_entry_document,
)
from tsunami.config import data_dir_for, get_relay_config, get_snapshot_config, resolve_dist_dir
from tsunami.config.errors import ConfigurationError
from tsunami.domain.context import PipelineContext
from tsunami.domain.ingest.catalog import CatalogSettings, collect_catalog
from tsunami.domain.model import Provenance, Severity
from tsunami.domain.ranking.trending import DEFAULT_LIMIT, TrendingSettings, rank_trending
from tsunami.domain.releases import latest_release
from tsunami.domain.snapshots import TRENDING_TRACKS, SnapshotWriter, plan_artifacts
from tsunami.domain.snapshots.artifacts import hero_track_ids

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from pathlib import Path

    from tsunami.config import RelayConfig, SnapshotConfig
    from tsunami.domain.context import Clock
    from tsunami.domain.ports import ArtifactStore, PipelineObserver, Source
    from tsunami.domain.snapshots import SnapshotReport, StoredSnapshot

log = getLogger(__name__)

DEFAULT_MAX_AGE = timedelta(minutes=30)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class BuildResult:
    report: SnapshotReport
    catalog_degraded: bool
    stats: Mapping[str, int] = field(default_factory=dict[str, int])

    @property
    def degraded(self) -> bool:
        return self.catalog_degraded or self.report.degraded


@dataclass(frozen=True, slots=True)
class TrendingView:
    """Trending documents as published, plus where they came from."""

    items: tuple[Mapping[str, Any], ...]
    generated_at: datetime
    from_cache: bool
    degraded: bool


def catalog_settings(config: RelayConfig) -> CatalogSettings:
    return CatalogSettings(
        catalog_timeout=config.timeouts.catalog,
        profile_timeout=config.timeouts.profiles,
        metadata_timeout=config.timeouts.metadata,
        engagement_timeout=config.timeouts.engagement,
        track_limit=config.limits.tracks,
        playlist_limit=config.limits.playlists,
        engagement_limit=config.limits.engagement,
        profiles_per_artist=config.limits.profiles_per_artist,
        metadata_per_artist=config.limits.metadata_per_artist,
    )


def default_store(dist_dir: Path | None = None) -> FileArtifactStore:
    return FileArtifactStore(data_dir_for(resolve_dist_dir(dist_dir)))


def _context(*, clock: Clock, observer: PipelineObserver | None) -> PipelineContext:
    return PipelineContext(
        amount_extractor=DescriptionAmountExtractor(),
        observer=observer or LoggingObserver(),
        clock=clock,
    )


def _resolve_sources(
    sources: Sequence[Source] | None, relay_config: RelayConfig
) -> Sequence[Source]:
    resolved = list(sources) if sources is not None else build_relay_sources(relay_config)
    if not resolved:
        raise ConfigurationError("No sources configured")
    return resolved


async def build_snapshots_async(
    *,
    relay_config: RelayConfig | None = None,
    snapshot_config: SnapshotConfig | None = None,
    sources: Sequence[Source] | None = None,
    store: ArtifactStore | None = None,
    clock: Clock = _utcnow,
    observer: PipelineObserver | None = None,
) -> BuildResult:
    """Collect the catalog once and publish every snapshot artifact.

    A run where every source fails still publishes schema-valid fallback
    artifacts; the result is then flagged as degraded.
    """

    relay_config = relay_config or get_relay_config()
    snapshot_config = snapshot_config or get_snapshot_config()
    effective_sources = _resolve_sources(sources, relay_config)
    effective_store = store or FileArtifactStore(snapshot_config.data_dir())
    context = _context(clock=clock, observer=observer)

    log.info(
        "Starting snapshot build: run=%s, sources=%d, artist=%s",
        context.run_id,
        len(effective_sources),
        snapshot_config.artist_pubkey,
    )
    bundle = await collect_catalog(
        effective_sources, settings=catalog_settings(relay_config), context=context
    )
    if bundle.degraded:
        log.warning("Catalog collected in degraded mode: sources used=%s", bundle.sources_used)

    writer = SnapshotWriter(
        effective_store,
        clock=clock,
        schema_version=snapshot_config.schema_version,
        sources_used=bundle.sources_used,
        observer=context.observer,
    )
    specs = plan_artifacts(
        bundle,
        artist_id=snapshot_config.artist_pubkey,
        now=context.now(),
        caps=snapshot_config.caps,
        sources_configured=[source.name for source in effective_sources],
        stats=context.stats,
    )
    report = await writer.write_all(specs)
    result = BuildResult(
        report=report, catalog_degraded=bundle.degraded, stats=context.stats.as_dict()
    )
    log.info(
        "Finished snapshot build: artifacts=%d, degraded=%s, tracks=%d, releases=%d",
        len(report.outcomes),
        result.degraded,
        len(bundle.tracks),
        len(bundle.releases),
    )
    return result


def build_snapshots(
    *,
    relay_config: RelayConfig | None = None,
    snapshot_config: SnapshotConfig | None = None,
    sources: Sequence[Source] | None = None,
    store: ArtifactStore | None = None,
    clock: Clock = _utcnow,
) -> BuildResult:
    return asyncio.run(
        build_snapshots_async(
            relay_config=relay_config,
            snapshot_config=snapshot_config,
            sources=sources,
            store=store,
            clock=clock,
        )
    )


async def _read_fresh(
    store: ArtifactStore, *, now: datetime, max_age: timedelta
) -> StoredSnapshot | None:
    try:
        cached = await store.read(TRENDING_TRACKS)
    except SnapshotPersistenceError:
        log.warning("Cached %s artifact is unreadable, going live", TRENDING_TRACKS)
        return None
    if cached is None:
        return None
    try:
        age = now - cached.metadata.generated_at
    except TypeError:
        log.warning("Cached %s artifact has an unusable timestamp, going live", TRENDING_TRACKS)
        return None
    if age > max_age or not cached.items:
        log.info("Cached %s artifact is stale or empty (age=%s)", TRENDING_TRACKS, age)
        return None
    return cached


def _excluded(item: Mapping[str, Any], exclude: Sequence[str]) -> bool:
    track = item.get("track")
    if not isinstance(track, dict):
        return False
    return track.get("id") in exclude or track.get("coordinate") in exclude


async def load_trending_tracks_async(
    *,
    limit: int = DEFAULT_LIMIT,
    exclude: Sequence[str] = (),
    max_age: timedelta = DEFAULT_MAX_AGE,
    relay_config: RelayConfig | None = None,
    store: ArtifactStore | None = None,
    sources: Sequence[Source] | None = None,
    clock: Clock = _utcnow,
    observer: PipelineObserver | None = None,
) -> TrendingView:
    """Serve trending tracks from the published snapshot, or compute them live.

    Only configuration problems raise. Every other failure shows up as an empty
    or partial result with ``degraded`` set.
    """

    if limit < 0:
        raise ConfigurationError(f"Trending limit must be non-negative, got {limit}")
    relay_config = relay_config or get_relay_config()
    now = clock()

    if store is not None:
        cached = await _read_fresh(store, now=now, max_age=max_age)
        if cached is not None:
            items = tuple(item for item in cached.items if not _excluded(item, exclude))
            return TrendingView(
                items=items[:limit],
                generated_at=cached.metadata.generated_at,
                from_cache=True,
                degraded=cached.metadata.provenance is not Provenance.PRIMARY,
            )

    effective_sources = _resolve_sources(sources, relay_config)
    context = _context(clock=clock, observer=observer)
    settings = replace(catalog_settings(relay_config), include_artist_metadata=False)
    try:
        bundle = await collect_catalog(effective_sources, settings=settings, context=context)
    except ConfigurationError:
        raise
    except Exception:
        log.exception("Live trending pipeline failed")
        context.observer.emit("trending.live_failed", Severity.ERROR)
        return TrendingView(items=(), generated_at=now, from_cache=False, degraded=True)

    entries = rank_trending(
        bundle.tracks,
        bundle.tallies,
        exclude=(*exclude, *hero_track_ids(latest_release(bundle.releases))),
        settings=TrendingSettings(limit=limit),
        clock=lambda: now,
    )
    return TrendingView(
        items=tuple(
            trending_entry_document(entry).model_dump(mode="json", by_alias=True)
            for entry in entries
        ),
        generated_at=now,
        from_cache=False,
        degraded=bundle.degraded,
    )


def load_trending_tracks(
    *,
    limit: int = DEFAULT_LIMIT,
    exclude: Sequence[str] = (),
    max_age: timedelta = DEFAULT_MAX_AGE,
    relay_config: RelayConfig | None = None,
    store: ArtifactStore | None = None,
    sources: Sequence[Source] | None = None,
    clock: Clock = _utcnow,
) -> TrendingView:
    return asyncio.run(
        load_trending_tracks_async(
            limit=limit,
            exclude=exclude,
            max_age=max_age,
            relay_config=relay_config,
            store=store,
            sources=sources,
            clock=clock,
        )
    )
