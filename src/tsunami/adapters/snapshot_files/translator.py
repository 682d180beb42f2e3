"""Translate snapshots between domain objects and stored documents."""

from __future__ import annotations

from datetime import UTC
from typing import TYPE_CHECKING, Any

from tsunami.domain.model import ProfileInfo, Release, ReleaseTrack, Track
from tsunami.domain.ranking import FeaturedArtist, TrendingEntry
from tsunami.domain.snapshots.model import CacheHealth, SnapshotMetadata, StoredSnapshot

from .schema import (
    ArtistDocument,
    ArtistMetricsDocument,
    CacheHealthDocument,
    FeaturedArtistDocument,
    MetadataDocument,
    ReleaseDocument,
    ReleaseTrackDocument,
    SnapshotDocument,
    TrackDocument,
    TrendingEntryDocument,
    ZapSplitDocument,
)

if TYPE_CHECKING:
    from datetime import datetime

    from tsunami.adapters.snapshot_files.schema import ItemDocument
    from tsunami.domain.snapshots.model import Snapshot, SnapshotItem


def track_document(track: Track) -> TrackDocument:
    return TrackDocument(
        id=track.global_id,
        pubkey=track.author_id,
        coordinate=str(track.coordinate),
        created_at=track.created_at,
        identifier=track.identifier,
        title=track.title,
        artist=track.artist,
        audio_url=track.audio_url,
        description=track.description,
        lyrics=track.lyrics,
        credits=track.credits,
        album=track.album,
        track_number=track.track_number,
        release_date=track.release_date,
        duration=track.duration,
        format=track.audio_format,
        image_url=track.image_url,
        video_url=track.video_url,
        language=track.language,
        explicit=track.explicit,
        genres=list(track.genres),
        zap_splits=[
            ZapSplitDocument(address=split.address, percentage=split.percentage)
            for split in track.zap_splits
        ],
        artist_name=track.artist_name,
        artist_image=track.artist_image,
    )


def trending_entry_document(entry: TrendingEntry) -> TrendingEntryDocument:
    return TrendingEntryDocument(
        track=track_document(entry.track),
        engagement_count=entry.engagement_count,
        engagement_amount=entry.engagement_amount,
        recency_score=entry.recency_score,
        composite_score=entry.composite_score,
    )


def _release_track_document(track: ReleaseTrack) -> ReleaseTrackDocument:
    return ReleaseTrackDocument(
        title=track.title,
        audio_url=track.audio_url,
        identifier=track.identifier,
        pubkey=track.author_id,
        id=track.global_id,
        duration=track.duration,
        explicit=track.explicit,
        language=track.language,
        image_url=track.image_url,
        audio_type=track.audio_type,
    )


def release_document(release: Release) -> ReleaseDocument:
    return ReleaseDocument(
        id=release.global_id,
        pubkey=release.author_id,
        identifier=release.identifier,
        title=release.title,
        created_at=release.created_at,
        published_at=release.published_at,
        tracks=[_release_track_document(track) for track in release.tracks],
        description=release.description,
        image_url=release.image_url,
        tags=list(release.tags),
        genre=release.genre,
        total_duration=release.total_duration,
        zap_count=release.zap_count,
        total_sats=release.total_sats,
        comment_count=release.comment_count,
        artist_name=release.artist_name,
        artist_image=release.artist_image,
    )


def _artist_document(profile: ProfileInfo) -> ArtistDocument:
    return ArtistDocument(
        pubkey=profile.author_id,
        name=profile.display,
        display_name=profile.display_name,
        picture=profile.picture,
        banner=profile.banner,
        about=profile.about,
        website=profile.website,
        lud16=profile.lud16,
        nip05=profile.nip05,
    )


def featured_artist_document(featured: FeaturedArtist) -> FeaturedArtistDocument:
    metrics = featured.metrics
    return FeaturedArtistDocument(
        artist=_artist_document(featured.artist),
        metrics=ArtistMetricsDocument(
            release_count=metrics.release_count,
            track_count=metrics.track_count,
            total_sats=metrics.total_sats,
            total_zaps=metrics.total_zaps,
            recent_activity=metrics.recent_activity,
            follower_count=metrics.follower_count,
            last_release_at=metrics.last_release_at,
        ),
        featured_score=featured.featured_score,
        release_score=featured.release_score,
        zap_score=featured.zap_score,
        activity_score=featured.activity_score,
        follower_score=featured.follower_score,
        final_score=featured.final_score,
    )


def cache_health_document(health: CacheHealth) -> CacheHealthDocument:
    return CacheHealthDocument(
        status=health.status,
        artist_id=health.artist_id,
        track_count=health.track_count,
        release_count=health.release_count,
        artist_count=health.artist_count,
        artist_metadata_found=health.artist_metadata_found,
        sources_configured=list(health.sources_configured),
        sources_used=list(health.sources_used),
        counters=dict(health.counters),
    )


def item_document(item: SnapshotItem) -> ItemDocument:
    match item:
        case TrendingEntry():
            return trending_entry_document(item)
        case Release():
            return release_document(item)
        case FeaturedArtist():
            return featured_artist_document(item)
        case CacheHealth():
            return cache_health_document(item)
        case _:
            raise TypeError(f"Unsupported snapshot item: {type(item).__name__}")


def dump_item(item: SnapshotItem) -> dict[str, Any]:
    return item_document(item).model_dump(mode="json", by_alias=True)


def as_utc(value: datetime) -> datetime:
    """Naive timestamps are taken to be UTC already."""

    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def metadata_document(metadata: SnapshotMetadata) -> MetadataDocument:
    return MetadataDocument(
        generated_at=as_utc(metadata.generated_at),
        total_count=metadata.total_count,
        sources_used=list(metadata.sources_used),
        provenance=metadata.provenance,
        schema_version=metadata.schema_version,
        release_id=metadata.release_id,
    )


def snapshot_document(snapshot: Snapshot) -> SnapshotDocument:
    return SnapshotDocument(
        metadata=metadata_document(snapshot.metadata),
        items=[dump_item(item) for item in snapshot.items],
    )


def stored_snapshot(name: str, document: SnapshotDocument) -> StoredSnapshot:
    meta = document.metadata
    return StoredSnapshot(
        name=name,
        metadata=SnapshotMetadata(
            generated_at=meta.generated_at.astimezone(UTC),
            total_count=meta.total_count,
            sources_used=tuple(meta.sources_used),
            provenance=meta.provenance,
            schema_version=meta.schema_version,
            release_id=meta.release_id,
        ),
        items=tuple(document.items),
    )
