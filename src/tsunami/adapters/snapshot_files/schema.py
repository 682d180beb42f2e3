"""JSON documents of the published snapshot artifacts (camelCase keys)."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import Any

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from tsunami.domain.model import Provenance  # noqa: TC001


class DocumentModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class MetadataDocument(DocumentModel):
    generated_at: AwareDatetime
    total_count: int = Field(ge=0)
    sources_used: list[str] = Field(default_factory=list)
    provenance: Provenance
    schema_version: str
    release_id: str | None = None


class ZapSplitDocument(DocumentModel):
    address: str
    percentage: float


class TrackDocument(DocumentModel):
    id: str
    pubkey: str
    coordinate: str
    created_at: int
    identifier: str
    title: str
    artist: str
    audio_url: str
    description: str | None = None
    lyrics: str | None = None
    credits: str | None = None
    album: str | None = None
    track_number: int | None = None
    release_date: str | None = None
    duration: int | None = None
    format: str | None = None
    image_url: str | None = None
    video_url: str | None = None
    language: str | None = None
    explicit: bool = False
    genres: list[str] = Field(default_factory=list)
    zap_splits: list[ZapSplitDocument] = Field(default_factory=list)
    artist_name: str | None = None
    artist_image: str | None = None


class TrendingEntryDocument(DocumentModel):
    track: TrackDocument
    engagement_count: int = Field(ge=0)
    engagement_amount: int = Field(ge=0)
    recency_score: float
    composite_score: float


class ReleaseTrackDocument(DocumentModel):
    title: str
    audio_url: str
    identifier: str
    pubkey: str
    id: str | None = None
    duration: int | None = None
    explicit: bool = False
    language: str | None = None
    image_url: str | None = None
    audio_type: str = "audio/mpeg"


class ReleaseDocument(DocumentModel):
    id: str
    pubkey: str
    identifier: str
    title: str
    created_at: int
    published_at: datetime
    tracks: list[ReleaseTrackDocument] = Field(default_factory=list)
    description: str | None = None
    image_url: str | None = None
    tags: list[str] = Field(default_factory=list)
    genre: str | None = None
    total_duration: int | None = None
    zap_count: int = 0
    total_sats: int = 0
    comment_count: int = 0
    artist_name: str | None = None
    artist_image: str | None = None


class ArtistDocument(DocumentModel):
    pubkey: str
    name: str
    display_name: str | None = None
    picture: str | None = None
    banner: str | None = None
    about: str | None = None
    website: str | None = None
    lud16: str | None = None
    nip05: str | None = None


class ArtistMetricsDocument(DocumentModel):
    release_count: int
    track_count: int
    total_sats: int
    total_zaps: int
    recent_activity: int
    follower_count: int
    last_release_at: int | None = None


class FeaturedArtistDocument(DocumentModel):
    artist: ArtistDocument
    metrics: ArtistMetricsDocument
    featured_score: float
    release_score: float
    zap_score: float
    activity_score: float
    follower_score: float
    final_score: float


class CacheHealthDocument(DocumentModel):
    status: str
    artist_id: str
    track_count: int
    release_count: int
    artist_count: int
    artist_metadata_found: bool
    sources_configured: list[str] = Field(default_factory=list)
    sources_used: list[str] = Field(default_factory=list)
    counters: dict[str, int] = Field(default_factory=dict)


type ItemDocument = (
    TrendingEntryDocument | ReleaseDocument | FeaturedArtistDocument | CacheHealthDocument
)


class SnapshotDocument(DocumentModel):
    """On-disk envelope. Items stay loosely typed so any artifact reads back."""

    metadata: MetadataDocument
    items: list[dict[str, Any]] = Field(default_factory=list)
