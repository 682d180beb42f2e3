"""Music domain records: tracks, playlists and their display projection.

Tracks and playlists are addressable records; a playlist references tracks by
coordinate. A Release is the playlist resolved against the deduplicated track
set of the same run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, ClassVar

from tsunami.domain.model.enums import RecordKind

if TYPE_CHECKING:
    from tsunami.domain.model.records import Coordinate


@dataclass(frozen=True, slots=True)
class ZapSplit:
    address: str
    percentage: float

    @property
    def is_lightning_address(self) -> bool:
        return "@" in self.address


@dataclass(frozen=True, slots=True)
class TrackReference:
    """Playlist entry pointing at a track coordinate."""

    author_id: str
    identifier: str
    kind: int = RecordKind.MUSIC_TRACK

    @property
    def key(self) -> str:
        return f"{self.author_id}:{self.identifier}"


@dataclass(frozen=True, slots=True, kw_only=True)
class Track:
    KIND: ClassVar[RecordKind] = RecordKind.MUSIC_TRACK

    global_id: str
    author_id: str
    coordinate: Coordinate
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
    audio_format: str | None = None
    image_url: str | None = None
    video_url: str | None = None
    language: str | None = None
    explicit: bool = False
    genres: tuple[str, ...] = ()
    zap_splits: tuple[ZapSplit, ...] = ()
    supersedes: str | None = None

    # Display information resolved from the run's profile cache
    artist_name: str | None = None
    artist_image: str | None = None

    @property
    def key(self) -> str:
        return f"{self.author_id}:{self.identifier}"


@dataclass(frozen=True, slots=True, kw_only=True)
class Playlist:
    KIND: ClassVar[RecordKind] = RecordKind.MUSIC_PLAYLIST

    global_id: str
    author_id: str
    coordinate: Coordinate
    created_at: int

    identifier: str
    title: str
    tracks: tuple[TrackReference, ...]
    description: str | None = None
    image_url: str | None = None
    categories: tuple[str, ...] = ()
    supersedes: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ReleaseTrack:
    """One playable entry of a release. An empty ``audio_url`` marks an unresolved reference."""

    title: str
    audio_url: str
    identifier: str
    author_id: str
    global_id: str | None = None
    duration: int | None = None
    explicit: bool = False
    language: str | None = None
    image_url: str | None = None
    audio_type: str = "audio/mpeg"

    @property
    def is_placeholder(self) -> bool:
        return not self.audio_url


@dataclass(frozen=True, slots=True, kw_only=True)
class Release:
    global_id: str
    author_id: str
    identifier: str
    title: str
    created_at: int
    tracks: tuple[ReleaseTrack, ...] = ()
    description: str | None = None
    image_url: str | None = None
    tags: tuple[str, ...] = field(default_factory=tuple)
    total_duration: int | None = None
    zap_count: int = 0
    total_sats: int = 0
    comment_count: int = 0
    artist_name: str | None = None
    artist_image: str | None = None

    @property
    def genre(self) -> str | None:
        return self.tags[0] if self.tags else None

    @property
    def published_at(self) -> datetime:
        return datetime.fromtimestamp(max(self.created_at, 0), tz=UTC)
