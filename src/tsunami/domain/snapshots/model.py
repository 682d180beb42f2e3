"""Snapshot artifacts and their metadata envelope."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from tsunami.domain.model import Provenance

if TYPE_CHECKING:
    from collections.abc import Mapping
    from datetime import datetime

    from tsunami.domain.model import Release
    from tsunami.domain.ranking import FeaturedArtist, TrendingEntry


@dataclass(frozen=True, slots=True, kw_only=True)
class CacheHealth:
    """Summary of one build, published next to the artifacts it describes."""

    status: str
    artist_id: str
    track_count: int
    release_count: int
    artist_count: int
    artist_metadata_found: bool
    sources_configured: tuple[str, ...]
    sources_used: tuple[str, ...]
    counters: Mapping[str, int] = field(default_factory=dict[str, int], hash=False)


type SnapshotItem = Release | TrendingEntry | FeaturedArtist | CacheHealth


@dataclass(frozen=True, slots=True, kw_only=True)
class SnapshotMetadata:
    generated_at: datetime
    total_count: int
    sources_used: tuple[str, ...]
    provenance: Provenance
    schema_version: str
    release_id: str | None = None


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Immutable artifact content. Never holds more items than its cap."""

    items: tuple[SnapshotItem, ...]
    metadata: SnapshotMetadata
    cap: int

    def __post_init__(self) -> None:
        if self.cap < 0:
            raise ValueError(f"Snapshot cap must be non-negative, got {self.cap}")
        if len(self.items) > self.cap:
            raise ValueError(f"Snapshot holds {len(self.items)} items but its cap is {self.cap}")
        if self.metadata.total_count != len(self.items):
            raise ValueError("Snapshot metadata total_count must match the number of items")

    @property
    def is_fallback(self) -> bool:
        return self.metadata.provenance is Provenance.FALLBACK


@dataclass(frozen=True, slots=True)
class StoredSnapshot:
    """An artifact read back from the store, items left as documents."""

    name: str
    metadata: SnapshotMetadata
    items: tuple[Mapping[str, Any], ...] = ()
