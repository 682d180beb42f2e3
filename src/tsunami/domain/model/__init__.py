"""Public domain model surface."""

from __future__ import annotations

from tsunami.domain.model.enums import (
    Provenance,
    ReceiptType,
    RecordKind,
    Severity,
    is_addressable,
    is_replaceable,
)
from tsunami.domain.model.music import (
    Playlist,
    Release,
    ReleaseTrack,
    Track,
    TrackReference,
    ZapSplit,
)
from tsunami.domain.model.records import Coordinate, RawRecord, Tag
from tsunami.domain.model.social import (
    ArtistMetadata,
    Comment,
    Deletion,
    EngagementReceipt,
    ProfileInfo,
    placeholder_artist_name,
)

type DomainRecord = (
    Track | Playlist | ProfileInfo | ArtistMetadata | EngagementReceipt | Comment | Deletion
)

__all__ = [  # noqa: RUF022
    # envelopes
    "Coordinate",
    "RawRecord",
    "Tag",
    "DomainRecord",
    # enums
    "RecordKind",
    "Provenance",
    "ReceiptType",
    "Severity",
    "is_addressable",
    "is_replaceable",
    # music
    "Track",
    "TrackReference",
    "ZapSplit",
    "Playlist",
    "Release",
    "ReleaseTrack",
    # social
    "ProfileInfo",
    "ArtistMetadata",
    "EngagementReceipt",
    "Comment",
    "Deletion",
    "placeholder_artist_name",
]
