"""Typed query filters, one variant per query purpose.

Each variant exposes only the constraints that make sense for its record kinds;
adapters translate them to their wire format with a ``match`` over the union.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from tsunami.domain.model.enums import RecordKind

ARTIST_METADATA_IDENTIFIER = "artist-metadata"
MUSIC_TOPIC = "music"


@dataclass(frozen=True, slots=True, kw_only=True)
class TrackQuery:
    KINDS: ClassVar[tuple[RecordKind, ...]] = (RecordKind.MUSIC_TRACK,)

    authors: tuple[str, ...] = ()
    identifiers: tuple[str, ...] = ()
    since: int | None = None
    until: int | None = None
    limit: int = 400


@dataclass(frozen=True, slots=True, kw_only=True)
class PlaylistQuery:
    KINDS: ClassVar[tuple[RecordKind, ...]] = (RecordKind.MUSIC_PLAYLIST,)

    authors: tuple[str, ...] = ()
    identifiers: tuple[str, ...] = ()
    since: int | None = None
    until: int | None = None
    limit: int = 200


@dataclass(frozen=True, slots=True, kw_only=True)
class ProfileQuery:
    KINDS: ClassVar[tuple[RecordKind, ...]] = (RecordKind.PROFILE,)

    authors: tuple[str, ...]
    limit: int | None = None

    @property
    def effective_limit(self) -> int:
        # several versions per author may still be in circulation
        return self.limit if self.limit is not None else len(self.authors) * 2


@dataclass(frozen=True, slots=True, kw_only=True)
class ArtistMetadataQuery:
    KINDS: ClassVar[tuple[RecordKind, ...]] = (RecordKind.ARTIST_METADATA,)
    IDENTIFIER: ClassVar[str] = ARTIST_METADATA_IDENTIFIER

    authors: tuple[str, ...]
    limit: int = 5


@dataclass(frozen=True, slots=True, kw_only=True)
class EngagementQuery:
    """Receipts, reactions and comments pointing at the given records."""

    KINDS: ClassVar[tuple[RecordKind, ...]] = (
        RecordKind.ZAP_RECEIPT,
        RecordKind.REACTION,
        RecordKind.COMMENT,
    )

    target_ids: tuple[str, ...]
    since: int | None = None
    limit: int = 1000


@dataclass(frozen=True, slots=True, kw_only=True)
class DeletionQuery:
    """Deletion requests naming the given records."""

    KINDS: ClassVar[tuple[RecordKind, ...]] = (RecordKind.DELETION,)

    target_ids: tuple[str, ...]
    limit: int = 500


type Query = (
    TrackQuery
    | PlaylistQuery
    | ProfileQuery
    | ArtistMetadataQuery
    | EngagementQuery
    | DeletionQuery
)


def describe(query: Query) -> str:
    """Short label used in log events."""

    kinds = ",".join(str(int(kind)) for kind in query.KINDS)
    return f"{type(query).__name__}[{kinds}]"
