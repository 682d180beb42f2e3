"""Profiles, artist metadata and engagement records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, ClassVar

from tsunami.domain.model.enums import ReceiptType, RecordKind

if TYPE_CHECKING:
    from tsunami.domain.model.records import Coordinate


def placeholder_artist_name(author_id: str) -> str:
    return f"Artist {author_id[:8]}..."


@dataclass(frozen=True, slots=True, kw_only=True)
class ProfileInfo:
    KIND: ClassVar[RecordKind] = RecordKind.PROFILE

    global_id: str
    author_id: str
    coordinate: Coordinate | None
    created_at: int

    name: str | None = None
    display_name: str | None = None
    picture: str | None = None
    banner: str | None = None
    about: str | None = None
    website: str | None = None
    lud16: str | None = None
    nip05: str | None = None
    follower_count: int = 0
    supersedes: str | None = None

    @property
    def display(self) -> str:
        return self.display_name or self.name or placeholder_artist_name(self.author_id)

    @classmethod
    def placeholder(cls, author_id: str) -> ProfileInfo:
        """Profile stand-in for artists whose profile never arrived."""

        return cls(
            global_id="",
            author_id=author_id,
            coordinate=None,
            created_at=0,
            name=placeholder_artist_name(author_id),
        )


@dataclass(frozen=True, slots=True, kw_only=True)
class ArtistMetadata:
    KIND: ClassVar[RecordKind] = RecordKind.ARTIST_METADATA

    global_id: str
    author_id: str
    coordinate: Coordinate
    created_at: int
    data: dict[str, Any] = field(default_factory=dict, hash=False)
    supersedes: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class EngagementReceipt:
    """A zap receipt or reaction pointing at another record.

    ``sender_id`` is the engaging user. For zap receipts that is the author of the
    embedded zap request when it can be read, otherwise the receipt author.
    """

    global_id: str
    author_id: str
    created_at: int
    receipt_type: ReceiptType
    sender_id: str
    target_id: str | None = None
    target_coordinate: str | None = None
    amount: int = 0
    symbol: str | None = None
    coordinate: None = None

    @property
    def target(self) -> str:
        return self.target_id or self.target_coordinate or ""


@dataclass(frozen=True, slots=True, kw_only=True)
class Comment:
    KIND: ClassVar[RecordKind] = RecordKind.COMMENT

    global_id: str
    author_id: str
    created_at: int
    content: str
    root_kind: str
    root_id: str | None = None
    root_coordinate: str | None = None
    parent_id: str | None = None
    coordinate: None = None

    @property
    def target(self) -> str:
        return self.root_id or self.root_coordinate or ""


@dataclass(frozen=True, slots=True, kw_only=True)
class Deletion:
    KIND: ClassVar[RecordKind] = RecordKind.DELETION

    global_id: str
    author_id: str
    created_at: int
    target_ids: tuple[str, ...] = ()
    target_coordinates: tuple[str, ...] = ()
    coordinate: None = None
