"""Raw signed envelopes and their logical coordinates."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Self

from tsunami.domain.model.enums import is_addressable, is_replaceable

if TYPE_CHECKING:
    from collections.abc import Iterator

type Tag = tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Coordinate:
    """Stable identity of a mutable record across its edit history."""

    author_id: str
    kind: int
    identifier: str = ""

    def __str__(self) -> str:
        return f"{self.kind}:{self.author_id}:{self.identifier}"

    @classmethod
    def parse(cls, value: str) -> Self:
        """Parse ``kind:author:identifier``; anything but exactly three parts is rejected."""

        parts = value.split(":")
        if len(parts) != 3:
            raise ValueError(f"Coordinate must have exactly three parts: {value!r}")
        kind, author_id, identifier = parts
        if not kind.isdigit():
            raise ValueError(f"Coordinate kind must be numeric: {value!r}")
        return cls(author_id=author_id, kind=int(kind), identifier=identifier)

    @property
    def key(self) -> str:
        """Author-scoped key used to resolve references within a single kind."""

        return f"{self.author_id}:{self.identifier}"


@dataclass(frozen=True, slots=True, kw_only=True)
class RawRecord:
    """Immutable envelope as received from a source. Untrusted until validated."""

    global_id: str
    author_id: str
    kind: int
    created_at: int
    tags: tuple[Tag, ...] = ()
    content: str = ""
    signature: str = ""

    def iter_tags(self, name: str) -> Iterator[Tag]:
        return (tag for tag in self.tags if tag and tag[0] == name)

    def first_value(self, name: str) -> str | None:
        """Return the first value of the first ``name`` attribute, if any."""

        for tag in self.iter_tags(name):
            if len(tag) > 1:
                return tag[1]
            return None
        return None

    def values(self, name: str) -> list[str]:
        """Return the first value of every ``name`` attribute, in order."""

        return [tag[1] for tag in self.iter_tags(name) if len(tag) > 1]

    def has_tag(self, name: str, value: str | None = None) -> bool:
        return any(
            value is None or (len(tag) > 1 and tag[1] == value) for tag in self.iter_tags(name)
        )

    @property
    def coordinate(self) -> Coordinate | None:
        if is_addressable(self.kind):
            return Coordinate(self.author_id, self.kind, self.first_value("d") or "")
        if is_replaceable(self.kind):
            return Coordinate(self.author_id, self.kind)
        return None

    @property
    def published_at(self) -> datetime:
        return datetime.fromtimestamp(max(self.created_at, 0), tz=UTC)
