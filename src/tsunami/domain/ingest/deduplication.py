"""Collapse record versions into the current one per coordinate.

Responsibilities of this stage:
- keep exactly one record per coordinate, the one with the greatest timestamp
- drop originals that a later record explicitly supersedes via an edit
- collapse regular records relayed by several sources into one per global id

Coordinates are only unique within a kind, so callers dedupe each kind on its own.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable

    from tsunami.domain.context import PipelineStats
    from tsunami.domain.model import Coordinate


class TieBreak(StrEnum):
    """How to resolve two versions of a coordinate with the same timestamp."""

    LAST_SEEN = "last_seen"
    GLOBAL_ID = "global_id"


class Versioned(Protocol):
    @property
    def global_id(self) -> str: ...

    @property
    def author_id(self) -> str: ...

    @property
    def created_at(self) -> int: ...

    @property
    def coordinate(self) -> Coordinate | None: ...


def _replaces[T: Versioned](candidate: T, current: T, tie_break: TieBreak) -> bool:
    if candidate.created_at != current.created_at:
        return candidate.created_at > current.created_at
    if tie_break is TieBreak.GLOBAL_ID:
        return candidate.global_id > current.global_id
    return True


def superseded_ids(records: Iterable[Versioned]) -> set[str]:
    """Global ids retired by an ``edit`` attribute within ``records``.

    An edit only counts when the original is in the same batch, has the same
    type and was published by the same author. Nobody can retire someone
    else's records.
    """

    items = list(records)
    by_id = {record.global_id: record for record in items}
    superseded: set[str] = set()
    for record in items:
        original_id = getattr(record, "supersedes", None)
        if original_id is None or original_id == record.global_id:
            continue
        original = by_id.get(original_id)
        if (
            original is not None
            and type(original) is type(record)
            and original.author_id == record.author_id
        ):
            superseded.add(original_id)
    return superseded


def dedupe_latest[T: Versioned](
    records: Iterable[T],
    *,
    tie_break: TieBreak = TieBreak.LAST_SEEN,
    stats: PipelineStats | None = None,
) -> list[T]:
    """Return one record per coordinate, keeping the greatest ``created_at``.

    Records without a coordinate are kept once per global id. With
    ``TieBreak.LAST_SEEN`` an exact timestamp tie goes to the record seen last
    in iteration order; ``TieBreak.GLOBAL_ID`` makes it independent of order.
    """

    items = list(records)
    superseded = superseded_ids(items)
    current: dict[str, T] = {}
    dropped_edits = 0
    for record in items:
        if record.global_id in superseded:
            dropped_edits += 1
            continue
        key = str(record.coordinate) if record.coordinate is not None else record.global_id
        existing = current.get(key)
        if existing is None or _replaces(record, existing, tie_break):
            current[key] = record

    if stats is not None:
        stats.superseded_edits += dropped_edits
        stats.dedup_collapsed += len(items) - dropped_edits - len(current)
    return list(current.values())


def dedupe_by_global_id[T: Versioned](
    records: Iterable[T], *, stats: PipelineStats | None = None
) -> list[T]:
    """Keep the first occurrence of every global id."""

    seen: dict[str, T] = {}
    total = 0
    for record in records:
        total += 1
        seen.setdefault(record.global_id, record)
    if stats is not None:
        stats.dedup_collapsed += total - len(seen)
    return list(seen.values())
