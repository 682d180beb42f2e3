"""Explicit run context shared across pipeline phases."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Protocol

from tsunami.domain.ports.observability import NullObserver

if TYPE_CHECKING:
    from collections.abc import Iterable

    from tsunami.domain.model import ProfileInfo
    from tsunami.domain.ports import PipelineObserver, ReceiptAmountExtractor


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def _utcnow() -> datetime:
    return datetime.now(UTC)


DEFAULT_PROFILE_TTL = timedelta(minutes=30)


@dataclass(slots=True)
class PipelineStats:
    """Counters describing what happened during one run."""

    source_queries: int = 0
    source_failures: int = 0
    source_timeouts: int = 0
    records_received: int = 0
    validation_failures: int = 0
    conversion_failures: int = 0
    dedup_collapsed: int = 0
    superseded_edits: int = 0
    degraded_queries: int = 0

    @property
    def degraded(self) -> bool:
        return self.degraded_queries > 0

    def as_dict(self) -> dict[str, int]:
        return {
            "source_queries": self.source_queries,
            "source_failures": self.source_failures,
            "source_timeouts": self.source_timeouts,
            "records_received": self.records_received,
            "validation_failures": self.validation_failures,
            "conversion_failures": self.conversion_failures,
            "dedup_collapsed": self.dedup_collapsed,
            "superseded_edits": self.superseded_edits,
            "degraded_queries": self.degraded_queries,
        }


@dataclass(slots=True)
class _CachedProfile:
    profile: ProfileInfo
    stored_at: datetime


@dataclass(slots=True)
class ProfileCache:
    """Artist display information with a bounded lifetime.

    Entries older than ``ttl`` are treated as absent and dropped on access.
    """

    ttl: timedelta = DEFAULT_PROFILE_TTL
    clock: Clock = _utcnow
    _entries: dict[str, _CachedProfile] = field(default_factory=dict[str, _CachedProfile])

    def get(self, author_id: str) -> ProfileInfo | None:
        entry = self._entries.get(author_id)
        if entry is None:
            return None
        if self.clock() - entry.stored_at > self.ttl:
            del self._entries[author_id]
            return None
        return entry.profile

    def put(self, profile: ProfileInfo) -> None:
        current = self.get(profile.author_id)
        if current is not None and current.created_at > profile.created_at:
            return
        self._entries[profile.author_id] = _CachedProfile(profile, self.clock())

    def put_many(self, profiles: Iterable[ProfileInfo]) -> None:
        for profile in profiles:
            self.put(profile)

    def invalidate(self, author_id: str) -> None:
        self._entries.pop(author_id, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, author_id: object) -> bool:
        return isinstance(author_id, str) and self.get(author_id) is not None

    def __len__(self) -> int:
        return len(self._entries)


@dataclass(slots=True)
class PipelineContext:
    """Mutable context shared across pipeline phases."""

    amount_extractor: ReceiptAmountExtractor
    observer: PipelineObserver = field(default_factory=NullObserver)
    clock: Clock = _utcnow
    profiles: ProfileCache = field(default_factory=ProfileCache)
    stats: PipelineStats = field(default_factory=PipelineStats)
    run_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])

    def now(self) -> datetime:
        return self.clock()
