"""Concurrent query fan-out across independent sources.

Every source gets the same query and its own timeout. A source that raises or
runs out of time contributes nothing; the union of the successful answers is
returned together with a per-source outcome and a ``degraded`` flag. Records
are not deduplicated here.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from tsunami.config.errors import ConfigurationError
from tsunami.domain.filters import describe
from tsunami.domain.model.enums import Severity
from tsunami.domain.ports.observability import NullObserver

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tsunami.domain.context import PipelineStats
    from tsunami.domain.filters import Query
    from tsunami.domain.model import RawRecord
    from tsunami.domain.ports import PipelineObserver, Source


class OutcomeStatus(StrEnum):
    OK = "ok"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True, slots=True)
class SourceOutcome:
    source: str
    status: OutcomeStatus
    record_count: int = 0
    elapsed_seconds: float = 0.0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.OK


@dataclass(frozen=True, slots=True)
class FanOutResult:
    records: tuple[RawRecord, ...]
    outcomes: tuple[SourceOutcome, ...]

    @property
    def degraded(self) -> bool:
        return any(not outcome.ok for outcome in self.outcomes)

    @property
    def all_failed(self) -> bool:
        return not any(outcome.ok for outcome in self.outcomes)

    @property
    def sources_used(self) -> tuple[str, ...]:
        return tuple(outcome.source for outcome in self.outcomes if outcome.ok)


async def fan_out(
    sources: Sequence[Source],
    query: Query,
    *,
    timeout: float,
    observer: PipelineObserver | None = None,
    stats: PipelineStats | None = None,
) -> FanOutResult:
    """Issue ``query`` against every source concurrently.

    Raises ``ConfigurationError`` when no sources are configured. Never raises
    for source failures; inspect ``FanOutResult.degraded`` instead.
    """

    if not sources:
        raise ConfigurationError("No sources configured for fan-out")
    observer = observer or NullObserver()
    label = describe(query)

    answers = await asyncio.gather(
        *(_query_source(source, query, timeout=timeout) for source in sources)
    )

    records: list[RawRecord] = []
    outcomes: list[SourceOutcome] = []
    for outcome, batch in answers:
        outcomes.append(outcome)
        records.extend(batch)
        if outcome.ok:
            observer.emit(
                "source.ok",
                Severity.DEBUG,
                source=outcome.source,
                query=label,
                records=outcome.record_count,
                elapsed=round(outcome.elapsed_seconds, 3),
            )
        else:
            observer.emit(
                f"source.{outcome.status}",
                Severity.WARNING,
                source=outcome.source,
                query=label,
                error=outcome.error,
            )

    result = FanOutResult(records=tuple(records), outcomes=tuple(outcomes))
    if stats is not None:
        stats.source_queries += len(outcomes)
        stats.source_failures += sum(o.status is OutcomeStatus.FAILED for o in outcomes)
        stats.source_timeouts += sum(o.status is OutcomeStatus.TIMED_OUT for o in outcomes)
        stats.records_received += len(records)
        if result.degraded:
            stats.degraded_queries += 1
    if result.all_failed:
        observer.emit("fanout.all_failed", Severity.ERROR, query=label, sources=len(sources))
    return result


async def _query_source(
    source: Source, query: Query, *, timeout: float
) -> tuple[SourceOutcome, Sequence[RawRecord]]:
    started = time.monotonic()
    try:
        batch = await asyncio.wait_for(source.query(query), timeout=timeout)
    except TimeoutError:
        elapsed = time.monotonic() - started
        return SourceOutcome(
            source.name,
            OutcomeStatus.TIMED_OUT,
            elapsed_seconds=elapsed,
            error=f"no answer within {timeout:g}s",
        ), ()
    except Exception as exc:  # noqa: BLE001
        elapsed = time.monotonic() - started
        return SourceOutcome(
            source.name,
            OutcomeStatus.FAILED,
            elapsed_seconds=elapsed,
            error=f"{type(exc).__name__}: {exc}",
        ), ()
    elapsed = time.monotonic() - started
    return SourceOutcome(
        source.name, OutcomeStatus.OK, record_count=len(batch), elapsed_seconds=elapsed
    ), batch
