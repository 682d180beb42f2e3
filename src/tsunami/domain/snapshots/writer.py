"""Produce and persist snapshot artifacts independently of each other.

Every artifact is built and written in its own task. When building or writing
one fails, a schema-valid fallback (no items, provenance ``fallback``) is
written in its place and the remaining artifacts carry on.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from tsunami.domain.model import Provenance, Severity
from tsunami.domain.ports.observability import NullObserver
from tsunami.domain.snapshots.model import Snapshot, SnapshotMetadata

if TYPE_CHECKING:
    from tsunami.domain.context import Clock
    from tsunami.domain.ports import ArtifactStore, PipelineObserver
    from tsunami.domain.snapshots.model import SnapshotItem

type ItemBuilder = Callable[[], Sequence[SnapshotItem]]


class ArtifactStatus(StrEnum):
    WRITTEN = "written"
    FALLBACK = "fallback"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ArtifactSpec:
    name: str
    cap: int
    build: ItemBuilder
    release_id: str | None = None


@dataclass(frozen=True, slots=True)
class ArtifactOutcome:
    name: str
    status: ArtifactStatus
    item_count: int = 0
    provenance: Provenance | None = None
    error: str | None = None


@dataclass(frozen=True, slots=True)
class SnapshotReport:
    outcomes: tuple[ArtifactOutcome, ...]

    @property
    def degraded(self) -> bool:
        return any(outcome.status is not ArtifactStatus.WRITTEN for outcome in self.outcomes)

    def outcome(self, name: str) -> ArtifactOutcome | None:
        return next((outcome for outcome in self.outcomes if outcome.name == name), None)

    def count(self, status: ArtifactStatus) -> int:
        return sum(1 for outcome in self.outcomes if outcome.status is status)


class SnapshotWriter:
    def __init__(
        self,
        store: ArtifactStore,
        *,
        clock: Clock,
        schema_version: str,
        sources_used: Sequence[str] = (),
        observer: PipelineObserver | None = None,
    ) -> None:
        self._store = store
        self._clock = clock
        self._schema_version = schema_version
        self._sources_used = tuple(sources_used)
        self._observer = observer or NullObserver()

    async def write_all(self, specs: Sequence[ArtifactSpec]) -> SnapshotReport:
        names = [spec.name for spec in specs]
        if len(set(names)) != len(names):
            raise ValueError("Artifact names must be unique within one build")
        outcomes = await asyncio.gather(*(self._produce(spec) for spec in specs))
        report = SnapshotReport(outcomes=tuple(outcomes))
        self._observer.emit(
            "snapshots.written",
            Severity.WARNING if report.degraded else Severity.INFO,
            written=report.count(ArtifactStatus.WRITTEN),
            fallback=report.count(ArtifactStatus.FALLBACK),
            failed=report.count(ArtifactStatus.FAILED),
        )
        return report

    def snapshot(
        self,
        items: Sequence[SnapshotItem],
        *,
        cap: int,
        provenance: Provenance,
        release_id: str | None = None,
    ) -> Snapshot:
        """Wrap ``items`` in a metadata envelope stamped with the current time."""

        metadata = SnapshotMetadata(
            generated_at=self._clock(),
            total_count=len(items),
            sources_used=self._sources_used,
            provenance=provenance,
            schema_version=self._schema_version,
            release_id=release_id,
        )
        return Snapshot(items=tuple(items), metadata=metadata, cap=cap)

    async def _produce(self, spec: ArtifactSpec) -> ArtifactOutcome:
        try:
            items = tuple(spec.build())
            if len(items) > spec.cap:
                items = items[: spec.cap]
            provenance = Provenance.PRIMARY if items else Provenance.FALLBACK
            snapshot = self.snapshot(
                items, cap=spec.cap, provenance=provenance, release_id=spec.release_id
            )
            await self._store.write(spec.name, snapshot)
        except Exception as exc:  # noqa: BLE001
            return await self._fall_back(spec, exc)
        self._observer.emit(
            "artifact.written",
            Severity.DEBUG,
            artifact=spec.name,
            items=len(items),
            provenance=str(provenance),
        )
        return ArtifactOutcome(
            name=spec.name,
            status=ArtifactStatus.WRITTEN,
            item_count=len(items),
            provenance=provenance,
        )

    async def _fall_back(self, spec: ArtifactSpec, cause: Exception) -> ArtifactOutcome:
        error = f"{type(cause).__name__}: {cause}"
        self._observer.emit("artifact.fallback", Severity.WARNING, artifact=spec.name, error=error)
        try:
            await self._store.write(
                spec.name,
                self.snapshot(
                    (), cap=spec.cap, provenance=Provenance.FALLBACK, release_id=spec.release_id
                ),
            )
        except Exception as exc:  # noqa: BLE001
            self._observer.emit(
                "artifact.failed",
                Severity.ERROR,
                artifact=spec.name,
                error=f"{type(exc).__name__}: {exc}",
            )
            return ArtifactOutcome(name=spec.name, status=ArtifactStatus.FAILED, error=error)
        return ArtifactOutcome(
            name=spec.name,
            status=ArtifactStatus.FALLBACK,
            provenance=Provenance.FALLBACK,
            error=error,
        )
