"""Port for persisting and reading snapshot artifacts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from tsunami.domain.snapshots.model import Snapshot, StoredSnapshot


@runtime_checkable
class ArtifactStore(Protocol):
    """Durable home of snapshot artifacts.

    ``write`` must be atomic: readers see either the previous artifact or the
    complete new one, never a partial file.
    """

    async def write(self, name: str, snapshot: Snapshot) -> None: ...

    async def read(self, name: str) -> StoredSnapshot | None: ...


__all__ = ["ArtifactStore"]
