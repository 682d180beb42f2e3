"""Ports for querying record sources."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from tsunami.domain.filters import Query
    from tsunami.domain.model import RawRecord


@runtime_checkable
class Source(Protocol):
    """An independently reachable endpoint that answers record queries.

    Implementations may be slow, unreachable or stale. They raise on failure;
    the fan-out decides what a failure means for the run.
    """

    @property
    def name(self) -> str: ...

    async def query(self, query: Query) -> Sequence[RawRecord]: ...


__all__ = ["Source"]
