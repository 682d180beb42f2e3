"""Structured event emission consumed by an observability adapter."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from tsunami.domain.model.enums import Severity


@runtime_checkable
class PipelineObserver(Protocol):
    def emit(self, event: str, severity: Severity = Severity.INFO, **fields: object) -> None: ...


class NullObserver:
    """Observer that discards every event."""

    def emit(  # noqa: ARG002
        self, event: str, severity: Severity = Severity.INFO, **fields: object
    ) -> None:
        return None


__all__ = ["NullObserver", "PipelineObserver"]
