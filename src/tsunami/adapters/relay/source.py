"""Relay gateways exposed through the ``Source`` port."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .client import RelayClient

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from tsunami.adapters.http_resilience import ResilientClient
    from tsunami.config.http_resilience import ResilienceConfig
    from tsunami.config.relays import RelayConfig
    from tsunami.domain.filters import Query
    from tsunami.domain.model import RawRecord


class RelaySource:
    def __init__(self, client: RelayClient, *, name: str | None = None) -> None:
        self._client = client
        self._name = name or client.url

    @property
    def name(self) -> str:
        return self._name

    async def query(self, query: Query) -> Sequence[RawRecord]:
        return await self._client.query(query)

    def __repr__(self) -> str:
        return f"RelaySource({self._name!r})"


def build_relay_sources(
    config: RelayConfig,
    *,
    client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
) -> list[RelaySource]:
    """One source per configured relay URL, in configuration order."""

    return [
        RelaySource(
            RelayClient(resilience=config.resilience_for(url), client_factory=client_factory)
        )
        for url in config.urls
    ]
