"""HTTP relay gateway client."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from tsunami.adapters.http_resilience import ResilientClient

from .translator import filter_to_wire, parse_events

if TYPE_CHECKING:
    from collections.abc import Callable

    from tsunami.config.http_resilience import ResilienceConfig
    from tsunami.domain.filters import Query
    from tsunami.domain.model import RawRecord

log = getLogger(__name__)


class RelayAPIError(RuntimeError):
    """Raised when a relay gateway returns an unexpected response."""


class RelayClient:
    """Low-level client posting NIP-01 filters to one relay gateway."""

    def __init__(
        self,
        *,
        resilience: ResilienceConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        if resilience.base_url is None:
            raise ValueError("Relay resilience configuration needs a base_url")
        self._resilience = resilience
        self._url = resilience.base_url
        self._client_factory = client_factory or ResilientClient

    @property
    def url(self) -> str:
        return self._url

    async def query(self, query: Query) -> list[RawRecord]:
        wire = filter_to_wire(query)
        log.debug("POST %s filter=%s", self._url, wire)
        async with self._client_factory(self._resilience) as client:
            try:
                response = await client.post(self._url, json=wire)
                response.raise_for_status()
            except httpx.HTTPError as exc:
                raise RelayAPIError(f"Relay {self._url} request failed: {exc}") from exc
            try:
                payload = response.json()
            except ValueError as exc:
                raise RelayAPIError(f"Relay {self._url} returned invalid JSON") from exc

        if not isinstance(payload, list):
            raise RelayAPIError(f"Unexpected relay response payload from {self._url}")
        return parse_events(payload, source=self._url)
