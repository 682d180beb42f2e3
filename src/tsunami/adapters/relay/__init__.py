"""Relay gateway adapter."""

from __future__ import annotations

from .client import RelayAPIError, RelayClient
from .schema import RelayEventPayload
from .source import RelaySource, build_relay_sources
from .translator import filter_to_wire, parse_events, payload_to_record

__all__ = [
    "RelayAPIError",
    "RelayClient",
    "RelayEventPayload",
    "RelaySource",
    "build_relay_sources",
    "filter_to_wire",
    "parse_events",
    "payload_to_record",
]
