"""Translate between domain queries/records and relay wire payloads."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from tsunami.domain.filters import (
    ArtistMetadataQuery,
    DeletionQuery,
    EngagementQuery,
    PlaylistQuery,
    ProfileQuery,
    TrackQuery,
)
from tsunami.domain.model import RawRecord

from .schema import RelayEventPayload

if TYPE_CHECKING:
    from tsunami.domain.filters import Query

log = getLogger(__name__)

type WireFilter = dict[str, Any]

EVENT_MESSAGE = "EVENT"
_CONTROL_MESSAGES = frozenset({"EOSE", "NOTICE", "CLOSED", "OK", "AUTH"})


def _window(wire: WireFilter, since: int | None, until: int | None) -> WireFilter:
    if since is not None:
        wire["since"] = since
    if until is not None:
        wire["until"] = until
    return wire


def filter_to_wire(query: Query) -> WireFilter:
    """Build the NIP-01 filter object for ``query``."""

    wire: WireFilter = {"kinds": [int(kind) for kind in query.KINDS]}
    match query:
        case TrackQuery() | PlaylistQuery():
            if query.authors:
                wire["authors"] = list(query.authors)
            if query.identifiers:
                wire["#d"] = list(query.identifiers)
            wire["limit"] = query.limit
            return _window(wire, query.since, query.until)
        case ProfileQuery():
            wire["authors"] = list(query.authors)
            wire["limit"] = query.effective_limit
            return wire
        case ArtistMetadataQuery():
            wire["authors"] = list(query.authors)
            wire["#d"] = [query.IDENTIFIER]
            wire["limit"] = query.limit
            return wire
        case EngagementQuery():
            wire["#e"] = list(query.target_ids)
            wire["limit"] = query.limit
            return _window(wire, query.since, None)
        case DeletionQuery():
            wire["#e"] = list(query.target_ids)
            wire["limit"] = query.limit
            return wire


def payload_to_record(payload: RelayEventPayload) -> RawRecord:
    return RawRecord(
        global_id=payload.id,
        author_id=payload.pubkey,
        kind=payload.kind,
        created_at=payload.created_at,
        tags=tuple(tuple(tag) for tag in payload.tags),
        content=payload.content,
        signature=payload.sig,
    )


def _unwrap(item: object) -> object | None:
    """Return the event object of a wire item, or ``None`` for control messages."""

    if isinstance(item, dict):
        return item
    if isinstance(item, list) and item and isinstance(item[0], str):
        if item[0] == EVENT_MESSAGE and len(item) >= 3:  # noqa: PLR2004
            return item[2]
        if item[0] in _CONTROL_MESSAGES:
            return None
    return item


def parse_events(payload: object, *, source: str) -> list[RawRecord]:
    """Parse a gateway response body into raw records.

    The body is a JSON array of event objects or relay messages. Control
    messages are skipped; items that do not validate are dropped with a warning.
    """

    if not isinstance(payload, list):
        log.warning("Relay %s returned a non-list payload (%s)", source, type(payload).__name__)
        return []

    records: list[RawRecord] = []
    dropped = 0
    for item in payload:
        event = _unwrap(item)
        if event is None:
            continue
        try:
            records.append(payload_to_record(RelayEventPayload.model_validate(event)))
        except ValidationError:
            dropped += 1
    if dropped:
        log.warning("Relay %s: dropped %d malformed event(s)", source, dropped)
    return records
