"""Structural validation of raw records, per record kind.

A validator returns ``None`` when the record is well formed and a short reason
otherwise. Only structure is checked; signatures and payments are not verified.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from tsunami.domain.filters import ARTIST_METADATA_IDENTIFIER, MUSIC_TOPIC
from tsunami.domain.model.enums import RecordKind

if TYPE_CHECKING:
    from tsunami.domain.model import RawRecord

type Validator = Callable[[RawRecord], str | None]

HEX_ID = re.compile(r"^[0-9a-f]{64}$")


def is_hex_id(value: str | None) -> bool:
    return value is not None and HEX_ID.match(value) is not None


def validate(raw: RawRecord) -> bool:
    return validation_error(raw) is None


def validation_error(raw: RawRecord) -> str | None:
    """Return why ``raw`` is malformed, or ``None`` when it is valid."""

    if not raw.global_id:
        return "missing global id"
    if not is_hex_id(raw.global_id):
        return "global id is not a 64 character lowercase hex id"
    if not is_hex_id(raw.author_id):
        return "author id is not a 64 character lowercase hex key"
    validator = _VALIDATORS.get(raw.kind)
    if validator is None:
        return f"unsupported kind {raw.kind}"
    return validator(raw)


def _parse_int(value: str) -> int | None:
    try:
        return int(value.strip())
    except ValueError:
        return None


def _is_http_url(value: str) -> bool:
    try:
        parts = urlsplit(value)
    except ValueError:
        return False
    return parts.scheme in {"http", "https"} and bool(parts.netloc)


def _is_json_object(content: str) -> bool:
    try:
        payload = json.loads(content)
    except ValueError:
        return False
    return isinstance(payload, dict)


def _track_reference_error(reference: str) -> str | None:
    parts = reference.split(":")
    if len(parts) != 3:
        return f"track reference {reference!r} is not kind:author:identifier"
    kind, author_id, identifier = parts
    if kind != str(int(RecordKind.MUSIC_TRACK)):
        return f"track reference {reference!r} does not point at a track"
    if not is_hex_id(author_id):
        return f"track reference {reference!r} has a malformed author"
    if not identifier:
        return f"track reference {reference!r} has no identifier"
    return None


def _validate_track(raw: RawRecord) -> str | None:
    for name in ("d", "title", "artist", "url"):
        if not raw.first_value(name):
            return f"missing required attribute {name!r}"
    if not raw.has_tag("t", MUSIC_TOPIC):
        return "missing music topic"
    if not _is_http_url(raw.first_value("url") or ""):
        return "audio url is not an absolute http(s) url"
    duration = raw.first_value("duration")
    if duration:
        parsed = _parse_int(duration)
        if parsed is None or parsed < 0:
            return f"invalid duration {duration!r}"
    track_number = raw.first_value("track_number")
    if track_number:
        parsed = _parse_int(track_number)
        if parsed is None or parsed < 1:
            return f"invalid track number {track_number!r}"
    return None


def _validate_playlist(raw: RawRecord) -> str | None:
    for name in ("d", "title"):
        if not raw.first_value(name):
            return f"missing required attribute {name!r}"
    references = list(raw.iter_tags("a"))
    if not references:
        return "playlist references no tracks"
    for tag in references:
        if len(tag) < 2 or not tag[1]:
            return "empty track reference"
        if (error := _track_reference_error(tag[1])) is not None:
            return error
    return None


def _validate_profile(raw: RawRecord) -> str | None:
    if not _is_json_object(raw.content):
        return "profile content is not a JSON object"
    return None


def _validate_artist_metadata(raw: RawRecord) -> str | None:
    if raw.first_value("d") != ARTIST_METADATA_IDENTIFIER:
        return "not an artist metadata record"
    if not _is_json_object(raw.content):
        return "artist metadata content is not a JSON object"
    return None


def _validate_zap_receipt(raw: RawRecord) -> str | None:
    if not (raw.first_value("e") or raw.first_value("a")):
        return "zap receipt has no target"
    if not raw.first_value("bolt11"):
        return "zap receipt has no invoice"
    return None


def _validate_reaction(raw: RawRecord) -> str | None:
    if not raw.first_value("e"):
        return "reaction has no target"
    return None


def _validate_comment(raw: RawRecord) -> str | None:
    if not raw.content.strip():
        return "empty comment"
    if not (raw.first_value("E") or raw.first_value("A")):
        return "comment has no root reference"
    if not raw.first_value("K"):
        return "comment has no root kind"
    return None


def _validate_deletion(raw: RawRecord) -> str | None:
    if not (raw.values("e") or raw.values("a")):
        return "deletion names no records"
    return None


_VALIDATORS: dict[int, Validator] = {
    RecordKind.MUSIC_TRACK: _validate_track,
    RecordKind.MUSIC_PLAYLIST: _validate_playlist,
    RecordKind.PROFILE: _validate_profile,
    RecordKind.ARTIST_METADATA: _validate_artist_metadata,
    RecordKind.ZAP_RECEIPT: _validate_zap_receipt,
    RecordKind.REACTION: _validate_reaction,
    RecordKind.COMMENT: _validate_comment,
    RecordKind.DELETION: _validate_deletion,
}
