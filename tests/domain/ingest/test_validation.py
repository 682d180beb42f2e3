from __future__ import annotations

from dataclasses import replace

import pytest

from tests.support.records import (
    ALICE,
    comment_raw,
    deletion_raw,
    hex_id,
    playlist_raw,
    profile_raw,
    reaction_raw,
    track_raw,
    zap_raw,
)
from tsunami.domain.ingest.validation import validate, validation_error
from tsunami.domain.model import RawRecord, RecordKind


def test_well_formed_records_validate() -> None:
    records = [
        track_raw("song-1", extra_tags=[("duration", "180"), ("track_number", "1")]),
        playlist_raw("album", ["song-1"], global_id=hex_id(1)),
        profile_raw(ALICE, name="alice", global_id=hex_id(2)),
        zap_raw(hex_id(1), global_id=hex_id(3), sats=21),
        reaction_raw(hex_id(1), global_id=hex_id(4)),
        comment_raw(hex_id(1), global_id=hex_id(5)),
        deletion_raw([hex_id(4)], global_id=hex_id(6)),
    ]

    assert [validation_error(raw) for raw in records] == [None] * len(records)
    assert all(validate(raw) for raw in records)


@pytest.mark.parametrize("missing", ["d", "title", "artist", "url"])
def test_track_requires_core_attributes(missing: str) -> None:
    raw = track_raw("song-1")
    stripped = replace(raw, tags=tuple(tag for tag in raw.tags if tag[0] != missing))

    assert not validate(stripped)


def test_track_requires_music_topic() -> None:
    raw = track_raw("song-1")
    stripped = replace(raw, tags=tuple(tag for tag in raw.tags if tag[0] != "t"))

    assert validation_error(stripped) == "missing music topic"


@pytest.mark.parametrize("url", ["ftp://cdn.example.com/a.mp3", "audio.mp3", "https://"])
def test_track_url_must_be_absolute_http(url: str) -> None:
    assert not validate(track_raw("song-1", url=url))


@pytest.mark.parametrize(
    ("name", "value"),
    [("duration", "-1"), ("duration", "three"), ("track_number", "0")],
)
def test_track_numeric_attributes(name: str, value: str) -> None:
    assert not validate(track_raw("song-1", extra_tags=[(name, value)]))


def test_author_id_must_be_lowercase_hex() -> None:
    assert not validate(track_raw("song-1", author="A" * 64))
    assert not validate(track_raw("song-1", author="npub1alice"))


@pytest.mark.parametrize("global_id", ["x.a", "releases/x", hex_id(1).upper(), hex_id(1)[:-1]])
def test_global_id_must_be_lowercase_hex(global_id: str) -> None:
    raw = track_raw("song-1", global_id=global_id)

    assert not validate(raw)
    assert validation_error(raw) == "global id is not a 64 character lowercase hex id"


def test_playlist_reference_arity_is_checked() -> None:
    raw = playlist_raw("album", ["song-1"], global_id=hex_id(1))
    broken = replace(raw, tags=(*raw.tags, ("a", f"36787:{ALICE}:song:2")))

    assert "kind:author:identifier" in (validation_error(broken) or "")


def test_playlist_reference_must_point_at_a_track() -> None:
    raw = playlist_raw("album", [], global_id=hex_id(1))

    assert validation_error(raw) == "playlist references no tracks"
    wrong_kind = replace(raw, tags=(*raw.tags, ("a", f"30023:{ALICE}:post")))
    assert not validate(wrong_kind)


def test_profile_content_must_be_json_object() -> None:
    raw = RawRecord(
        global_id=hex_id(1), author_id=ALICE, kind=RecordKind.PROFILE, created_at=1, content="[]"
    )

    assert not validate(raw)


def test_zap_receipt_requires_invoice() -> None:
    raw = zap_raw(hex_id(1), global_id=hex_id(2), sats=5)
    stripped = replace(raw, tags=tuple(tag for tag in raw.tags if tag[0] != "bolt11"))

    assert validation_error(stripped) == "zap receipt has no invoice"


def test_unsupported_kind_is_rejected() -> None:
    raw = RawRecord(global_id=hex_id(1), author_id=ALICE, kind=1, created_at=1, content="hi")

    assert validation_error(raw) == "unsupported kind 1"
