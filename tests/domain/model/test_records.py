from __future__ import annotations

import pytest

from tests.support.records import ALICE, track_raw
from tsunami.domain.model import Coordinate, RawRecord, RecordKind
from tsunami.domain.model.enums import is_addressable, is_replaceable


def test_coordinate_round_trips_through_string_form() -> None:
    coordinate = Coordinate(ALICE, RecordKind.MUSIC_TRACK, "song-1")

    assert str(coordinate) == f"36787:{ALICE}:song-1"
    assert Coordinate.parse(str(coordinate)) == coordinate
    assert coordinate.key == f"{ALICE}:song-1"


@pytest.mark.parametrize(
    "value",
    [f"36787:{ALICE}", f"36787:{ALICE}:song:extra", f"track:{ALICE}:song"],
)
def test_coordinate_parse_rejects_wrong_arity_or_kind(value: str) -> None:
    with pytest.raises(ValueError, match="Coordinate"):
        Coordinate.parse(value)


def test_kind_ranges() -> None:
    assert is_replaceable(RecordKind.PROFILE)
    assert is_replaceable(10002)
    assert not is_replaceable(RecordKind.REACTION)
    assert is_addressable(RecordKind.MUSIC_TRACK)
    assert is_addressable(RecordKind.ARTIST_METADATA)
    assert not is_addressable(RecordKind.ZAP_RECEIPT)


def test_raw_record_coordinate_depends_on_kind() -> None:
    track = track_raw("song-1")
    profile = RawRecord(global_id="p", author_id=ALICE, kind=RecordKind.PROFILE, created_at=1)
    reaction = RawRecord(global_id="r", author_id=ALICE, kind=RecordKind.REACTION, created_at=1)

    assert track.coordinate == Coordinate(ALICE, RecordKind.MUSIC_TRACK, "song-1")
    assert profile.coordinate == Coordinate(ALICE, RecordKind.PROFILE, "")
    assert reaction.coordinate is None


def test_tag_helpers() -> None:
    raw = track_raw("song-1", extra_tags=[("t", "rock"), ("t", "jazz"), ("empty",)])

    assert raw.first_value("title") == "Song song-1"
    assert raw.values("t") == ["music", "rock", "jazz"]
    assert raw.has_tag("t", "jazz")
    assert raw.has_tag("empty")
    assert raw.first_value("empty") is None
    assert raw.first_value("missing") is None
