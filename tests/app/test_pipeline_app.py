from __future__ import annotations

import asyncio
import json
from datetime import timedelta
from typing import TYPE_CHECKING, Any

import pytest

from tests.support.records import (
    ALICE,
    DAY,
    NOW,
    NOW_TS,
    FakeSource,
    MemoryArtifactStore,
    fixed_clock,
    hex_id,
    playlist_raw,
    profile_raw,
    track_raw,
    zap_raw,
)
from tsunami.adapters.snapshot_files import FileArtifactStore
from tsunami.app import build_snapshots, load_trending_tracks, load_trending_tracks_async
from tsunami.config import ConfigurationError, RelayConfig, SnapshotConfig
from tsunami.domain.model import Provenance
from tsunami.domain.snapshots import ArtifactStatus

if TYPE_CHECKING:
    from collections.abc import Callable
    from datetime import datetime
    from pathlib import Path

    from tsunami.domain.model import RawRecord

SONG_1 = hex_id(101)
SONG_2 = hex_id(102)
SINGLE = hex_id(110)
ALBUM = hex_id(200)
RELAYS = RelayConfig(urls=("relay-a",))


def _records() -> list[RawRecord]:
    return [
        track_raw("song-1", global_id=SONG_1, created_at=NOW_TS - DAY),
        track_raw("song-2", global_id=SONG_2, created_at=NOW_TS - DAY),
        track_raw("single", global_id=SINGLE, created_at=NOW_TS - 2 * DAY),
        playlist_raw("album", ["song-1", "song-2"], global_id=ALBUM),
        profile_raw(ALICE, name="alice", global_id=hex_id(300)),
        zap_raw(SINGLE, global_id=hex_id(400), sats=500),
        zap_raw(SONG_1, global_id=hex_id(401), sats=5000),
    ]


def _snapshot_config(tmp_path: Path) -> SnapshotConfig:
    return SnapshotConfig(artist_pubkey=ALICE, dist_dir=tmp_path)


def _read(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _build(tmp_path: Path) -> Path:
    result = build_snapshots(
        relay_config=RELAYS,
        snapshot_config=_snapshot_config(tmp_path),
        sources=[FakeSource("relay-a", _records())],
        clock=fixed_clock,
    )
    assert not result.degraded
    return tmp_path.resolve() / "data"


def _clock_at(moment: datetime) -> Callable[[], datetime]:
    return lambda: moment


def test_build_publishes_every_artifact(tmp_path: Path) -> None:
    data_dir = _build(tmp_path)

    assert sorted(path.name for path in data_dir.glob("*.json")) == [
        "cache-health.json",
        "featured-artists.json",
        "latest-release.json",
        "releases.json",
        "trending-tracks.json",
    ]
    release = _read(data_dir / "releases" / f"{ALBUM}.json")
    assert release["metadata"]["releaseId"] == ALBUM
    latest = _read(data_dir / "latest-release.json")
    assert latest["items"][0]["id"] == ALBUM
    health = _read(data_dir / "cache-health.json")
    assert health["items"][0]["status"] == "ok"


def test_trending_artifact_leaves_out_latest_release(tmp_path: Path) -> None:
    data_dir = _build(tmp_path)

    trending = _read(data_dir / "trending-tracks.json")

    items = trending["items"]
    assert isinstance(items, list)
    assert [item["track"]["id"] for item in items] == [SINGLE]
    assert items[0]["engagementAmount"] == 500


def test_build_with_failing_sources_writes_fallbacks(tmp_path: Path) -> None:
    store = MemoryArtifactStore()

    result = build_snapshots(
        relay_config=RELAYS,
        snapshot_config=_snapshot_config(tmp_path),
        sources=[FakeSource("relay-a", error=ConnectionError("down"))],
        store=store,
        clock=fixed_clock,
    )

    assert result.degraded
    assert result.report.count(ArtifactStatus.FAILED) == 0
    assert store.snapshots["releases"].items == ()
    assert store.snapshots["releases"].metadata.provenance is Provenance.FALLBACK
    assert result.stats["source_failures"] > 0


def test_build_requires_sources(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        build_snapshots(
            relay_config=RELAYS,
            snapshot_config=_snapshot_config(tmp_path),
            sources=[],
            clock=fixed_clock,
        )


def test_trending_served_from_fresh_cache(tmp_path: Path) -> None:
    data_dir = _build(tmp_path)
    offline = FakeSource("relay-a", error=ConnectionError("down"))

    view = load_trending_tracks(
        relay_config=RELAYS,
        store=FileArtifactStore(data_dir),
        sources=[offline],
        clock=_clock_at(NOW + timedelta(minutes=5)),
    )

    assert view.from_cache
    assert not view.degraded
    assert view.generated_at == NOW
    assert [item["track"]["id"] for item in view.items] == [SINGLE]
    assert offline.queries == []


def test_cached_trending_applies_exclusions(tmp_path: Path) -> None:
    data_dir = _build(tmp_path)

    view = load_trending_tracks(
        exclude=[SINGLE],
        relay_config=RELAYS,
        store=FileArtifactStore(data_dir),
        sources=[FakeSource("relay-a")],
        clock=fixed_clock,
    )

    assert view.from_cache
    assert view.items == ()


def test_stale_cache_goes_live(tmp_path: Path) -> None:
    data_dir = _build(tmp_path)
    later = NOW + timedelta(hours=2)
    source = FakeSource("relay-a", _records())

    view = load_trending_tracks(
        relay_config=RELAYS,
        store=FileArtifactStore(data_dir),
        sources=[source],
        clock=_clock_at(later),
    )

    assert not view.from_cache
    assert view.generated_at == later
    assert [item["track"]["id"] for item in view.items] == [SINGLE]
    assert source.queries


def test_live_trending_degrades_when_every_source_fails() -> None:
    view = load_trending_tracks(
        relay_config=RELAYS,
        sources=[FakeSource("relay-a", error=TimeoutError("slow"))],
        clock=fixed_clock,
    )

    assert view.items == ()
    assert view.degraded
    assert not view.from_cache


def test_live_trending_respects_limit() -> None:
    records = [
        track_raw(f"t{n}", author=hex_id(1000 + n), global_id=hex_id(n), created_at=NOW_TS - n)
        for n in range(1, 6)
    ]

    view = load_trending_tracks(
        limit=2,
        relay_config=RELAYS,
        sources=[FakeSource("relay-a", records)],
        clock=fixed_clock,
    )

    assert [item["track"]["id"] for item in view.items] == [hex_id(1), hex_id(2)]


def test_negative_limit_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        asyncio.run(load_trending_tracks_async(limit=-1, relay_config=RELAYS))


def test_cache_without_timezone_goes_live(tmp_path: Path) -> None:
    document = {
        "metadata": {
            "generatedAt": "2025-06-01T11:00:00",
            "totalCount": 1,
            "provenance": "primary",
            "schemaVersion": "1.0.0",
        },
        "items": [{"track": {"id": SINGLE}}],
    }
    (tmp_path / "trending-tracks.json").write_text(json.dumps(document), encoding="utf-8")

    view = load_trending_tracks(
        relay_config=RELAYS,
        store=FileArtifactStore(tmp_path),
        sources=[FakeSource("relay-a", error=ConnectionError("down"))],
        clock=fixed_clock,
    )

    assert view.degraded
    assert not view.from_cache
    assert view.items == ()
