"""Builders and fakes for raw records, sources and stores."""

from __future__ import annotations

import asyncio
import hashlib
import json
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from tsunami.domain.model import (
    Coordinate,
    RawRecord,
    RecordKind,
    Severity,
    Track,
)
from tsunami.domain.snapshots.model import StoredSnapshot

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from tsunami.domain.filters import Query
    from tsunami.domain.snapshots.model import Snapshot

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)
NOW_TS = int(NOW.timestamp())
DAY = 86_400

ALICE = "a" * 64
BOB = "b" * 64
CAROL = "c" * 64


def hex_id(value: int) -> str:
    return f"{value:064x}"


def digest_id(*parts: str) -> str:
    return hashlib.sha256(":".join(parts).encode()).hexdigest()


def fixed_clock() -> datetime:
    return NOW


def track_raw(
    identifier: str,
    *,
    author: str = ALICE,
    global_id: str | None = None,
    created_at: int = NOW_TS,
    title: str | None = None,
    url: str = "https://cdn.example.com/audio.mp3",
    extra_tags: Iterable[tuple[str, ...]] = (),
    content: str = "",
) -> RawRecord:
    tags: list[tuple[str, ...]] = [
        ("d", identifier),
        ("title", title or f"Song {identifier}"),
        ("artist", "Example Artist"),
        ("url", url),
        ("t", "music"),
        *extra_tags,
    ]
    return RawRecord(
        global_id=global_id or digest_id(author, identifier, str(created_at)),
        author_id=author,
        kind=RecordKind.MUSIC_TRACK,
        created_at=created_at,
        tags=tuple(tags),
        content=content,
    )


def playlist_raw(
    identifier: str,
    track_identifiers: Sequence[str],
    *,
    author: str = ALICE,
    global_id: str,
    created_at: int = NOW_TS,
    image: str | None = "https://cdn.example.com/cover.jpg",
) -> RawRecord:
    tags: list[tuple[str, ...]] = [("d", identifier), ("title", f"Album {identifier}")]
    tags.extend(("a", f"{RecordKind.MUSIC_TRACK}:{author}:{ref}") for ref in track_identifiers)
    if image:
        tags.append(("image", image))
    return RawRecord(
        global_id=global_id,
        author_id=author,
        kind=RecordKind.MUSIC_PLAYLIST,
        created_at=created_at,
        tags=tuple(tags),
    )


def profile_raw(
    author: str, *, name: str, global_id: str, created_at: int = NOW_TS, picture: str = ""
) -> RawRecord:
    payload = {"name": name, "display_name": name.title()}
    if picture:
        payload["picture"] = picture
    return RawRecord(
        global_id=global_id,
        author_id=author,
        kind=RecordKind.PROFILE,
        created_at=created_at,
        content=json.dumps(payload),
    )


def zap_raw(
    target_id: str,
    *,
    global_id: str,
    sats: int,
    sender: str = BOB,
    created_at: int = NOW_TS,
) -> RawRecord:
    request = {"pubkey": sender, "tags": [["amount", str(sats * 1000)], ["e", target_id]]}
    return RawRecord(
        global_id=global_id,
        author_id=CAROL,
        kind=RecordKind.ZAP_RECEIPT,
        created_at=created_at,
        tags=(
            ("e", target_id),
            ("bolt11", "lnbc1example"),
            ("description", json.dumps(request)),
        ),
    )


def reaction_raw(
    target_id: str, *, global_id: str, sender: str = BOB, created_at: int = NOW_TS
) -> RawRecord:
    return RawRecord(
        global_id=global_id,
        author_id=sender,
        kind=RecordKind.REACTION,
        created_at=created_at,
        tags=(("e", target_id),),
        content="+",
    )


def deletion_raw(target_ids: Sequence[str], *, global_id: str, author: str = BOB) -> RawRecord:
    return RawRecord(
        global_id=global_id,
        author_id=author,
        kind=RecordKind.DELETION,
        created_at=NOW_TS,
        tags=tuple(("e", target) for target in target_ids),
    )


def comment_raw(root_id: str, *, global_id: str, author: str = BOB) -> RawRecord:
    return RawRecord(
        global_id=global_id,
        author_id=author,
        kind=RecordKind.COMMENT,
        created_at=NOW_TS,
        tags=(("E", root_id), ("K", str(int(RecordKind.MUSIC_TRACK)))),
        content="great track",
    )


def make_track(
    identifier: str,
    *,
    author: str = ALICE,
    global_id: str | None = None,
    created_at: int = NOW_TS,
) -> Track:
    return Track(
        global_id=global_id or f"id-{author[:4]}-{identifier}",
        author_id=author,
        coordinate=Coordinate(author, RecordKind.MUSIC_TRACK, identifier),
        created_at=created_at,
        identifier=identifier,
        title=f"Song {identifier}",
        artist="Example Artist",
        audio_url=f"https://cdn.example.com/{identifier}.mp3",
    )


class FakeSource:
    """In-memory source answering every query with fixed records, or failing."""

    def __init__(
        self,
        name: str,
        records: Iterable[RawRecord] = (),
        *,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self._name = name
        self._records = list(records)
        self._error = error
        self._delay = delay
        self.queries: list[Query] = []

    @property
    def name(self) -> str:
        return self._name

    async def query(self, query: Query) -> Sequence[RawRecord]:
        self.queries.append(query)
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        kinds = {int(kind) for kind in query.KINDS}
        return [record for record in self._records if record.kind in kinds]


class FixedAmountExtractor:
    def __init__(self, amount: int = 0, sender: str | None = None) -> None:
        self.amount = amount
        self.sender = sender

    def amount_sats(self, receipt: RawRecord) -> int:  # noqa: ARG002
        return self.amount

    def sender_id(self, receipt: RawRecord) -> str | None:  # noqa: ARG002
        return self.sender


@dataclass
class RecordingObserver:
    events: list[tuple[str, Severity, dict[str, object]]] = field(default_factory=list)

    def emit(self, event: str, severity: Severity = Severity.INFO, **fields: object) -> None:
        self.events.append((event, severity, fields))

    def names(self) -> list[str]:
        return [name for name, _, _ in self.events]


class MemoryArtifactStore:
    """Artifact store keeping snapshots in a dict; names in ``failing`` raise on write."""

    def __init__(self, *, failing: Iterable[str] = (), always_fail: bool = False) -> None:
        self.snapshots: dict[str, Snapshot] = {}
        self._failing = set(failing)
        self._always_fail = always_fail
        self.attempts: list[str] = []

    async def write(self, name: str, snapshot: Snapshot) -> None:
        self.attempts.append(name)
        if self._always_fail or (name in self._failing and not snapshot.is_fallback):
            raise OSError(f"disk full while writing {name}")
        self.snapshots[name] = snapshot

    async def read(self, name: str) -> StoredSnapshot | None:
        snapshot = self.snapshots.get(name)
        if snapshot is None:
            return None
        return StoredSnapshot(name=name, metadata=snapshot.metadata, items=())
