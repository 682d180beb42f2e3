"""Projection of validated raw records into typed domain records."""

from __future__ import annotations

import json
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING, Any

from tsunami.domain.filters import MUSIC_TOPIC
from tsunami.domain.ingest.validation import validation_error
from tsunami.domain.model import (
    ArtistMetadata,
    Comment,
    Coordinate,
    Deletion,
    EngagementReceipt,
    Playlist,
    ProfileInfo,
    ReceiptType,
    RecordKind,
    Severity,
    Track,
    TrackReference,
    ZapSplit,
)

if TYPE_CHECKING:
    from tsunami.domain.context import PipelineContext
    from tsunami.domain.model import DomainRecord, RawRecord

type Converter = Callable[[RawRecord, PipelineContext], DomainRecord]

LYRICS_LABEL = "Lyrics:"
CREDITS_LABEL = "Credits:"
PLAYLIST_TOPIC = "playlist"


class ConversionError(ValueError):
    """Raised when a record that passed validation still cannot be projected."""


def convert(raw: RawRecord, *, context: PipelineContext) -> DomainRecord:
    converter = _CONVERTERS.get(raw.kind)
    if converter is None:
        raise ConversionError(f"No converter for kind {raw.kind}")
    return converter(raw, context)


def convert_batch(raws: Iterable[RawRecord], *, context: PipelineContext) -> list[DomainRecord]:
    """Validate and convert ``raws``, dropping and counting every bad record."""

    converted: list[DomainRecord] = []
    for raw in raws:
        reason = validation_error(raw)
        if reason is not None:
            context.stats.validation_failures += 1
            context.observer.emit(
                "record.invalid",
                Severity.DEBUG,
                global_id=raw.global_id,
                kind=raw.kind,
                reason=reason,
            )
            continue
        try:
            converted.append(convert(raw, context=context))
        except (ValueError, TypeError, KeyError) as exc:
            context.stats.conversion_failures += 1
            context.observer.emit(
                "record.unconvertible",
                Severity.WARNING,
                global_id=raw.global_id,
                kind=raw.kind,
                error=str(exc),
            )
    return converted


def select[T](records: Iterable[object], record_type: type[T]) -> list[T]:
    return [record for record in records if isinstance(record, record_type)]


def split_track_content(content: str) -> tuple[str | None, str | None, str | None]:
    """Split track body text into description, lyrics and credits sections.

    Sections are separated by blank lines; the first unlabelled section before
    any labelled one is the description.
    """

    description: str | None = None
    lyrics: str | None = None
    credits: str | None = None
    if not content.strip():
        return description, lyrics, credits
    for section in content.split("\n\n"):
        trimmed = section.strip()
        if trimmed.startswith(LYRICS_LABEL):
            lyrics = trimmed.removeprefix(LYRICS_LABEL).strip()
        elif trimmed.startswith(CREDITS_LABEL):
            credits = trimmed.removeprefix(CREDITS_LABEL).strip()
        elif lyrics is None and credits is None and description is None:
            description = trimmed
    return description, lyrics, credits


def _optional_int(value: str | None) -> int | None:
    if not value:
        return None
    return int(value.strip())


def _zap_splits(raw: RawRecord) -> tuple[ZapSplit, ...]:
    splits: list[ZapSplit] = []
    for tag in raw.iter_tags("zap"):
        address = tag[1] if len(tag) > 1 else ""
        try:
            percentage = float(tag[2]) if len(tag) > 2 else 0.0  # noqa: PLR2004
        except ValueError:
            continue
        if address and percentage > 0:
            splits.append(ZapSplit(address=address, percentage=percentage))
    return tuple(splits)


def _to_track(raw: RawRecord, context: PipelineContext) -> Track:
    description, lyrics, credits = split_track_content(raw.content)
    profile = context.profiles.get(raw.author_id)
    identifier = raw.first_value("d") or ""
    return Track(
        global_id=raw.global_id,
        author_id=raw.author_id,
        coordinate=Coordinate(raw.author_id, raw.kind, identifier),
        created_at=raw.created_at,
        identifier=identifier,
        title=raw.first_value("title") or "",
        artist=raw.first_value("artist") or "",
        audio_url=raw.first_value("url") or "",
        description=description,
        lyrics=lyrics,
        credits=credits,
        album=raw.first_value("album"),
        track_number=_optional_int(raw.first_value("track_number")),
        release_date=raw.first_value("released"),
        duration=_optional_int(raw.first_value("duration")),
        audio_format=raw.first_value("format"),
        image_url=raw.first_value("image"),
        video_url=raw.first_value("video"),
        language=raw.first_value("language"),
        explicit=raw.first_value("explicit") == "true",
        genres=tuple(value for value in raw.values("t") if value != MUSIC_TOPIC),
        zap_splits=_zap_splits(raw),
        supersedes=raw.first_value("edit"),
        artist_name=profile.display if profile else None,
        artist_image=profile.picture if profile else None,
    )


def _to_playlist(raw: RawRecord, context: PipelineContext) -> Playlist:  # noqa: ARG001
    references: list[TrackReference] = []
    for value in raw.values("a"):
        ref = Coordinate.parse(value)
        references.append(TrackReference(author_id=ref.author_id, identifier=ref.identifier))
    identifier = raw.first_value("d") or ""
    return Playlist(
        global_id=raw.global_id,
        author_id=raw.author_id,
        coordinate=Coordinate(raw.author_id, raw.kind, identifier),
        created_at=raw.created_at,
        identifier=identifier,
        title=raw.first_value("title") or "",
        tracks=tuple(references),
        description=raw.first_value("description") or raw.content or None,
        image_url=raw.first_value("image"),
        categories=tuple(value for value in raw.values("t") if value != PLAYLIST_TOPIC),
        supersedes=raw.first_value("edit"),
    )


def _text(payload: dict[str, Any], key: str) -> str | None:
    value = payload.get(key)
    return value if isinstance(value, str) and value else None


def _to_profile(raw: RawRecord, context: PipelineContext) -> ProfileInfo:  # noqa: ARG001
    payload: dict[str, Any] = json.loads(raw.content)
    return ProfileInfo(
        global_id=raw.global_id,
        author_id=raw.author_id,
        coordinate=raw.coordinate,
        created_at=raw.created_at,
        name=_text(payload, "name"),
        display_name=_text(payload, "display_name"),
        picture=_text(payload, "picture"),
        banner=_text(payload, "banner"),
        about=_text(payload, "about"),
        website=_text(payload, "website"),
        lud16=_text(payload, "lud16"),
        nip05=_text(payload, "nip05"),
        supersedes=raw.first_value("edit"),
    )


def _to_artist_metadata(raw: RawRecord, context: PipelineContext) -> ArtistMetadata:  # noqa: ARG001
    payload: dict[str, Any] = json.loads(raw.content)
    return ArtistMetadata(
        global_id=raw.global_id,
        author_id=raw.author_id,
        coordinate=Coordinate(raw.author_id, raw.kind, raw.first_value("d") or ""),
        created_at=raw.created_at,
        data=payload,
        supersedes=raw.first_value("edit"),
    )


def _to_zap_receipt(raw: RawRecord, context: PipelineContext) -> EngagementReceipt:
    extractor = context.amount_extractor
    return EngagementReceipt(
        global_id=raw.global_id,
        author_id=raw.author_id,
        created_at=raw.created_at,
        receipt_type=ReceiptType.ZAP,
        sender_id=extractor.sender_id(raw) or raw.author_id,
        target_id=raw.first_value("e"),
        target_coordinate=raw.first_value("a"),
        amount=max(extractor.amount_sats(raw), 0),
    )


def _to_reaction(raw: RawRecord, context: PipelineContext) -> EngagementReceipt:  # noqa: ARG001
    # the last ``e`` attribute names the record being reacted to
    targets = raw.values("e")
    return EngagementReceipt(
        global_id=raw.global_id,
        author_id=raw.author_id,
        created_at=raw.created_at,
        receipt_type=ReceiptType.REACTION,
        sender_id=raw.author_id,
        target_id=targets[-1],
        target_coordinate=raw.first_value("a"),
        symbol=raw.content or "+",
    )


def _to_comment(raw: RawRecord, context: PipelineContext) -> Comment:  # noqa: ARG001
    return Comment(
        global_id=raw.global_id,
        author_id=raw.author_id,
        created_at=raw.created_at,
        content=raw.content,
        root_kind=raw.first_value("K") or "",
        root_id=raw.first_value("E"),
        root_coordinate=raw.first_value("A"),
        parent_id=raw.first_value("e"),
    )


def _to_deletion(raw: RawRecord, context: PipelineContext) -> Deletion:  # noqa: ARG001
    return Deletion(
        global_id=raw.global_id,
        author_id=raw.author_id,
        created_at=raw.created_at,
        target_ids=tuple(raw.values("e")),
        target_coordinates=tuple(raw.values("a")),
    )


_CONVERTERS: dict[int, Converter] = {
    RecordKind.MUSIC_TRACK: _to_track,
    RecordKind.MUSIC_PLAYLIST: _to_playlist,
    RecordKind.PROFILE: _to_profile,
    RecordKind.ARTIST_METADATA: _to_artist_metadata,
    RecordKind.ZAP_RECEIPT: _to_zap_receipt,
    RecordKind.REACTION: _to_reaction,
    RecordKind.COMMENT: _to_comment,
    RecordKind.DELETION: _to_deletion,
}
