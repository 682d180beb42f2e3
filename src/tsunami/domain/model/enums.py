"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import IntEnum, StrEnum


class RecordKind(IntEnum):
    PROFILE = 0
    DELETION = 5
    REACTION = 7
    COMMENT = 1111
    ZAP_RECEIPT = 9735
    ARTIST_METADATA = 30078
    MUSIC_PLAYLIST = 34139
    MUSIC_TRACK = 36787


def is_replaceable(kind: int) -> bool:
    return kind in (0, 3) or 10000 <= kind < 20000


def is_addressable(kind: int) -> bool:
    return 30000 <= kind < 40000


class Provenance(StrEnum):
    PRIMARY = "primary"
    FALLBACK = "fallback"


class ReceiptType(StrEnum):
    ZAP = "zap"
    REACTION = "reaction"


class Severity(StrEnum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
