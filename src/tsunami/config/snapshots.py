"""Snapshot build configuration values."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from .env import require_env_var
from .errors import InvalidConfigurationValueError

SCHEMA_VERSION: Final[str] = "1.0.0"
DEFAULT_DIST_DIR: Final[str] = "dist"
DATA_DIR_NAME: Final[str] = "data"

_HEX_PUBKEY = re.compile(r"^[0-9a-f]{64}$")


@dataclass(frozen=True, slots=True)
class ArtifactCaps:
    releases: int = 20
    per_release: int = 20
    trending: int = 12
    featured_artists: int = 12


@dataclass(frozen=True, slots=True)
class SnapshotConfig:
    artist_pubkey: str
    dist_dir: Path
    caps: ArtifactCaps = field(default_factory=ArtifactCaps)
    schema_version: str = SCHEMA_VERSION

    def data_dir(self) -> Path:
        return data_dir_for(self.dist_dir)


def resolve_dist_dir(dist_dir: Path | None = None) -> Path:
    if dist_dir is not None:
        return dist_dir
    return Path(os.getenv("TSUNAMI_DIST_DIR") or DEFAULT_DIST_DIR)


def data_dir_for(dist_dir: Path) -> Path:
    return dist_dir.expanduser().resolve() / DATA_DIR_NAME


def validate_pubkey(value: str) -> str:
    normalized = value.strip().lower()
    if not _HEX_PUBKEY.match(normalized):
        raise InvalidConfigurationValueError(
            "TSUNAMI_ARTIST_PUBKEY", value, "must be a 64 character hex public key"
        )
    return normalized


def get_snapshot_config(*, dist_dir: Path | None = None) -> SnapshotConfig:
    artist_pubkey = validate_pubkey(require_env_var("TSUNAMI_ARTIST_PUBKEY"))
    return SnapshotConfig(artist_pubkey=artist_pubkey, dist_dir=resolve_dist_dir(dist_dir))
