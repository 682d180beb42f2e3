"""Snapshot artifacts: envelope model, artifact plan and writer."""

from __future__ import annotations

from .artifacts import (
    CACHE_HEALTH,
    FEATURED_ARTISTS,
    LATEST_RELEASE,
    RELEASES,
    TRENDING_TRACKS,
    plan_artifacts,
    release_artifact_name,
)
from .model import CacheHealth, Snapshot, SnapshotMetadata, StoredSnapshot
from .writer import ArtifactOutcome, ArtifactSpec, ArtifactStatus, SnapshotReport, SnapshotWriter

__all__ = [
    "CACHE_HEALTH",
    "FEATURED_ARTISTS",
    "LATEST_RELEASE",
    "RELEASES",
    "TRENDING_TRACKS",
    "ArtifactOutcome",
    "ArtifactSpec",
    "ArtifactStatus",
    "CacheHealth",
    "Snapshot",
    "SnapshotMetadata",
    "SnapshotReport",
    "SnapshotWriter",
    "StoredSnapshot",
    "plan_artifacts",
    "release_artifact_name",
]
