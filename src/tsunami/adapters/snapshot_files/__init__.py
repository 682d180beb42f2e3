"""Snapshot artifacts persisted as JSON files."""

from __future__ import annotations

from .schema import MetadataDocument, SnapshotDocument, TrendingEntryDocument
from .store import FileArtifactStore, SnapshotPersistenceError
from .translator import dump_item, snapshot_document, stored_snapshot, trending_entry_document

__all__ = [
    "FileArtifactStore",
    "MetadataDocument",
    "SnapshotDocument",
    "SnapshotPersistenceError",
    "TrendingEntryDocument",
    "dump_item",
    "snapshot_document",
    "stored_snapshot",
    "trending_entry_document",
]
