"""Filesystem artifact store: one JSON document per artifact."""

from __future__ import annotations

import asyncio
import os
from logging import getLogger
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING
from uuid import uuid4

from pydantic import ValidationError

from .schema import SnapshotDocument
from .translator import snapshot_document, stored_snapshot

if TYPE_CHECKING:
    from tsunami.domain.snapshots.model import Snapshot, StoredSnapshot

log = getLogger(__name__)

SUFFIX = ".json"


class SnapshotPersistenceError(RuntimeError):
    """Raised when an artifact cannot be written or read back."""


class FileArtifactStore:
    """Artifacts live at ``<data_dir>/<name>.json``; names may contain ``/``."""

    def __init__(self, data_dir: Path) -> None:
        self._data_dir = data_dir

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, name: str) -> Path:
        relative = PurePosixPath(name)
        if not relative.parts or relative.is_absolute() or ".." in relative.parts:
            raise SnapshotPersistenceError(f"Invalid artifact name {name!r}")
        path = self._data_dir.joinpath(*relative.parts)
        return path.with_name(path.name + SUFFIX)

    async def write(self, name: str, snapshot: Snapshot) -> None:
        path = self.path_for(name)
        payload = snapshot_document(snapshot).model_dump_json(by_alias=True, indent=2)
        try:
            await asyncio.to_thread(_atomic_write_text, path, payload)
        except OSError as exc:
            raise SnapshotPersistenceError(f"Could not write artifact {name}: {exc}") from exc
        log.debug("Wrote artifact %s (%d items) to %s", name, len(snapshot.items), path)

    async def read(self, name: str) -> StoredSnapshot | None:
        path = self.path_for(name)
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise SnapshotPersistenceError(f"Could not read artifact {name}: {exc}") from exc
        try:
            document = SnapshotDocument.model_validate_json(text)
        except ValidationError as exc:
            raise SnapshotPersistenceError(f"Artifact {name} is not a valid snapshot") from exc
        return stored_snapshot(name, document)


def _atomic_write_text(path: Path, payload: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.parent / f".{path.name}.{uuid4().hex}.tmp"
    try:
        with tmp.open("w", encoding="utf-8") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp, path)
    finally:
        tmp.unlink(missing_ok=True)
