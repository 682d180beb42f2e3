"""Domain port definitions for adapters."""

from __future__ import annotations

from .observability import NullObserver, PipelineObserver
from .payments import ReceiptAmountExtractor
from .snapshots import ArtifactStore
from .sources import Source

__all__ = [
    "ArtifactStore",
    "NullObserver",
    "PipelineObserver",
    "ReceiptAmountExtractor",
    "Source",
]
