from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tests.support.records import FixedAmountExtractor, RecordingObserver, fixed_clock
from tsunami.domain.context import PipelineContext, ProfileCache

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in (
        "TSUNAMI_RELAY_URLS",
        "TSUNAMI_SOURCE_TIMEOUT_SECONDS",
        "TSUNAMI_ARTIST_PUBKEY",
        "TSUNAMI_DIST_DIR",
    ):
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture
def observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def context(observer: RecordingObserver) -> PipelineContext:
    return PipelineContext(
        amount_extractor=FixedAmountExtractor(),
        observer=observer,
        clock=fixed_clock,
        profiles=ProfileCache(clock=fixed_clock),
    )
