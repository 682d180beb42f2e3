"""Relay pool configuration values."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from .env import env_float
from .errors import ConfigurationError, InvalidConfigurationValueError
from .http_resilience import NO_RETRY, RateLimit, ResilienceConfig

DEFAULT_RELAY_URLS: tuple[str, ...] = (
    "https://relay.primal.net",
    "https://relay.damus.io",
    "https://nos.lol",
    "https://relay.ditto.pub",
)

DEFAULT_SOURCE_TIMEOUT_SECONDS = 10.0
DEFAULT_PROFILE_TIMEOUT_SECONDS = 8.0
DEFAULT_METADATA_TIMEOUT_SECONDS = 5.0


@dataclass(frozen=True, slots=True)
class SourceTimeouts:
    """Per-source timeouts for each query phase, in seconds."""

    catalog: float = DEFAULT_SOURCE_TIMEOUT_SECONDS
    profiles: float = DEFAULT_PROFILE_TIMEOUT_SECONDS
    metadata: float = DEFAULT_METADATA_TIMEOUT_SECONDS
    engagement: float = DEFAULT_SOURCE_TIMEOUT_SECONDS


@dataclass(frozen=True, slots=True)
class QueryLimits:
    tracks: int = 400
    playlists: int = 200
    engagement: int = 1000
    profiles_per_artist: int = 2
    metadata_per_artist: int = 5


@dataclass(frozen=True, slots=True)
class RelayConfig:
    urls: tuple[str, ...]
    timeouts: SourceTimeouts = field(default_factory=SourceTimeouts)
    limits: QueryLimits = field(default_factory=QueryLimits)

    def resilience_for(self, url: str) -> ResilienceConfig:
        # The fan-out applies its own per-source bound; the HTTP timeout is only a backstop.
        return ResilienceConfig(
            name=url,
            base_url=url,
            timeout_seconds=self.timeouts.catalog * 2,
            retry=NO_RETRY,
            ratelimit=RateLimit(max_calls=10, per_seconds=1.0),
            default_headers={"Accept": "application/json"},
        )


def parse_relay_urls(raw: str) -> tuple[str, ...]:
    urls = tuple(dict.fromkeys(part.strip() for part in raw.split(",") if part.strip()))
    if not urls:
        raise InvalidConfigurationValueError("TSUNAMI_RELAY_URLS", raw, "lists no relays")
    return urls


def get_relay_config(*, urls: tuple[str, ...] | None = None) -> RelayConfig:
    if urls is not None:
        if not urls:
            raise ConfigurationError("At least one relay URL is required")
        resolved = urls
    else:
        raw = os.getenv("TSUNAMI_RELAY_URLS")
        resolved = DEFAULT_RELAY_URLS if raw is None else parse_relay_urls(raw)

    catalog_timeout = env_float("TSUNAMI_SOURCE_TIMEOUT_SECONDS", DEFAULT_SOURCE_TIMEOUT_SECONDS)
    timeouts = SourceTimeouts(catalog=catalog_timeout, engagement=catalog_timeout)
    return RelayConfig(urls=resolved, timeouts=timeouts)
