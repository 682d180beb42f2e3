"""Application configuration helpers."""

from __future__ import annotations

from .env import env_float, require_env_var, require_env_vars
from .errors import (
    ConfigurationError,
    InvalidConfigurationValueError,
    MissingConfigurationError,
)
from .http_resilience import NO_RETRY, RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .relays import (
    DEFAULT_RELAY_URLS,
    QueryLimits,
    RelayConfig,
    SourceTimeouts,
    get_relay_config,
    parse_relay_urls,
)
from .snapshots import (
    SCHEMA_VERSION,
    ArtifactCaps,
    SnapshotConfig,
    data_dir_for,
    get_snapshot_config,
    resolve_dist_dir,
    validate_pubkey,
)

__all__ = [
    "DEFAULT_RELAY_URLS",
    "NO_RETRY",
    "SCHEMA_VERSION",
    "ArtifactCaps",
    "ConfigurationError",
    "InvalidConfigurationValueError",
    "MissingConfigurationError",
    "QueryLimits",
    "RateLimit",
    "RelayConfig",
    "ResilienceConfig",
    "RetryPolicy",
    "SnapshotConfig",
    "SourceTimeouts",
    "configure_logging",
    "data_dir_for",
    "env_float",
    "get_relay_config",
    "get_snapshot_config",
    "parse_relay_urls",
    "require_env_var",
    "require_env_vars",
    "resolve_dist_dir",
    "validate_pubkey",
]
