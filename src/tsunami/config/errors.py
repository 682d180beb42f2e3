"""Configuration error definitions."""

from __future__ import annotations


class ConfigurationError(RuntimeError):
    """Raised when configuration values are invalid."""


class MissingConfigurationError(ConfigurationError):
    """Raised when required configuration values are absent or blank."""


class InvalidConfigurationValueError(ConfigurationError):
    """Raised when a configuration value is present but cannot be used.

    Covers malformed numbers, empty relay lists and artist identities that are
    not hex public keys.
    """

    def __init__(self, name: str, value: object, reason: str) -> None:
        super().__init__(f"{name} {reason}, got {value!r}")
        self.name = name
        self.value = value
