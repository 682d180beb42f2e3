from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests.support.records import ALICE
from tsunami.config import (
    DEFAULT_RELAY_URLS,
    ConfigurationError,
    InvalidConfigurationValueError,
    MissingConfigurationError,
    configure_logging,
    env_float,
    get_relay_config,
    get_snapshot_config,
    parse_relay_urls,
    require_env_var,
    validate_pubkey,
)


def test_require_env_var_handles_blank_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TSUNAMI_ARTIST_PUBKEY", "   ")

    with pytest.raises(MissingConfigurationError) as exc:
        require_env_var("TSUNAMI_ARTIST_PUBKEY")

    assert "TSUNAMI_ARTIST_PUBKEY" in str(exc.value)


def test_relay_config_defaults() -> None:
    config = get_relay_config()

    assert config.urls == DEFAULT_RELAY_URLS
    assert config.timeouts.catalog == 10.0
    assert config.timeouts.profiles == 8.0
    assert config.timeouts.metadata == 5.0


def test_relay_urls_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(
        "TSUNAMI_RELAY_URLS",
        "https://one.example.com, https://two.example.com,https://one.example.com",
    )
    monkeypatch.setenv("TSUNAMI_SOURCE_TIMEOUT_SECONDS", "4")

    config = get_relay_config()

    assert config.urls == ("https://one.example.com", "https://two.example.com")
    assert config.timeouts.catalog == 4.0
    assert config.timeouts.engagement == 4.0


def test_empty_relay_list_is_rejected() -> None:
    with pytest.raises(ConfigurationError):
        parse_relay_urls(" , ,")
    with pytest.raises(ConfigurationError):
        get_relay_config(urls=())


@pytest.mark.parametrize("raw", ["soon", "0", "-3"])
def test_invalid_timeouts_are_rejected(monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
    monkeypatch.setenv("TSUNAMI_SOURCE_TIMEOUT_SECONDS", raw)

    with pytest.raises(ConfigurationError, match="TSUNAMI_SOURCE_TIMEOUT_SECONDS"):
        env_float("TSUNAMI_SOURCE_TIMEOUT_SECONDS", 10.0)


def test_resilience_for_relay_disables_retries() -> None:
    config = get_relay_config(urls=("https://one.example.com",))

    resilience = config.resilience_for("https://one.example.com")

    assert resilience.base_url == "https://one.example.com"
    assert resilience.retry.total == 0
    assert resilience.timeout_seconds == config.timeouts.catalog * 2


def test_snapshot_config_requires_artist(monkeypatch: pytest.MonkeyPatch) -> None:
    with pytest.raises(MissingConfigurationError):
        get_snapshot_config()

    monkeypatch.setenv("TSUNAMI_ARTIST_PUBKEY", "npub1notahexkey")
    with pytest.raises(ConfigurationError, match="hex public key"):
        get_snapshot_config()


def test_snapshot_config_normalizes_pubkey_and_dist(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("TSUNAMI_ARTIST_PUBKEY", f"  {ALICE.upper()} ")
    monkeypatch.setenv("TSUNAMI_DIST_DIR", str(tmp_path))

    config = get_snapshot_config()

    assert config.artist_pubkey == ALICE
    assert config.data_dir() == tmp_path.resolve() / "data"
    assert get_snapshot_config(dist_dir=Path("elsewhere")).dist_dir == Path("elsewhere")


def test_validate_pubkey_rejects_short_values() -> None:
    with pytest.raises(ConfigurationError):
        validate_pubkey("abc")


def test_invalid_value_error_names_the_setting() -> None:
    with pytest.raises(InvalidConfigurationValueError) as exc:
        parse_relay_urls(",")

    assert exc.value.name == "TSUNAMI_RELAY_URLS"
    assert exc.value.value == ","


def test_configure_logging_quiets_http_stack() -> None:
    configure_logging()
    assert logging.getLogger("httpx").level == logging.WARNING

    configure_logging(verbose=True)
    assert logging.getLogger("httpx").level == logging.DEBUG

    configure_logging()
