"""Shared logging helpers."""

from __future__ import annotations

import logging

# Per-request INFO lines from the HTTP stack drown out pipeline events.
_CHATTY_LOGGERS = ("httpx", "httpcore", "httpx_retries")


def configure_logging(*, verbose: bool = False, force: bool = False) -> None:
    """Initialise the root logger for CLI output.

    ``verbose`` switches to DEBUG and lets the HTTP client libraries through.
    Pass ``force=True`` to reconfigure during tests or specialised entry points.
    """

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)
