from __future__ import annotations

import logging

from tsunami.domain.model import Severity

_LEVELS = {
    Severity.DEBUG: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
}


class LoggingObserver:
    """Forward pipeline events to a standard logger as ``event key=value ...`` lines."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("tsunami.pipeline")

    def emit(self, event: str, severity: Severity = Severity.INFO, **fields: object) -> None:
        level = _LEVELS[severity]
        if not self._logger.isEnabledFor(level):
            return
        if not fields:
            self._logger.log(level, "%s", event)
            return
        details = " ".join(f"{key}={value}" for key, value in sorted(fields.items()))
        self._logger.log(level, "%s %s", event, details)
