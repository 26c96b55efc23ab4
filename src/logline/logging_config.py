"""
Bridge from the standard logging module.

Purpose:
- Let libraries that use logging.getLogger() end up in the same JSON lines.
- Records with exc_info go through JsonLogger.exception().
"""

from __future__ import annotations

import logging

from .logger import JsonLogger
from .severity import from_logging_level

PACKAGE_LOGGER = "logline"


class JsonLoggerHandler(logging.Handler):
    """
    logging.Handler that forwards records to a JsonLogger.
    """

    def __init__(self, json_logger: JsonLogger, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.json_logger = json_logger

    def emit(self, record: logging.LogRecord) -> None:
        # The package's own diagnostics would feed back into the logger.
        if record.name == PACKAGE_LOGGER or record.name.startswith(PACKAGE_LOGGER + "."):
            return
        try:
            severity = from_logging_level(record.levelno)
            data = {"logger": record.name}
            if record.exc_info and record.exc_info[1] is not None:
                self.json_logger.exception(
                    record.exc_info[1], record.getMessage(), data, severity
                )
            else:
                self.json_logger.log(severity, record.getMessage(), data)
        except Exception:
            self.handleError(record)


def setup_logging(level: str = "INFO", *, json_logger: JsonLogger | None = None) -> None:
    """
    Configure root logging, routed through ``json_logger`` when given.
    """

    if json_logger is not None:
        handler: logging.Handler = JsonLoggerHandler(json_logger)
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    logging.basicConfig(level=level.upper(), handlers=[handler], force=True)
