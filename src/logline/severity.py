"""
Severity table.

Purpose:
- Map facade method names and loose level names onto one small enum.
- Keep the display names in one place ("warn" is written as "warning").
"""

from __future__ import annotations

from enum import Enum
import logging


class Severity(Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"


SEVERITY_NAMES: dict[Severity, str] = {severity: severity.value for severity in Severity}

METHOD_SEVERITY: dict[str, Severity] = {
    "debug": Severity.DEBUG,
    "info": Severity.INFO,
    "warn": Severity.WARNING,
    "warning": Severity.WARNING,
    "error": Severity.ERROR,
    "fatal": Severity.FATAL,
}

LOGGING_METHODS: tuple[str, ...] = tuple(METHOD_SEVERITY)

_LOGGING_LEVELS: tuple[tuple[int, Severity], ...] = (
    (logging.CRITICAL, Severity.FATAL),
    (logging.ERROR, Severity.ERROR),
    (logging.WARNING, Severity.WARNING),
    (logging.INFO, Severity.INFO),
)


def display_name(severity: Severity) -> str:
    return SEVERITY_NAMES[severity]


def resolve_severity(value: object, default: Severity = Severity.ERROR) -> Severity:
    """
    Turn a Severity, a level name or None into a Severity.

    Unknown values fall back to ``default`` instead of raising.
    """

    if isinstance(value, Severity):
        return value
    if isinstance(value, str):
        return METHOD_SEVERITY.get(value.strip().lower(), default)
    return default


def from_logging_level(levelno: int) -> Severity:
    # stdlib levels are thresholds; anything below INFO is debug.
    for threshold, severity in _LOGGING_LEVELS:
        if levelno >= threshold:
            return severity
    return Severity.DEBUG
