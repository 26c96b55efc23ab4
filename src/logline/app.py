"""
Runtime assembly helpers.

Purpose:
- Keep wiring logic (settings -> sink -> logger) in one place.

Logic flow:
1) load_logger() reads logline.yaml and LOGLINE_* environment variables.
2) build_sink() turns the "output" setting into a sink (or None).
3) build_logger() creates the JsonLogger and adds configured Shared fields.
4) The caller closes the logger (or uses it in a with block) to close a file sink.
"""

from __future__ import annotations

import sys

from .config import LoggerSettings, load_settings
from .emitter import JsonSerializer
from .logger import JsonLogger
from .sinks import JsonlFileSink, Sink, StreamSink


def build_sink(settings: LoggerSettings) -> Sink | None:
    if settings.detached:
        return None
    output = settings.output.strip()
    if output.lower() == "stdout":
        return StreamSink()
    if output.lower() == "stderr":
        return StreamSink(sys.stderr)
    return JsonlFileSink(output)


def build_logger(settings: LoggerSettings, *, name: str = "logline") -> JsonLogger:
    """
    Create a JsonLogger for resolved settings.
    """

    logger = JsonLogger(
        build_sink(settings),
        serializer=JsonSerializer(settings.json_mode, ensure_ascii=settings.ensure_ascii),
        stack_filters=settings.stack_filters,
        name=name,
    )
    if settings.fields:
        logger.add_fields(settings.fields)
    return logger


def load_logger(path: str | None = None, *, name: str = "logline") -> JsonLogger:
    """
    Load settings from YAML/env and return a ready JsonLogger.
    """

    return build_logger(load_settings(path), name=name)
