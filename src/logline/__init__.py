"""
logline: single-line JSON structured logging.

The package is split into small modules so each concern can evolve on its
own: severity table, field stores, assembly, emission, sinks and the facade.
Import paths are exported here to keep the public surface area obvious.
"""

from .severity import (
    LOGGING_METHODS,
    METHOD_SEVERITY,
    SEVERITY_NAMES,
    Severity,
    display_name,
    resolve_severity,
)
from .fields import FieldScope, FieldStores, IsolatedFieldStore, SharedFieldStore, compact_fields
from .errors import ExceptionDetails, ReportableError, describe_exception
from .assembler import build_event, format_timestamp
from .sinks import JsonlFileSink, MemorySink, Sink, StreamSink
from .emitter import Emitter, JsonMode, JsonSerializer
from .logger import JsonLogger
from .config import LoggerSettings, load_settings
from .app import build_logger, build_sink, load_logger
from .logging_config import JsonLoggerHandler, setup_logging

__version__ = "0.1.0"

__all__ = [
    "LOGGING_METHODS",
    "METHOD_SEVERITY",
    "SEVERITY_NAMES",
    "Severity",
    "display_name",
    "resolve_severity",
    "FieldScope",
    "FieldStores",
    "IsolatedFieldStore",
    "SharedFieldStore",
    "compact_fields",
    "ExceptionDetails",
    "ReportableError",
    "describe_exception",
    "build_event",
    "format_timestamp",
    "JsonlFileSink",
    "MemorySink",
    "Sink",
    "StreamSink",
    "Emitter",
    "JsonMode",
    "JsonSerializer",
    "JsonLogger",
    "LoggerSettings",
    "load_settings",
    "build_logger",
    "build_sink",
    "load_logger",
    "JsonLoggerHandler",
    "setup_logging",
]
