"""
JSON logger facade.

Purpose:
- One method per severity, plus "_with_data" variants carrying a payload.
- A dedicated exception() path with normalized exception/message/stack fields.
- Field management for the Shared and Isolated scopes.

Logic flow (plain call):
1) Resolve the severity and read the clock.
2) Merge Shared then Isolated field snapshots.
3) build_event() orders the keys; the Emitter serializes and writes.

Logic flow (exception call):
1) Non-exception input is reported as two diagnostic lines instead.
2) Otherwise exception/stack fields are pinned in the Isolated store for the
   duration of one plain call and released on every exit path.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from contextlib import contextmanager
from datetime import datetime
from typing import Any

from .assembler import build_event, utc_now
from .emitter import Emitter, JsonSerializer
from .errors import DEFAULT_STACK_FILTERS, ReportableError, describe_exception, is_reportable
from .fields import FieldScope, FieldStores
from .severity import Severity, resolve_severity
from .sinks import Sink

MALFORMED_EXCEPTION_MESSAGE = "Logger exception called without exception class."


class JsonLogger:
    """
    Structured logger writing one JSON object per line to ``sink``.

    A logger without a sink is detached: every call is accepted and nothing is
    written.
    """

    def __init__(
        self,
        sink: Sink | None = None,
        *,
        serializer: JsonSerializer | None = None,
        clock: Callable[[], datetime] | None = None,
        stack_filters: Iterable[str] = DEFAULT_STACK_FILTERS,
        name: str = "logline",
    ) -> None:
        self.name = name
        self._emitter = Emitter(sink, serializer)
        self._clock = clock or utc_now
        self._stack_filters = tuple(stack_filters)
        self._fields = FieldStores(name)

    @property
    def sink(self) -> Sink | None:
        return self._emitter.sink

    @property
    def serializer(self) -> JsonSerializer:
        return self._emitter.serializer

    def __repr__(self) -> str:
        return f"logline JSON logger. sink: {self.sink!r}"

    def close(self) -> None:
        """
        Close the sink if it owns a resource (JsonlFileSink). Streams are left open.
        """

        close = getattr(self.sink, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> JsonLogger:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # Plain entry points.

    def log(self, level: Severity | str | None, message: Any, data: Any = None) -> None:
        self._log(resolve_severity(level, Severity.INFO), message, data)

    def debug(self, message: Any) -> None:
        self._log(Severity.DEBUG, message)

    def info(self, message: Any) -> None:
        self._log(Severity.INFO, message)

    def warning(self, message: Any) -> None:
        self._log(Severity.WARNING, message)

    def warn(self, message: Any) -> None:
        self._log(Severity.WARNING, message)

    def error(self, message: Any) -> None:
        self._log(Severity.ERROR, message)

    def fatal(self, message: Any) -> None:
        self._log(Severity.FATAL, message)

    def debug_with_data(self, message: Any, data: Any) -> None:
        self._log(Severity.DEBUG, message, data)

    def info_with_data(self, message: Any, data: Any) -> None:
        self._log(Severity.INFO, message, data)

    def warning_with_data(self, message: Any, data: Any) -> None:
        self._log(Severity.WARNING, message, data)

    def warn_with_data(self, message: Any, data: Any) -> None:
        self._log(Severity.WARNING, message, data)

    def error_with_data(self, message: Any, data: Any) -> None:
        self._log(Severity.ERROR, message, data)

    def fatal_with_data(self, message: Any, data: Any) -> None:
        self._log(Severity.FATAL, message, data)

    def write(self, value: Any) -> None:
        """
        Emit ``value`` as-is, skipping timestamp, level and fields.
        """

        self._emitter.write(value)

    # Exception reporting.

    def exception(
        self,
        error: BaseException | ReportableError | Any,
        message: Any = None,
        data: Any = None,
        level: Severity | str | None = None,
    ) -> None:
        """
        Log ``error`` with exception, message and stack fields.

        Inputs:
        - error: an exception, or any object implementing ReportableError.
        - message: replaces the exception's own message in the "message" key.
        - data: optional payload written under "data".
        - level: severity name; missing or unknown names mean "error".
        """

        severity = resolve_severity(level, Severity.ERROR)
        if not is_reportable(error):
            self._log_malformed_exception(error, message, data, severity)
            return

        details = describe_exception(error, stack_filters=self._stack_filters)
        text = details.message if message is None else message
        exception_fields = {"exception": details.summary, "stack": details.stack}
        with self._fields.isolated.scoped(exception_fields):
            self._log(severity, text, data, pinned=exception_fields)

    def _log_malformed_exception(
        self, value: Any, message: Any, data: Any, severity: Severity
    ) -> None:
        self._log(Severity.WARNING, MALFORMED_EXCEPTION_MESSAGE)
        text = f"{type(value).__name__}: {value!r}"
        if message is not None:
            text = f"{text} {message}"
        self._log(severity, text, data)

    # Fields.

    def add_fields(self, fields: Mapping[Any, Any]) -> None:
        self._fields.add(FieldScope.SHARED, fields)

    def remove_fields(self, keys: Iterable[Any] | str) -> None:
        self._fields.remove(FieldScope.SHARED, keys)

    def add_isolated_fields(self, fields: Mapping[Any, Any]) -> None:
        self._fields.add(FieldScope.ISOLATED, fields)

    def remove_isolated_fields(self, keys: Iterable[Any] | str) -> None:
        self._fields.remove(FieldScope.ISOLATED, keys)

    @contextmanager
    def isolated_fields(self, fields: Mapping[Any, Any] | None = None, **extra: Any) -> Iterator[None]:
        """
        Attach isolated fields for the duration of a ``with`` block.
        """

        scoped = dict(fields or {})
        scoped.update(extra)
        with self._fields.isolated.scoped(scoped):
            yield

    def current_fields(self) -> dict[str, Any]:
        return self._fields.merged()

    # Assembly + emission.

    def _log(
        self,
        severity: Severity,
        message: Any,
        data: Any = None,
        *,
        pinned: Mapping[str, Any] | None = None,
    ) -> None:
        if self.sink is None:
            return
        fields = self._fields.merged()
        if pinned:
            # Exception fields are written even when empty (stack: []).
            fields.update(pinned)
        event = build_event(severity, message, fields, data, now=self._clock())
        self._emitter.write(event)
