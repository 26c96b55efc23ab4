"""
Exception normalization for the exception-reporting path.

Purpose:
- Reduce any error-like value to a type name, a message and stack frames.
- Accept Python exceptions and any object exposing the ReportableError methods.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable
import traceback

# Tracing instrumentation frames.
DEFAULT_STACK_FILTERS: tuple[str, ...] = ("zipkin-tracer", "opentelemetry", "ddtrace")
_REPORTABLE_METHODS = ("type_name", "message", "backtrace")


@runtime_checkable
class ReportableError(Protocol):
    def type_name(self) -> str: ...

    def message(self) -> str: ...

    def backtrace(self) -> Sequence[str] | None: ...


@dataclass(frozen=True)
class ExceptionDetails:
    """
    Normalized view of an error: what gets written to the log line.
    """

    type_name: str
    message: str
    stack: list[str]

    @property
    def summary(self) -> str:
        return f"{self.type_name}: {self.message}"


def is_reportable(value: object) -> bool:
    if isinstance(value, BaseException):
        return True
    # The protocol check only sees attribute names; "message" may be a plain str.
    return isinstance(value, ReportableError) and all(
        callable(getattr(value, name)) for name in _REPORTABLE_METHODS
    )


def format_frames(tb) -> list[str]:
    """
    Render traceback frames as "<file>:<line>:in <function>", innermost last.
    """

    if tb is None:
        return []
    return [
        f"{frame.filename}:{frame.lineno}:in {frame.name}"
        for frame in traceback.extract_tb(tb)
    ]


def filter_frames(frames: Iterable[str], filters: Iterable[str]) -> list[str]:
    patterns = [pattern for pattern in filters if pattern]
    return [frame for frame in frames if not any(pattern in frame for pattern in patterns)]


def describe_exception(
    error: BaseException | ReportableError,
    *,
    stack_filters: Iterable[str] = DEFAULT_STACK_FILTERS,
) -> ExceptionDetails:
    if isinstance(error, BaseException):
        type_name = type(error).__name__
        message = str(error)
        frames = format_frames(error.__traceback__)
    elif is_reportable(error):
        type_name = str(error.type_name())
        message = str(error.message())
        frames = [str(frame) for frame in (error.backtrace() or [])]
    else:
        raise TypeError(f"{type(error).__name__} is not an exception")
    return ExceptionDetails(
        type_name=type_name,
        message=message,
        stack=filter_frames(frames, stack_filters),
    )
