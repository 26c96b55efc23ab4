"""
JSON serialization and emission.

Purpose:
- Serialize a value to one compact JSON line and hand it to the sink.
- Never let an encoding problem escape: write a fallback line instead.

Modes:
- strict: NaN/Infinity and non-JSON types are encoding failures.
- compat: NaN/Infinity are written as-is and unknown objects via str().
"""

from __future__ import annotations

from enum import Enum
from typing import Any
import json
import logging

from .sinks import Sink

logger = logging.getLogger(__name__)

SERIALIZATION_ERRORS = (TypeError, ValueError, RecursionError)


class JsonMode(Enum):
    STRICT = "strict"
    COMPAT = "compat"

    @classmethod
    def parse(cls, value: str | JsonMode) -> JsonMode:
        if isinstance(value, JsonMode):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            allowed = ", ".join(mode.value for mode in cls)
            raise ValueError(f"Unsupported JSON mode '{value}'. Use one of: {allowed}.") from exc


class JsonSerializer:
    """
    Encoding mode is fixed per instance, never global.
    """

    def __init__(self, mode: JsonMode | str = JsonMode.STRICT, *, ensure_ascii: bool = False) -> None:
        self.mode = JsonMode.parse(mode)
        self.ensure_ascii = ensure_ascii

    def serialize(self, value: Any) -> str:
        if self.mode is JsonMode.STRICT:
            return json.dumps(
                value,
                separators=(",", ":"),
                ensure_ascii=self.ensure_ascii,
                allow_nan=False,
            )
        return json.dumps(
            value,
            separators=(",", ":"),
            ensure_ascii=self.ensure_ascii,
            allow_nan=True,
            default=str,
        )

    def __repr__(self) -> str:
        return f"JsonSerializer(mode={self.mode.value!r}, ensure_ascii={self.ensure_ascii!r})"


class Emitter:
    """
    Writes one newline-terminated JSON line per call, or nothing without a sink.
    """

    def __init__(self, sink: Sink | None, serializer: JsonSerializer | None = None) -> None:
        self.sink = sink
        self.serializer = serializer or JsonSerializer()

    def fallback_message(self, value: Any, exc: BaseException) -> str:
        return (
            f"Failed to dump {type(value).__name__} to JSON "
            f"in {self.serializer.mode.value} mode: {exc}"
        )

    def write(self, value: Any) -> None:
        if self.sink is None:
            return
        try:
            text = self.serializer.serialize(value)
        except SERIALIZATION_ERRORS as exc:
            logger.debug("JSON encoding failed, writing fallback line: %s", exc)
            text = self.serializer.serialize({"message": self.fallback_message(value, exc)})
        self.sink.write(text + "\n")
