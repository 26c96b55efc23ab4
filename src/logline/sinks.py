"""
Output sinks.

Purpose:
- Give the emitter somewhere to put a finished JSON line.
- Any object with write(text) works; these cover the common cases.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Protocol, TextIO
import json
import sys
import threading


class Sink(Protocol):
    def write(self, text: str) -> Any: ...


class StreamSink:
    """
    Writes to a text stream (stdout by default) and flushes each line.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # Resolved late so pytest's capsys and redirected stdout are honoured.
        return self._stream if self._stream is not None else sys.stdout

    def write(self, text: str) -> None:
        self.stream.write(text)
        self.stream.flush()

    def __repr__(self) -> str:
        name = getattr(self._stream, "name", "<stdout>")
        return f"StreamSink({name})"


class JsonlFileSink:
    """
    Appends lines to a JSONL file, creating parent directories as needed.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self._path.open("a", encoding="utf-8")
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._file.closed

    def write(self, text: str) -> None:
        with self._lock:
            self._file.write(text)
            self._file.flush()

    def close(self) -> None:
        with self._lock:
            if not self._file.closed:
                self._file.close()

    def __repr__(self) -> str:
        return f"JsonlFileSink({str(self._path)!r})"


class MemorySink:
    """
    Keeps written lines in memory; messages() decodes them.
    """

    def __init__(self) -> None:
        self.lines: list[str] = []
        self._lock = threading.Lock()

    def write(self, text: str) -> None:
        with self._lock:
            self.lines.append(text)

    def messages(self) -> list[Any]:
        with self._lock:
            lines = list(self.lines)
        return [json.loads(line) for line in lines]

    def last_message(self) -> Any:
        messages = self.messages()
        if not messages:
            raise ValueError("No messages have been written.")
        return messages[-1]

    def clear(self) -> None:
        with self._lock:
            self.lines.clear()

    def __repr__(self) -> str:
        return f"MemorySink(lines={len(self.lines)})"
