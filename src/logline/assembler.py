"""
Log event assembly.

Purpose:
- Build the ordered dict that becomes one JSON line.
- Keep the key order fixed: timestamp, message, level, fields, data.

Notes:
- Fields named like a reserved key are dropped; the reserved value wins.
- Empty data payloads are left out the same way empty fields are.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from .fields import is_blank
from .severity import Severity, display_name

RESERVED_KEYS: tuple[str, ...] = ("timestamp", "message", "level")


def format_timestamp(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def normalize_data(data: Any) -> Any:
    if is_blank(data):
        return None
    if isinstance(data, Mapping):
        return {str(key): value for key, value in data.items()}
    return data


def build_event(
    severity: Severity,
    message: Any,
    fields: Mapping[str, Any],
    data: Any = None,
    *,
    now: datetime,
) -> dict[str, Any]:
    event: dict[str, Any] = {
        "timestamp": format_timestamp(now),
        "message": message,
        "level": display_name(severity),
    }
    for key, value in fields.items():
        if key in RESERVED_KEYS:
            continue
        event[key] = value
    payload = normalize_data(data)
    if payload is not None:
        event.pop("data", None)
        event["data"] = payload
    return event
