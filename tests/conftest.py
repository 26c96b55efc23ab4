import os
from datetime import datetime, timezone

import pytest

from logline import config
from logline.logger import JsonLogger
from logline.sinks import MemorySink

FROZEN_TIME = datetime(1897, 1, 1, tzinfo=timezone.utc)
FROZEN_TIME_STRING = "1897-01-01T00:00:00.000000Z"


@pytest.fixture
def sink() -> MemorySink:
    return MemorySink()


@pytest.fixture
def logger(sink: MemorySink) -> JsonLogger:
    return JsonLogger(sink, clock=lambda: FROZEN_TIME)


@pytest.fixture(autouse=True)
def clear_env(monkeypatch: pytest.MonkeyPatch):
    keys = [
        "LOGLINE_OUTPUT",
        "LOGLINE_JSON_MODE",
        "LOGLINE_ENSURE_ASCII",
        "LOGLINE_STACK_FILTERS",
    ]
    original = {key: os.getenv(key) for key in keys}
    for key in keys:
        if key in os.environ:
            del os.environ[key]
    monkeypatch.setattr(config, "_ENV_LOADED", False)
    yield
    for key, value in original.items():
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value
