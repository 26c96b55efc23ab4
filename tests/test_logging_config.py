import logging

import pytest

from logline.logger import JsonLogger
from logline.logging_config import JsonLoggerHandler, setup_logging
from logline.sinks import MemorySink


@pytest.fixture
def bridged(logger: JsonLogger):
    std_logger = logging.getLogger("tests.bridge")
    handler = JsonLoggerHandler(logger)
    std_logger.addHandler(handler)
    std_logger.setLevel(logging.DEBUG)
    std_logger.propagate = False
    yield std_logger
    std_logger.removeHandler(handler)


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_handler_forwards_records(bridged: logging.Logger, sink: MemorySink) -> None:
    bridged.warning("hello %s", "world")
    message = sink.last_message()
    assert message["level"] == "warning"
    assert message["message"] == "hello world"
    assert message["data"] == {"logger": "tests.bridge"}


def test_handler_routes_exc_info_to_exception(bridged: logging.Logger, sink: MemorySink) -> None:
    try:
        raise KeyError("missing")
    except KeyError:
        bridged.exception("lookup failed")
    message = sink.last_message()
    assert message["level"] == "error"
    assert message["message"] == "lookup failed"
    assert message["exception"] == "KeyError: 'missing'"
    assert message["stack"]


def test_handler_skips_package_records(logger: JsonLogger, sink: MemorySink) -> None:
    handler = JsonLoggerHandler(logger)
    record = logging.LogRecord("logline.emitter", logging.DEBUG, __file__, 1, "noise", None, None)
    handler.emit(record)
    assert sink.lines == []


def test_setup_logging_routes_root(logger: JsonLogger, sink: MemorySink, restore_root_logging) -> None:
    setup_logging("debug", json_logger=logger)
    logging.getLogger("tests.root").debug("through root")
    message = sink.last_message()
    assert message["level"] == "debug"
    assert message["message"] == "through root"


def test_setup_logging_plain_text(restore_root_logging) -> None:
    setup_logging("warning")
    root = logging.getLogger()
    assert root.level == logging.WARNING
    assert not isinstance(root.handlers[0], JsonLoggerHandler)
