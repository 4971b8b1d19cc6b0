"""Test unified logging configuration.

Tests for inkpad.utils.logging_config:
    - setup_logging() is idempotent (no duplicated handlers)
    - File handler writes JSON lines with context fields
    - push_context() / pop_context() / log_context()
    - ContextFormatter human and json modes

Run:
    pytest tests/test_logging_config.py -v
"""

import json
import logging
import logging.handlers
import sys

import pytest

from inkpad.utils import logging_config


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logging_config.pop_context()
    logging_config.shutdown()


def make_record(msg="hello", level=logging.INFO):
    return logging.LogRecord("inkpad.test", level, __file__, 1, msg, None, None)


def test_setup_logging_idempotent():
    first = logging_config.setup_logging("INFO", to_stderr=True)
    second = logging_config.setup_logging("DEBUG", to_stderr=True)

    root = logging.getLogger()
    assert len(first) == len(second) == 1
    assert second[0] in root.handlers
    assert first[0] not in root.handlers
    assert root.level == logging.DEBUG


def test_file_handler_json(tmp_path):
    log_file = tmp_path / "logs" / "render.log"
    logging_config.setup_logging("INFO", str(log_file), json=True, to_stderr=False,
                                 context={"app": "test"})

    logging.getLogger("inkpad.test").info("rendered 3 groups")
    logging_config.shutdown()

    lines = log_file.read_text(encoding="utf-8").strip().splitlines()
    entry = json.loads(lines[-1])
    assert entry["message"] == "rendered 3 groups"
    assert entry["level"] == "INFO"
    assert entry["app"] == "test"


def test_context_push_pop():
    formatter = logging_config.ContextFormatter("human", use_color=False)

    logging_config.push_context(strokes_file="sig.yaml", group=2)
    line = formatter.format(make_record())
    assert "strokes_file=sig.yaml" in line
    assert "group=2" in line

    logging_config.pop_context(keys=["group"])
    line = formatter.format(make_record())
    assert "strokes_file=sig.yaml" in line
    assert "group=" not in line

    logging_config.pop_context()
    assert "strokes_file" not in formatter.format(make_record())


def test_human_format():
    formatter = logging_config.ContextFormatter("human", use_color=False)
    line = formatter.format(make_record("stamped 22 discs", logging.WARNING))

    assert line.endswith("stamped 22 discs")
    assert "WARNING" in line
    assert line.split(" ")[0].endswith("Z")


def test_json_format_includes_exception():
    formatter = logging_config.ContextFormatter("json")
    try:
        raise ValueError("bad group")
    except ValueError:
        record = logging.LogRecord("inkpad.test", logging.ERROR, __file__, 1, "failed", None, sys.exc_info())

    entry = json.loads(formatter.format(record))
    assert entry["message"] == "failed"
    assert "ValueError: bad group" in entry["exc"]


def test_invalid_format_mode():
    with pytest.raises(ValueError):
        logging_config.ContextFormatter("xml")


def test_get_logger_and_set_level():
    logger = logging_config.get_logger("inkpad.test")
    assert logger.name == "inkpad.test"

    logging_config.setup_logging("INFO", to_stderr=False)
    logging_config.set_level("ERROR")
    assert logging.getLogger().level == logging.ERROR


def test_log_context_restores_fields():
    formatter = logging_config.ContextFormatter("human")
    logging_config.push_context(app="render")

    with logging_config.log_context(strokes_file="sig.yaml"):
        line = formatter.format(make_record())
        assert "app=render strokes_file=sig.yaml |" in line

    line = formatter.format(make_record())
    assert "app=render" in line
    assert "strokes_file" not in line


def test_shutdown_detaches_only_own_handlers():
    foreign = logging.NullHandler()
    root = logging.getLogger()
    root.addHandler(foreign)
    try:
        installed = logging_config.setup_logging("INFO", to_stderr=True)
        logging_config.shutdown()

        assert installed[0] not in root.handlers
        assert foreign in root.handlers
    finally:
        root.removeHandler(foreign)


def test_rotating_file_handler(tmp_path):
    handlers = logging_config.setup_logging(
        "INFO", str(tmp_path / "render.log"), to_stderr=False, max_bytes=1024, backup_count=2
    )
    assert isinstance(handlers[0], logging.handlers.RotatingFileHandler)
    assert handlers[0].maxBytes == 1024
