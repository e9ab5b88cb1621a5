"""Tests for jumble.core.logging."""

import json
import logging
import sys

import pytest

from jumble.core.logging import StructuredFormatter, configure_logging
from jumble.workspace import build

from conftest import write_descriptor


def _record(msg="hello %s", args=("world",), exc_info=None):
    return logging.LogRecord(
        name="jumble.test",
        level=logging.WARNING,
        pathname=__file__,
        lineno=42,
        msg=msg,
        args=args,
        exc_info=exc_info,
        func="test_func",
    )


class TestStructuredFormatter:
    def test_fields(self):
        entry = json.loads(StructuredFormatter().format(_record()))
        assert entry["level"] == "WARNING"
        assert entry["logger"] == "jumble.test"
        assert entry["msg"] == "hello world"
        assert entry["line"] == 42
        assert entry["ts"].endswith("Z")
        assert "exception" not in entry
        assert "path" not in entry

    def test_context_fields(self):
        record = _record()
        record.path = "/ws/api/.jumble/project.toml"
        record.kind = "parse"
        entry = json.loads(StructuredFormatter().format(record))
        assert entry["path"] == "/ws/api/.jumble/project.toml"
        assert entry["kind"] == "parse"
        assert "tool" not in entry

    def test_build_diagnostics_carry_context(self, tmp_path, caplog):
        bad = write_descriptor(tmp_path / "bad", "[project\n")
        with caplog.at_level(logging.WARNING, logger="jumble.workspace"):
            build(tmp_path)
        skipped = [r for r in caplog.records if getattr(r, "kind", None) == "parse"]
        assert len(skipped) == 1
        entry = json.loads(StructuredFormatter().format(skipped[0]))
        assert entry["path"].endswith(str(bad.relative_to(tmp_path)))
        assert entry["kind"] == "parse"

    def test_exception(self):
        try:
            raise ValueError("bad")
        except ValueError:
            record = _record(exc_info=sys.exc_info())
        entry = json.loads(StructuredFormatter().format(record))
        assert "ValueError: bad" in entry["exception"]


@pytest.fixture
def scratch_logger():
    name = "jumble_logging_test"
    logger = logging.getLogger(name)
    yield name, logger
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


class TestConfigureLogging:
    def test_level(self, scratch_logger):
        name, logger = scratch_logger
        configure_logging(level="debug", logger_name=name)
        assert logger.level == logging.DEBUG
        assert logger.handlers == []

    def test_unknown_level_falls_back(self, scratch_logger):
        name, logger = scratch_logger
        configure_logging(level="chatty", logger_name=name)
        assert logger.level == logging.INFO

    def test_structured(self, scratch_logger):
        name, logger = scratch_logger
        configure_logging(structured=True, logger_name=name)
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, StructuredFormatter)
        assert logger.handlers[0].stream is sys.stderr
        assert logger.propagate is False

    def test_structured_twice_single_handler(self, scratch_logger):
        name, logger = scratch_logger
        configure_logging(structured=True, logger_name=name)
        configure_logging(structured=True, logger_name=name)
        assert len(logger.handlers) == 1
