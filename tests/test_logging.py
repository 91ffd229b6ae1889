"""Tests for structured logging helpers."""

import json
import logging

import pytest

from dmx.canvas import Canvas
from dmx.logging import (
    AUDIT,
    ConsoleFormatter,
    JsonFormatter,
    _summarize,
    audit,
    get_logger,
    setup_logging,
    trace,
)


def _record(event="codec.encoded", **ctx):
    log = get_logger("test")
    record = log.makeRecord(log.name, AUDIT, "", 0, "", (), None)
    record.event = event
    record.ctx = ctx
    return record


class TestFormatters:
    def test_json_line(self):
        entry = json.loads(JsonFormatter().format(_record(text="Hi")))
        assert entry["level"] == "AUDIT"
        assert entry["src"] == "dmx.test"
        assert entry["event"] == "codec.encoded"
        assert entry["ctx"] == {"text": "Hi"}
        assert "msg" not in entry

    def test_console_without_color(self):
        line = ConsoleFormatter(color=False).format(_record(text="Hi"))
        assert "AUDIT" in line
        assert "[dmx.test] codec.encoded text=Hi" in line


class TestSummarize:
    def test_canvas_by_type(self):
        assert _summarize(Canvas()) == "<Canvas>"

    def test_scalars_and_containers(self):
        assert _summarize(True) == "True"
        assert _summarize("Hi") == "'Hi'"
        assert _summarize(["a", "b"]) == "list[2]"
        assert _summarize({"a": 1}) == "dict[1 keys]"


class TestAuditAndTrace:
    def test_audit_record(self, caplog):
        caplog.set_level(AUDIT, logger="dmx")
        audit("unit.event", logger=get_logger("test"), answer=42)
        record = caplog.records[-1]
        assert record.levelname == "AUDIT"
        assert record.event == "unit.event"
        assert record.ctx == {"answer": 42}

    def test_audit_suppressed_below_level(self, caplog):
        caplog.set_level(logging.ERROR, logger="dmx")
        audit("unit.event", logger=get_logger("test"))
        assert not [r for r in caplog.records if getattr(r, "event", None) == "unit.event"]

    def test_trace_enter_and_done(self, caplog):
        caplog.set_level(logging.DEBUG, logger="dmx")

        @trace(logger_name="test")
        def double(x):
            return x * 2

        assert double(4) == 8
        events = [r.event for r in caplog.records if hasattr(r, "event")]
        assert events[-2].endswith("double.enter")
        assert events[-1].endswith("double.done")
        assert caplog.records[-1].ctx == {"result": "8"}

    def test_trace_error_reraised(self, caplog):
        caplog.set_level(logging.DEBUG, logger="dmx")

        @trace(logger_name="test")
        def boom():
            raise ValueError("bad")

        with pytest.raises(ValueError):
            boom()
        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.event.endswith("boom.error")


class TestSetup:
    def test_log_file_is_json(self, tmp_path):
        path = tmp_path / "dmx.log"
        setup_logging(level="AUDIT", log_file=str(path))
        audit("unit.file", logger=get_logger("test"), n=1)
        for handler in logging.getLogger("dmx").handlers:
            handler.flush()
        entry = json.loads(path.read_text().splitlines()[-1])
        assert entry["event"] == "unit.file"
        assert entry["ctx"] == {"n": 1}

    def test_unknown_level_falls_back(self):
        setup_logging(level="chatty")
        assert logging.getLogger("dmx").level == logging.WARNING
