"""
Unit tests for logging configuration and formatters.
"""

import io
import json
import logging
import sys

import pytest

from linehaul.pipeline.logging_setup import (
    TRACE,
    ContextAdapter,
    JSONFormatter,
    LogStyle,
    ReadableFormatter,
    configure_logging,
    parse_level,
    parse_level_directives,
)


def make_record(msg="hello", level=logging.INFO, context=None, exc_info=None):
    record = logging.LogRecord(
        name="linehaul.test",
        level=level,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    if context is not None:
        record.context = context
    return record


class TestParseLevel:
    """Tests for level names and directives."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("trace", TRACE),
            ("DEBUG", logging.DEBUG),
            (" info ", logging.INFO),
            ("warn", logging.WARNING),
            ("error", logging.ERROR),
            ("15", 15),
        ],
    )
    def test_levels(self, value, expected):
        assert parse_level(value) == expected

    def test_off_silences_everything(self):
        assert parse_level("off") > logging.CRITICAL

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            parse_level("loud")

    def test_directives(self):
        root, overrides = parse_level_directives("info,linehaul.pipeline=trace")

        assert root == logging.INFO
        assert overrides == {"linehaul.pipeline": TRACE}

    def test_directives_without_root(self):
        """Only overrides keeps the default root level."""
        root, overrides = parse_level_directives("linehaul=warn")

        assert root == logging.DEBUG
        assert overrides == {"linehaul": logging.WARNING}

    def test_blank_directives_ignored(self):
        assert parse_level_directives(" error, ,") == (logging.ERROR, {})

    def test_bad_override(self):
        with pytest.raises(ValueError):
            parse_level_directives("info,linehaul=verbose")

    def test_trace_level_name(self):
        assert logging.getLevelName(TRACE) == "TRACE"


class TestJSONFormatter:
    """Tests for JSON log rendering."""

    def test_fields(self):
        payload = json.loads(
            JSONFormatter().format(make_record(context={"line": "<x>", "error": "bad"}))
        )

        assert payload["level"] == "INFO"
        assert payload["name"] == "linehaul.test"
        assert payload["msg"] == "hello"
        assert payload["version"] == "0.1.0"
        assert payload["line"] == "<x>"
        assert payload["error"] == "bad"
        assert payload["time"].endswith("+00:00")

    def test_context_cannot_clobber_core_fields(self):
        payload = json.loads(JSONFormatter().format(make_record(context={"msg": "other"})))
        assert payload["msg"] == "hello"

    def test_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = make_record(exc_info=sys.exc_info())

        payload = json.loads(JSONFormatter().format(record))
        assert "RuntimeError: boom" in payload["exc"]


class TestReadableFormatter:
    """Tests for human-readable log rendering."""

    def test_plain(self):
        text = ReadableFormatter().format(make_record())
        assert text.endswith("INFO  linehaul.test: hello")

    def test_context_pairs(self):
        text = ReadableFormatter().format(
            make_record(context={"line": "<x>", "error": "bad"})
        )
        assert text.endswith("hello line='<x>' error='bad'")


class TestContextAdapter:
    """Tests for bound structured fields."""

    def test_bound_fields(self, caplog):
        log = ContextAdapter(logging.getLogger("linehaul.test.adapter"), {"line": "l"})

        with caplog.at_level(logging.INFO):
            log.info("one")

        assert caplog.records[0].context == {"line": "l"}

    def test_per_call_fields_merge(self, caplog):
        log = ContextAdapter(logging.getLogger("linehaul.test.adapter"), {"line": "l"})

        with caplog.at_level(logging.INFO):
            log.error("two", extra={"context": {"error": "e", "line": "override"}})

        assert caplog.records[0].context == {"line": "override", "error": "e"}

    def test_trace(self, caplog):
        log = ContextAdapter(logging.getLogger("linehaul.test.adapter"), {})

        with caplog.at_level(TRACE):
            log.trace("fine detail")

        assert caplog.records[0].levelno == TRACE
        assert caplog.records[0].levelname == "TRACE"

    def test_trace_filtered_at_debug(self, caplog):
        log = ContextAdapter(logging.getLogger("linehaul.test.adapter"), {})

        with caplog.at_level(logging.DEBUG):
            log.trace("fine detail")

        assert caplog.records == []


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_json_style(self):
        stream = io.StringIO()
        configure_logging(LogStyle.JSON, level="info", stream=stream)

        logging.getLogger("linehaul.test.configure").info("hi")

        assert json.loads(stream.getvalue())["msg"] == "hi"

    def test_level_applied(self):
        stream = io.StringIO()
        configure_logging(LogStyle.READABLE, level="warning", stream=stream)

        logging.getLogger("linehaul.test.configure").info("hidden")
        assert stream.getvalue() == ""

    def test_overrides_applied(self):
        configure_logging(level="error,linehaul.test.noisy=trace", stream=io.StringIO())

        assert logging.getLogger().level == logging.ERROR
        assert logging.getLogger("linehaul.test.noisy").level == TRACE

    def test_reconfigure_replaces_handler(self):
        first, second = io.StringIO(), io.StringIO()
        configure_logging(level="info", stream=first)
        root = configure_logging(level="info", stream=second)

        logging.getLogger("linehaul.test.configure").info("once")

        assert first.getvalue() == ""
        assert "once" in second.getvalue()
        flagged = [h for h in root.handlers if getattr(h, "_linehaul_handler", False)]
        assert len(flagged) == 1

    def test_invalid_level(self):
        with pytest.raises(ValueError):
            configure_logging(level="chatty", stream=io.StringIO())
