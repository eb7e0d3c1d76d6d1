# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for schemapilot.logging_config: structlog + stdlib bridge."""

from __future__ import annotations

import io
import json
import logging
import sys

import structlog

from schemapilot.logging_config import configure


class TestConsoleRenderer:
    """Terminal mode: ConsoleRenderer (human-readable)."""

    def test_configure_console_mode(self):
        configure(json_output=False)
        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.handlers[0].stream is sys.stderr

    def test_console_output_is_human_readable(self, capsys):
        configure(json_output=False)
        logging.getLogger("test.console").info("hello world")
        captured = capsys.readouterr()
        assert "hello world" in captured.err
        assert not captured.err.strip().startswith("{")
        assert captured.out == ""

    def test_console_includes_log_level(self, capsys):
        configure(json_output=False)
        logging.getLogger("test.level").warning("test warn")
        assert "warn" in capsys.readouterr().err.lower()


class TestJSONRenderer:
    """Machine mode: JSONRenderer, one object per line."""

    def test_json_output_is_valid_json(self, capsys):
        configure(json_output=True)
        logging.getLogger("schemapilot.pipeline").info("Generated %s for %s", "Product", "https://e.com")
        parsed = json.loads(capsys.readouterr().err.strip())
        assert parsed["event"] == "Generated Product for https://e.com"
        assert parsed["logger"] == "schemapilot.pipeline"
        assert parsed["level"] == "info"
        assert "timestamp" in parsed

    def test_structlog_logger_with_contextvars(self, capsys):
        configure(json_output=True)
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(url="https://e.com/p")
        try:
            structlog.get_logger("test.ctx").info("ctx test")
            parsed = json.loads(capsys.readouterr().err.strip())
            assert parsed["url"] == "https://e.com/p"
        finally:
            structlog.contextvars.clear_contextvars()

    def test_exception_rendered_as_structured_field(self, capsys):
        configure(json_output=True)
        try:
            raise ValueError("bad page")
        except ValueError:
            logging.getLogger("test.exc").exception("lint crashed")
        parsed = json.loads(capsys.readouterr().err.strip())
        assert parsed["event"] == "lint crashed"
        assert "exception" in parsed

    def test_non_ascii_kept_readable(self, capsys):
        configure(json_output=True)
        logging.getLogger("test.utf8").info("Café Menü")
        assert "Café Menü" in capsys.readouterr().err


class TestLogLevel:
    def test_default_level_is_info(self):
        configure()
        assert logging.getLogger().level == logging.INFO

    def test_custom_level(self):
        configure(level="warning")
        assert logging.getLogger().level == logging.WARNING

    def test_invalid_level_falls_back_to_info(self):
        configure(level="NONEXISTENT")
        assert logging.getLogger().level == logging.INFO

    def test_records_below_level_dropped(self, capsys):
        configure(json_output=True, level="WARNING")
        logging.getLogger("test.quiet").info("hidden")
        assert capsys.readouterr().err == ""


class TestStream:
    def test_custom_stream(self, capsys):
        buf = io.StringIO()
        configure(json_output=True, stream=buf)
        logging.getLogger("test.stream").warning("to buffer")
        assert json.loads(buf.getvalue())["event"] == "to buffer"
        assert capsys.readouterr().err == ""


class TestMultipleConfigure:
    def test_no_handler_stacking(self):
        configure(json_output=False)
        configure(json_output=True)
        configure(json_output=False)
        assert len(logging.getLogger().handlers) == 1
