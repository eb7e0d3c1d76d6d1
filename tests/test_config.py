# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for schemapilot.config: SCHEMAPILOT_* environment settings."""

from __future__ import annotations

import logging

import pytest

from schemapilot.config import Settings, load_settings
from schemapilot.vocabulary import RenderMode


class TestDefaults:
    def test_empty_environment(self):
        assert load_settings({}) == Settings(log_level="WARNING", log_json=False, render_mode=None, indent=2)

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("SCHEMAPILOT_LOG_LEVEL", "debug")
        assert load_settings().log_level == "DEBUG"


class TestLogSettings:
    @pytest.mark.parametrize("value", ["1", "true", "YES", " True "])
    def test_json_truthy(self, value: str):
        assert load_settings({"SCHEMAPILOT_LOG_JSON": value}).log_json is True

    @pytest.mark.parametrize("value", ["0", "false", "on", ""])
    def test_json_falsy(self, value: str):
        assert load_settings({"SCHEMAPILOT_LOG_JSON": value}).log_json is False

    def test_unknown_level_kept_default(self, caplog):
        with caplog.at_level(logging.WARNING, logger="schemapilot.config"):
            settings = load_settings({"SCHEMAPILOT_LOG_LEVEL": "chatty"})
        assert settings.log_level == "WARNING"
        assert "SCHEMAPILOT_LOG_LEVEL" in caplog.text


class TestRenderMode:
    def test_valid(self):
        assert load_settings({"SCHEMAPILOT_RENDER_MODE": " HTML "}).render_mode is RenderMode.HTML

    def test_invalid_ignored(self, caplog):
        with caplog.at_level(logging.WARNING, logger="schemapilot.config"):
            settings = load_settings({"SCHEMAPILOT_RENDER_MODE": "browser"})
        assert settings.render_mode is None
        assert "SCHEMAPILOT_RENDER_MODE" in caplog.text


class TestIndent:
    @pytest.mark.parametrize("value,expected", [("4", 4), ("0", None), ("-1", None), ("wide", 2), ("", 2)])
    def test_values(self, value: str, expected: int | None):
        assert load_settings({"SCHEMAPILOT_INDENT": value}).indent == expected

    def test_malformed_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="schemapilot.config"):
            assert load_settings({"SCHEMAPILOT_INDENT": "wide"}).indent == 2
        assert "SCHEMAPILOT_INDENT" in caplog.text

    def test_valid_value_does_not_warn(self, caplog):
        with caplog.at_level(logging.WARNING, logger="schemapilot.config"):
            load_settings({"SCHEMAPILOT_INDENT": "4"})
        assert caplog.records == []

    def test_settings_frozen(self):
        with pytest.raises(AttributeError):
            Settings().indent = 4  # type: ignore[misc]
