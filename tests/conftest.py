# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Shared test configuration and fixtures."""

try:
    import schemapilot  # noqa: F401
except ImportError:
    raise ImportError("schemapilot is not installed. Run: pip install -e '.[test]'") from None

import logging
from datetime import date

import pytest
import structlog


@pytest.fixture
def today() -> date:
    """Frozen date for output that falls back to the current date."""
    return date(2025, 3, 14)


@pytest.fixture(autouse=True)
def _reset_logging():
    """CLI tests call logging_config.configure(); undo it after every test."""
    root = logging.getLogger()
    old_handlers = root.handlers[:]
    old_level = root.level
    yield
    root.handlers = old_handlers
    root.setLevel(old_level)
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Tests never inherit SCHEMAPILOT_* settings from the developer shell."""
    for name in ("SCHEMAPILOT_LOG_LEVEL", "SCHEMAPILOT_LOG_JSON", "SCHEMAPILOT_RENDER_MODE", "SCHEMAPILOT_INDENT"):
        monkeypatch.delenv(name, raising=False)
