# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Environment-driven CLI settings.

Only the command line reads configuration.  The pipeline itself takes
everything as arguments, so library callers never depend on the process
environment.

Variables:
    SCHEMAPILOT_LOG_LEVEL    root log level (default WARNING)
    SCHEMAPILOT_LOG_JSON     1/true/yes for JSON log lines
    SCHEMAPILOT_RENDER_MODE  default render mode: auto, html, headless
    SCHEMAPILOT_INDENT       JSON output indent, 0 for compact (default 2)
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from .vocabulary import RenderMode

logger = logging.getLogger(__name__)

_TRUTHY = ("1", "true", "yes")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True, slots=True)
class Settings:
    log_level: str = "WARNING"
    log_json: bool = False
    render_mode: RenderMode | None = None
    indent: int | None = 2


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build ``Settings`` from *environ* (defaults to ``os.environ``).

    Malformed values are ignored with a warning and the default is kept.
    """
    env = os.environ if environ is None else environ
    defaults = Settings()

    log_level = defaults.log_level
    env_level = env.get("SCHEMAPILOT_LOG_LEVEL", "").strip().upper()
    if env_level in _LOG_LEVELS:
        log_level = env_level
    elif env_level:
        logger.warning("Ignoring unknown SCHEMAPILOT_LOG_LEVEL=%r", env_level)

    log_json = env.get("SCHEMAPILOT_LOG_JSON", "").strip().lower() in _TRUTHY

    render_mode = defaults.render_mode
    env_mode = env.get("SCHEMAPILOT_RENDER_MODE", "").strip().lower()
    if env_mode:
        try:
            render_mode = RenderMode(env_mode)
        except ValueError:
            logger.warning("Ignoring unknown SCHEMAPILOT_RENDER_MODE=%r", env_mode)

    indent = defaults.indent
    env_indent = env.get("SCHEMAPILOT_INDENT", "").strip()
    if env_indent:
        try:
            value = int(env_indent)
        except ValueError:
            logger.warning("Ignoring non-integer SCHEMAPILOT_INDENT=%r", env_indent)
        else:
            indent = value if value > 0 else None

    return Settings(log_level=log_level, log_json=log_json, render_mode=render_mode, indent=indent)
