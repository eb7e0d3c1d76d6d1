# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Route stdlib logging through structlog.

Library modules only ever call ``logging.getLogger(__name__)``.  The CLI
calls ``configure()`` once; records then render either for a terminal
(ConsoleRenderer) or as one JSON object per line (JSONRenderer), always on
stderr so that stdout stays reserved for JSON-LD.

Values bound with ``structlog.contextvars`` (``generate()`` binds ``url``
and ``render_mode``) are merged into every record, including records from
plain stdlib loggers.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog
from structlog.typing import Processor


def _pre_chain(json_output: bool) -> list[Processor]:
    chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    # JSON consumers get structured tracebacks; the console keeps its pretty printer.
    if json_output:
        chain.append(structlog.processors.dict_tracebacks)
    chain.append(structlog.processors.UnicodeDecoder())
    return chain


def _renderer(json_output: bool, stream: TextIO) -> Processor:
    if json_output:
        return structlog.processors.JSONRenderer(ensure_ascii=False)
    return structlog.dev.ConsoleRenderer(colors=stream.isatty())


def _level(name: str) -> int:
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else logging.INFO


def configure(*, json_output: bool = False, level: str = "INFO", stream: TextIO | None = None) -> None:
    """Install the single root handler.

    Args:
        json_output: JSON lines instead of console output.
        level: root level name; unknown names fall back to INFO.
        stream: destination (default ``sys.stderr`` at call time).

    Calling it again replaces the previous handler.
    """
    stream = stream or sys.stderr
    pre_chain = _pre_chain(json_output)

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, _renderer(json_output, stream)],
            foreign_pre_chain=pre_chain,
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(_level(level))
