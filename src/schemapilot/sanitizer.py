# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Sanitization of page-derived strings before they reach JSON-LD output.

Titles, descriptions and meta values are copied verbatim into the assembled
graph, so hidden Unicode and terminal escapes are stripped here, once, at
normalization time.

1. sanitize_text(): short single-line fields (titles, meta values)
2. sanitize_content_block(): page text; newlines preserved for line-based extractors
"""

from __future__ import annotations

import re

# Zero-width chars, bidi overrides, interlinear annotations, C0/C1 controls
# (\t \n \r are handled separately).
_CONTROL_CHAR_RE = re.compile(
    r"[\u200B-\u200F\u202A-\u202E\u2060-\u2069\uFEFF\uFFF9-\uFFFB"
    r"\u0000-\u0008\u000B\u000C\u000E-\u001F\u007F-\u009F]"
)

_ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;]*[a-zA-Z]")

_INLINE_SPACE_RE = re.compile(r"[ \t\u00A0]+")
_BLANK_LINES_RE = re.compile(r"\n{3,}")


def _strip_invisible(text: str) -> str:
    return _CONTROL_CHAR_RE.sub("", _ANSI_ESCAPE_RE.sub("", text))


def sanitize_text(text: str | None, max_len: int = 512) -> str | None:
    """Sanitize a short text field.

    - Removes ANSI escapes and Unicode control characters
    - Collapses newlines and runs of whitespace into single spaces
    - Truncates to max_len
    """
    if not text:
        return text
    return " ".join(_strip_invisible(text).split())[:max_len]


def sanitize_content_block(text: str, max_len: int = 500_000) -> str:
    """Sanitize page text, keeping its line structure.

    Carriage returns are normalized to ``\\n``; inline whitespace is collapsed
    per line and runs of blank lines are squeezed to one.
    """
    if not text:
        return text

    lines = _strip_invisible(text.replace("\r\n", "\n").replace("\r", "\n")).split("\n")
    text = "\n".join(_INLINE_SPACE_RE.sub(" ", line).strip() for line in lines)
    return _BLANK_LINES_RE.sub("\n\n", text).strip()[:max_len]
