# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""RFC 9457 problem objects for failures at the pipeline edges.

Only request validation, fetching and HTML normalization can fail; each of
those errors maps to one ``ProblemType``.  The CLI prints
``ProblemDetail.to_cli_text()``; ``to_dict()`` / ``to_json()`` give the wire
form for callers embedding the pipeline behind an API.

Messages may quote URLs, proxy settings or local file paths, so every
detail and string extension passes through ``sanitize_detail()``.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, NamedTuple

from .errors import FetchError, InvalidInputError, NormalizationError

_ERROR_BASE = "https://schemapilot.dev/errors"

MAX_DETAIL_LENGTH = 200


class ProblemType(StrEnum):
    INVALID_INPUT = "invalid-input"
    FETCH_FAILED = "fetch-failed"
    NORMALIZATION_FAILED = "normalization-failed"
    INTERNAL_ERROR = "internal-error"

    @property
    def uri(self) -> str:
        return f"{_ERROR_BASE}/{self.value}"


class _ProblemInfo(NamedTuple):
    status: int
    title: str
    hint: str


_PROBLEM_INFO: dict[ProblemType, _ProblemInfo] = {
    ProblemType.INVALID_INPUT: _ProblemInfo(
        422, "Invalid Input", "Provide an absolute http:// or https:// URL and valid options."
    ),
    ProblemType.FETCH_FAILED: _ProblemInfo(
        502, "Fetch Failed", "Check that the page is reachable, or pass its HTML with --html."
    ),
    ProblemType.NORMALIZATION_FAILED: _ProblemInfo(
        422, "Unparsable Content", "The HTML could not be parsed. Check the file encoding and content."
    ),
    ProblemType.INTERNAL_ERROR: _ProblemInfo(500, "Internal Error", ""),
}

# Looked up along the exception's MRO.
_ERROR_TYPES: dict[type[BaseException], ProblemType] = {
    InvalidInputError: ProblemType.INVALID_INPUT,
    FetchError: ProblemType.FETCH_FAILED,
    NormalizationError: ProblemType.NORMALIZATION_FAILED,
}

# Attributes our errors carry that are worth surfacing as extensions.
_CONTEXT_ATTRS = ("field", "url")


# --- Scrubbing ---

_SECRET_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"sk-[a-zA-Z0-9_-]{8,}"), "<redacted>"),
    (re.compile(r"Bearer\s+\S+"), "Bearer <redacted>"),
    (re.compile(r"Basic\s+[A-Za-z0-9+/=]{8,}"), "Basic <redacted>"),
    (re.compile(r"(?:API_KEY|SECRET|TOKEN|PASSWORD|CREDENTIAL)\s*[=:]\s*\S+", re.IGNORECASE), "<redacted>"),
    # userinfo in proxy / fetch URLs
    (re.compile(r"://[^@\s/]+@"), "://<redacted>@"),
    # signed CDN and API query parameters
    (re.compile(r"([?&](?:key|token|sig|signature|auth)=)[^&\s]+", re.IGNORECASE), r"\1<redacted>"),
)

_LOCAL_PATH_RE = re.compile(
    r"(/(?:Users|home|tmp|var|etc|opt|root|srv|usr|Library|private|mnt|media)/[\w./-]+"
    r"|[A-Z]:\\[\w.\\-]+)"
)


def sanitize_detail(text: str, max_len: int = MAX_DETAIL_LENGTH) -> str:
    """Redact credentials and local file paths, then cut to *max_len* (plus ``...``)."""
    for pattern, replacement in _SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    text = _LOCAL_PATH_RE.sub("<path>", text)
    return text if len(text) <= max_len else text[:max_len] + "..."


# --- Problem object ---

_RESERVED_MEMBERS = frozenset({"type", "title", "status", "detail", "instance"})


@dataclass(frozen=True, slots=True)
class ProblemDetail:
    """RFC 9457 Problem Detail object.  ``hint`` is CLI-only and never serialized."""

    type: str = "about:blank"
    title: str = ""
    status: int = 500
    detail: str = ""
    instance: str = ""
    extensions: dict[str, Any] = field(default_factory=dict)
    hint: str = field(default="", repr=False)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"type": self.type, "status": self.status}
        for key in ("title", "detail", "instance"):
            value = getattr(self, key)
            if value:
                d[key] = value
        d.update((k, v) for k, v in self.extensions.items() if k not in _RESERVED_MEMBERS)
        return d

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    def to_cli_text(self) -> str:
        """``Error: <detail>``, followed by ``Hint: <hint>`` when there is one."""
        text = f"Error: {self.detail}"
        return f"{text}\nHint: {self.hint}" if self.hint else text


# --- Factories ---


def problem_type_for(exc: BaseException) -> ProblemType:
    """``ProblemType`` of *exc*; subclasses inherit their parent's mapping."""
    for cls in type(exc).__mro__:
        if cls in _ERROR_TYPES:
            return _ERROR_TYPES[cls]
    return ProblemType.INTERNAL_ERROR


def _build(
    problem_type: ProblemType,
    detail: str,
    *,
    instance: str = "",
    extensions: dict[str, Any] | None = None,
) -> ProblemDetail:
    info = _PROBLEM_INFO[problem_type]
    return ProblemDetail(
        type=problem_type.uri,
        title=info.title,
        status=info.status,
        detail=sanitize_detail(detail),
        instance=instance,
        extensions={k: sanitize_detail(v) if isinstance(v, str) else v for k, v in (extensions or {}).items()},
        hint=info.hint,
    )


def from_exception(
    exc: BaseException,
    *,
    instance: str = "",
    extensions: dict[str, Any] | None = None,
) -> ProblemDetail:
    """Problem for *exc*.

    An error's ``field`` / ``url`` context is added unless *extensions*
    already names it.  Unknown exceptions become ``internal-error``.
    """
    ext: dict[str, Any] = {}
    for attr in _CONTEXT_ATTRS:
        value = getattr(exc, attr, None)
        if value:
            ext[attr] = value
    ext.update(extensions or {})
    return _build(problem_type_for(exc), str(exc) or type(exc).__name__, instance=instance, extensions=ext)


def from_validation(detail: str, *, field_name: str = "", instance: str = "") -> ProblemDetail:
    """422 problem for a request rejected before anything was fetched."""
    return _build(
        ProblemType.INVALID_INPUT,
        detail,
        instance=instance,
        extensions={"field": field_name} if field_name else None,
    )
