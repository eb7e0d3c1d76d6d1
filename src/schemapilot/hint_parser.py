# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Free-text hint -> HintDirective.

Every field is detected independently by substring or regex matching over a
lower-cased copy of the hint.  Ties go to the first vocabulary member found,
in vocabulary order (not the order words appear in the hint).  Nothing here
raises: an unmatched field simply stays unset.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, TypeVar

from .vocabulary import Feature, PrioritySignal, Profile, RenderMode, SchemaType, Strictness

_E = TypeVar("_E", bound=StrEnum)

_LANG_CODES = "en|es|fr|de|it|pt|sv|da|no|fi|nl|pl|ru|ja|ko|zh|ar"
_LANG_RE = re.compile(rf"\b({_LANG_CODES})\b")
# Regional tags only for known language codes, so "re-do" or "co-op" never match.
_BCP47_RE = re.compile(rf"\b({_LANG_CODES})-([a-z]{{2}})\b")
_MAX_ITEMS_RE = re.compile(r"cap\s+(\d+)|max\s+(\d+)|limit\s+(\d+)")

_ENRICH_VERBS = ("include", "add", "enrich")
_SUPPRESS_VERBS = ("ignore", "suppress", "no")


@dataclass(frozen=True, slots=True, kw_only=True)
class HintDirective:
    """Structured steering parsed from one hint string."""

    preferred_type: SchemaType | None = None
    profile: Profile | None = None
    strictness: Strictness | None = None
    render_mode: RenderMode | None = None
    language: str | None = None
    max_items: int | None = None
    enrich: tuple[Feature, ...] = ()
    suppress: tuple[Feature, ...] = ()
    priority_signals: tuple[PrioritySignal, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        """camelCase dict for API responses; unset fields omitted."""
        d: dict[str, Any] = {}
        scalars = (
            ("preferredType", self.preferred_type),
            ("profile", self.profile),
            ("strictness", self.strictness),
            ("renderMode", self.render_mode),
            ("language", self.language),
            ("maxItems", self.max_items),
        )
        for key, value in scalars:
            if value is not None:
                d[key] = str(value) if isinstance(value, StrEnum) else value
        if self.enrich:
            d["enrich"] = [str(f) for f in self.enrich]
        if self.suppress:
            d["suppress"] = [str(f) for f in self.suppress]
        if self.priority_signals:
            d["prioritySignals"] = [str(s) for s in self.priority_signals]
        return d


def _first_member(text: str, enum_cls: type[_E]) -> _E | None:
    return next((m for m in enum_cls if m.value.lower() in text), None)


def _parse_language(text: str) -> str | None:
    language = None
    m = _LANG_RE.search(text)
    if m:
        language = m.group(1)
    # Checked second so a regional tag overrides a bare code.
    m = _BCP47_RE.search(text)
    if m:
        language = f"{m.group(1)}-{m.group(2).upper()}"
    return language


def _parse_max_items(text: str) -> int | None:
    m = _MAX_ITEMS_RE.search(text)
    if not m:
        return None
    value = next(g for g in m.groups() if g is not None)
    return int(value) or None


def _features_with_verbs(text: str, verbs: tuple[str, ...]) -> tuple[Feature, ...]:
    return tuple(f for f in Feature if any(f"{verb} {f.value.lower()}" in text for verb in verbs))


def parse_hint(hint_text: str) -> HintDirective:
    """Parse a free-text hint such as ``"strict product, no reviews, cap 5"``."""
    if not hint_text or not hint_text.strip():
        return HintDirective()

    text = hint_text.lower()
    return HintDirective(
        preferred_type=_first_member(text, SchemaType),
        profile=_first_member(text, Profile),
        strictness=_first_member(text, Strictness),
        render_mode=_first_member(text, RenderMode),
        language=_parse_language(text),
        max_items=_parse_max_items(text),
        enrich=_features_with_verbs(text, _ENRICH_VERBS),
        suppress=_features_with_verbs(text, _SUPPRESS_VERBS),
        priority_signals=tuple(s for s in PrioritySignal if s.value in text),
    )
