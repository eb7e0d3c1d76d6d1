# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Policy engine: quality gates, hint feature merge, strictness, conflicts.

Steps run in a fixed order and each consumes the previous step's output:

  1. quality gates: may downgrade to WebPage and cap confidence
  2-3. merge_features(): suppress, then enrich (enrich wins on overlap)
  4. strictness filter: only for ``strict`` hints
  5. conflict resolution: demote Product to ``mentions`` on mixed signals
  6. classifier signals appended to explanations

Confidence only ever goes down here.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from . import NormalizedContent
from .hint_parser import HintDirective
from .page_classifier import Classification
from .vocabulary import Feature, Strictness

logger = logging.getLogger(__name__)

DOWNGRADE_TYPE = "WebPage"
DOWNGRADE_CONFIDENCE_CAP = 0.6

_ARTICLE_TYPES = ("Article", "BlogPosting")


@dataclass(frozen=True, slots=True)
class PolicyResult:
    primary_type: str
    confidence: float
    features: tuple[str, ...] = ()
    explanations: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    mentions: tuple[str, ...] = ()
    subtype: str | None = None

    @property
    def entity_type(self) -> str:
        """The @type used for the primary graph node."""
        return self.subtype or self.primary_type


@dataclass(frozen=True, slots=True)
class _GateOutcome:
    warnings: tuple[str, ...] = ()
    downgrade_reason: str | None = None


# ---------------------------------------------------------------------------
# 1. Quality gates
# ---------------------------------------------------------------------------


def _quality_gates(classification: Classification, content: NormalizedContent) -> _GateOutcome:
    s = content.dom_signals
    primary = classification.primary_type
    warnings: list[str] = []

    if primary == "Product":
        if not s.has_price:
            return _GateOutcome(("Product requires visible price",), "No price found")
        if not s.has_currency:
            warnings.append("Price found but currency not clearly specified")

    if primary == "LocalBusiness" and not s.has_nap:
        return _GateOutcome(
            ("LocalBusiness requires complete contact information",),
            "Incomplete NAP (Name, Address, Phone)",
        )

    if primary in _ARTICLE_TYPES:
        if not s.has_byline:
            warnings.append("Article missing author byline")
        if not s.has_publish_date:
            warnings.append("Article missing publication date")

    if not content.meta.og_image:
        warnings.append("No featured image found - may affect rich results")

    return _GateOutcome(tuple(warnings))


# ---------------------------------------------------------------------------
# 2-3. Feature merge
# ---------------------------------------------------------------------------


def merge_features(
    features: Iterable[str],
    enrich: Iterable[str] = (),
    suppress: Iterable[str] = (),
) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Apply hint suppression, then enrichment.

    Suppression filters the detected features first; enrichment then appends
    every requested feature that is not already present.  A feature named in
    both ``enrich`` and ``suppress`` therefore ends up present: enrich wins.

    Returns:
        (merged features, features appended by enrichment)
    """
    suppressed = {str(f) for f in suppress}
    merged = [str(f) for f in features if str(f) not in suppressed]
    added: list[str] = []
    for f in map(str, enrich):
        if f not in merged:
            merged.append(f)
            added.append(f)
    return tuple(merged), tuple(added)


# ---------------------------------------------------------------------------
# 4. Strictness
# ---------------------------------------------------------------------------

_STRICT_CHECKS: dict[str, tuple[Callable[[NormalizedContent], bool], str]] = {
    Feature.OFFERS: (
        lambda c: c.dom_signals.has_price and c.dom_signals.has_currency,
        "Offers feature requires visible price and currency",
    ),
    Feature.AGGREGATE_RATING: (
        lambda c: c.dom_signals.has_rating,
        "AggregateRating feature requires visible rating",
    ),
    Feature.REVIEWS: (
        lambda c: c.dom_signals.has_reviews,
        "Reviews feature requires visible review content",
    ),
}


def _strict_filter(features: tuple[str, ...], content: NormalizedContent) -> tuple[tuple[str, ...], list[str]]:
    kept: list[str] = []
    warnings: list[str] = []
    for feature in features:
        check = _STRICT_CHECKS.get(feature)
        if check is None or check[0](content):
            kept.append(feature)
        else:
            warnings.append(check[1])
    return tuple(kept), warnings


# ---------------------------------------------------------------------------
# 5. Conflicts
# ---------------------------------------------------------------------------


def _conflicting_types(signals: tuple[str, ...]) -> list[str]:
    """Coarse text scan: Product and Article phrases both present -> demote Product."""
    if any("Product" in s for s in signals) and any("Article" in s for s in signals):
        return ["Product"]
    return []


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def apply_policy(
    classification: Classification,
    content: NormalizedContent,
    hint: HintDirective | None = None,
) -> PolicyResult:
    """Turn a raw classification into the final, policy-checked decision."""
    hint = hint or HintDirective()
    explanations: list[str] = []
    warnings: list[str] = []
    mentions: list[str] = []
    primary_type = classification.primary_type
    subtype = classification.subtype
    confidence = classification.confidence

    gate = _quality_gates(classification, content)
    warnings.extend(gate.warnings)
    if gate.downgrade_reason is not None:
        primary_type = DOWNGRADE_TYPE
        subtype = None
        confidence = min(confidence, DOWNGRADE_CONFIDENCE_CAP)
        explanations.append(f"Downgraded from {classification.primary_type} to {primary_type}: {gate.downgrade_reason}")
        logger.debug("Downgraded %s -> %s: %s", classification.primary_type, primary_type, gate.downgrade_reason)

    if hint.suppress:
        explanations.append(f"Suppressed features: {', '.join(hint.suppress)}")
    features, added = merge_features(classification.features, hint.enrich, hint.suppress)
    explanations.extend(f"Added feature: {f}" for f in added)

    if hint.strictness == Strictness.STRICT:
        features, strict_warnings = _strict_filter(features, content)
        warnings.extend(strict_warnings)

    if len(classification.signals) > 1:
        conflicting = _conflicting_types(classification.signals)
        if conflicting:
            mentions.extend(conflicting)
            explanations.append(f"Conflicting types moved to mentions: {', '.join(conflicting)}")

    explanations.extend(classification.signals)

    return PolicyResult(
        primary_type=primary_type,
        confidence=confidence,
        features=features,
        explanations=tuple(explanations),
        warnings=tuple(warnings),
        mentions=tuple(mentions),
        subtype=subtype,
    )
