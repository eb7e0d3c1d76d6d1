# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""First-match cascade page classifier.

Primary types are mutually exclusive and evaluated in a fixed order; the
first rule whose predicate holds wins.  A hint with a preferred type bypasses
the cascade entirely.  Feature detection is independent of the winning branch
and always runs over the full DOM signal bag.

Precedence:
  1. hint preferred type            (confidence floor 0.7)
  2. _TYPE_RULES cascade            (per-rule confidence)
  3. WebPage default                (0.5)
Existing JSON-LD with a string @type lifts confidence to at least 0.8 after
the branch is chosen.  It corroborates, it never overrides.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from . import NormalizedContent
from .hint_parser import HintDirective
from .vocabulary import Feature

logger = logging.getLogger(__name__)

DEFAULT_TYPE = "WebPage"
DEFAULT_CONFIDENCE = 0.5
HINT_CONFIDENCE_FLOOR = 0.7
EXISTING_JSONLD_CONFIDENCE_FLOOR = 0.8

# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Classification:
    """Result of page classification."""

    primary_type: str
    confidence: float  # 0.0–1.0
    features: tuple[str, ...] = ()
    signals: tuple[str, ...] = ()  # detection order, audit only
    subtype: str | None = None


@dataclass(frozen=True, slots=True)
class TypeRule:
    """One step of the primary-type cascade."""

    schema_type: str
    confidence: float
    signal: str
    check: Callable[[NormalizedContent], bool]
    # Extra explanations appended when the rule wins: (signal text, predicate)
    details: tuple[tuple[str, Callable[[NormalizedContent], bool]], ...] = ()


@dataclass(frozen=True, slots=True)
class SubtypeRule:
    subtype: str
    pattern: re.Pattern[str]
    signal: str | None = None
    requires: Callable[[NormalizedContent], bool] | None = None
    # Alternative cue matched against the lower-cased page URL.
    url_pattern: re.Pattern[str] | None = None

    def matches(self, content: NormalizedContent) -> bool:
        cued = bool(self.pattern.search(_text(content))) or bool(
            self.url_pattern and self.url_pattern.search(content.url.lower())
        )
        return cued and (self.requires is None or self.requires(content))


# ---------------------------------------------------------------------------
# Keyword patterns (matched against lower-cased text / URL)
# ---------------------------------------------------------------------------

_EVENT_KW = re.compile(r"ticket|register|venue|location")
_RECIPE_KW = re.compile(r"ingredients|cooking time|prep time|servings")
_HOWTO_KW = re.compile(r"how to|tutorial|guide|instructions")
_ITEMLIST_KW = re.compile(r"top \d+|best \d+|list of|\d+ best")
_BLOG_URL_KW = re.compile(r"blog|post|article")
_BLOG_TEXT_KW = re.compile(r"blog|post")


def _text(content: NormalizedContent) -> str:
    return content.content.lower()


def _is_product(c: NormalizedContent) -> bool:
    s = c.dom_signals
    return s.has_price and s.has_currency and (s.has_add_to_cart or s.has_sku)


def _is_local_business(c: NormalizedContent) -> bool:
    s = c.dom_signals
    return s.has_nap and (s.has_hours or s.has_map)


def _is_event(c: NormalizedContent) -> bool:
    return c.dom_signals.has_event and bool(_EVENT_KW.search(_text(c)))


def _is_recipe(c: NormalizedContent) -> bool:
    return c.dom_signals.has_recipe and bool(_RECIPE_KW.search(_text(c)))


def _is_howto(c: NormalizedContent) -> bool:
    return c.dom_signals.has_steps and bool(_HOWTO_KW.search(_text(c)))


def _is_article(c: NormalizedContent) -> bool:
    return c.dom_signals.has_byline and c.dom_signals.has_publish_date


def _is_blog_post(c: NormalizedContent) -> bool:
    return bool(_BLOG_URL_KW.search(c.url.lower()) or _BLOG_TEXT_KW.search(_text(c)))


def _is_blog_article(c: NormalizedContent) -> bool:
    return _is_article(c) and _is_blog_post(c)


def _is_item_list(c: NormalizedContent) -> bool:
    return c.dom_signals.has_item_list and bool(_ITEMLIST_KW.search(_text(c)))


# ---------------------------------------------------------------------------
# Rule registry; order is precedence
# ---------------------------------------------------------------------------

_TYPE_RULES: list[TypeRule] = [
    TypeRule(
        "Product",
        0.9,
        "Price + currency detected",
        _is_product,
        details=(
            ("Add to cart button found", lambda c: c.dom_signals.has_add_to_cart),
            ("SKU/product ID found", lambda c: c.dom_signals.has_sku),
        ),
    ),
    TypeRule(
        "LocalBusiness",
        0.85,
        "NAP (Name, Address, Phone) detected",
        _is_local_business,
        details=(
            ("Business hours found", lambda c: c.dom_signals.has_hours),
            ("Map/location found", lambda c: c.dom_signals.has_map),
        ),
    ),
    TypeRule("Event", 0.8, "Event date/time detected", _is_event),
    TypeRule("Recipe", 0.85, "Ingredients and cooking steps found", _is_recipe),
    TypeRule("HowTo", 0.8, "Step-by-step instructions detected", _is_howto),
    # Article splits on blog cues; BlogPosting is listed first so it wins the split.
    TypeRule("BlogPosting", 0.8, "Blog post structure detected", _is_blog_article),
    TypeRule("Article", 0.75, "Article structure with byline/date", _is_article),
    TypeRule("ItemList", 0.8, "Numbered list with internal links", _is_item_list),
]

_LOCAL_BUSINESS_SUBTYPES: list[SubtypeRule] = [
    SubtypeRule("Restaurant", re.compile(r"restaurant|cafe|diner|bistro|eatery")),
    SubtypeRule("Dentist", re.compile(r"dentist|dental|orthodontist")),
    SubtypeRule("MedicalOrganization", re.compile(r"doctor|physician|medical|clinic")),
    SubtypeRule("LodgingBusiness", re.compile(r"hotel|motel|inn|lodge")),
    SubtypeRule("Store", re.compile(r"store|shop|retail|boutique")),
    SubtypeRule("ExerciseGym", re.compile(r"gym|fitness|workout")),
    SubtypeRule("BeautySalon", re.compile(r"salon|spa|beauty")),
]

_ARTICLE_SUBTYPES: list[SubtypeRule] = [
    SubtypeRule(
        "NewsArticle",
        re.compile(r"news|breaking|reuters|ap news|cnn|bbc"),
        signal="News article indicators found",
        url_pattern=re.compile(r"news"),
    ),
    SubtypeRule(
        "TechArticle",
        re.compile(r"documentation|api|technical|developer|programming|code"),
        signal="Technical documentation detected",
    ),
    SubtypeRule(
        "Review",
        re.compile(r"review of|rating|stars|pros and cons"),
        signal="Review with rating detected",
        requires=lambda c: c.dom_signals.has_rating,
    ),
]

_SUBTYPE_RULES: dict[str, list[SubtypeRule]] = {
    "LocalBusiness": _LOCAL_BUSINESS_SUBTYPES,
    "Article": _ARTICLE_SUBTYPES,
    "BlogPosting": _ARTICLE_SUBTYPES,
}

# Feature -> DOM signal predicate, evaluated in this order.
_FEATURE_RULES: list[tuple[str, Callable[[NormalizedContent], bool]]] = [
    (Feature.OFFERS, lambda c: c.dom_signals.has_price and c.dom_signals.has_currency),
    (Feature.AGGREGATE_RATING, lambda c: c.dom_signals.has_rating),
    (Feature.REVIEWS, lambda c: c.dom_signals.has_reviews),
    (Feature.BREADCRUMBS, lambda c: c.dom_signals.has_breadcrumbs),
    (Feature.FAQ, lambda c: c.dom_signals.has_faq),
    (Feature.VIDEO, lambda c: c.dom_signals.has_video),
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def existing_jsonld_type(content: NormalizedContent) -> str | None:
    """String @type of the page's first JSON-LD block (first @graph node if wrapped)."""
    if not content.existing_jsonld:
        return None
    block: Any = content.existing_jsonld[0]
    if isinstance(block, dict) and "@type" not in block and isinstance(block.get("@graph"), list):
        block = block["@graph"][0] if block["@graph"] else None
    if not isinstance(block, dict):
        return None
    t = block.get("@type")
    return t if isinstance(t, str) and t else None


def _detect_subtype(primary_type: str, content: NormalizedContent) -> SubtypeRule | None:
    return next((rule for rule in _SUBTYPE_RULES.get(primary_type, ()) if rule.matches(content)), None)


def detect_features(content: NormalizedContent) -> tuple[str, ...]:
    return tuple(str(name) for name, check in _FEATURE_RULES if check(content))


# ---------------------------------------------------------------------------
# Core classifier
# ---------------------------------------------------------------------------


def classify_page(content: NormalizedContent, hint: HintDirective | None = None) -> Classification:
    """Classify normalized page content into a primary schema.org type.

    Args:
        content: normalized page (DOM signals are taken as ground truth)
        hint: parsed hint directive; ``preferred_type`` overrides detection

    Returns:
        Classification with primary type, optional subtype, features and the
        ordered explanation signals.
    """
    hint = hint or HintDirective()
    signals: list[str] = []
    primary_type = DEFAULT_TYPE
    confidence = DEFAULT_CONFIDENCE
    subtype: str | None = None

    existing_type = existing_jsonld_type(content)
    if existing_type:
        signals.append(f"Existing JSON-LD: {existing_type}")

    if hint.preferred_type:
        primary_type = str(hint.preferred_type)
        confidence = max(confidence, HINT_CONFIDENCE_FLOOR)
        signals.append(f"Hint: {primary_type}")
    else:
        rule = next((r for r in _TYPE_RULES if r.check(content)), None)
        if rule is not None:
            primary_type = rule.schema_type
            confidence = rule.confidence
            signals.append(rule.signal)
            signals.extend(text for text, check in rule.details if check(content))

            sub = _detect_subtype(primary_type, content)
            if sub is not None:
                subtype = sub.subtype
                if sub.signal:
                    signals.append(sub.signal)

    if existing_type:
        confidence = max(confidence, EXISTING_JSONLD_CONFIDENCE_FLOOR)

    features = detect_features(content)
    logger.debug(
        "Classified %s as %s (subtype=%s, confidence=%.2f, features=%s)",
        content.url,
        primary_type,
        subtype,
        confidence,
        ",".join(features) or "-",
    )
    return Classification(
        primary_type=primary_type,
        confidence=confidence,
        features=features,
        signals=tuple(signals),
        subtype=subtype,
    )
