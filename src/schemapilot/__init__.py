# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""SchemaPilot: rules-based schema.org JSON-LD generation for web pages.

Pipeline: hint -> normalized content -> classification -> policy -> JSON-LD -> lint.

The records below are the input contract every stage consumes.  They are
produced once per request (by ``schemapilot.normalizer`` or by any other
fetcher honouring the same shape) and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any


@dataclass(frozen=True, slots=True)
class DomSignals:
    """Boolean bag of page-level detections.  Ground truth for all later stages."""

    has_price: bool = False
    has_currency: bool = False
    has_add_to_cart: bool = False
    has_sku: bool = False
    has_rating: bool = False
    has_reviews: bool = False
    has_nap: bool = False  # name / address / phone
    has_hours: bool = False
    has_map: bool = False
    has_event: bool = False
    has_recipe: bool = False
    has_steps: bool = False
    has_byline: bool = False
    has_publish_date: bool = False
    has_breadcrumbs: bool = False
    has_faq: bool = False
    has_video: bool = False
    has_item_list: bool = False

    def active(self) -> list[str]:
        """Names of the signals that fired, in declaration order."""
        return [f.name for f in fields(self) if getattr(self, f.name)]


@dataclass(frozen=True, slots=True)
class PageMeta:
    """OpenGraph / Twitter meta tags and the declared document language."""

    og_title: str | None = None
    og_description: str | None = None
    og_image: str | None = None
    twitter_title: str | None = None
    twitter_description: str | None = None
    language: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class NormalizedContent:
    """A fetched page reduced to what classification and assembly need."""

    url: str
    title: str = ""
    canonical_url: str | None = None
    description: str | None = None
    content: str = ""  # visible text, newline separated
    html: str = ""
    meta: PageMeta = field(default_factory=PageMeta)
    existing_jsonld: list[dict[str, Any]] = field(default_factory=list)
    existing_microdata: list[dict[str, Any]] = field(default_factory=list)
    dom_signals: DomSignals = field(default_factory=DomSignals)

    @property
    def base_url(self) -> str:
        return self.canonical_url or self.url
