# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Controlled vocabularies shared by the hint parser, classifier and policy.

Member order is significant: the hint parser scans each enum in declaration
order and the first member found in the hint wins.
"""

from __future__ import annotations

from enum import StrEnum


class SchemaType(StrEnum):
    """Primary schema.org types a hint may request."""

    PRODUCT = "Product"
    BLOG_POSTING = "BlogPosting"
    ARTICLE = "Article"
    ITEM_LIST = "ItemList"
    LOCAL_BUSINESS = "LocalBusiness"
    EVENT = "Event"
    RECIPE = "Recipe"
    COURSE = "Course"
    HOW_TO = "HowTo"
    SOFTWARE_APPLICATION = "SoftwareApplication"
    WEB_PAGE = "WebPage"


class Profile(StrEnum):
    BLOG = "blog"
    STORE = "store"
    LOCAL = "local"
    RECIPE = "recipe"
    EVENTS = "events"
    SAAS = "saas"
    AUTO = "auto"


class Strictness(StrEnum):
    LENIENT = "lenient"
    NORMAL = "normal"
    STRICT = "strict"


class RenderMode(StrEnum):
    AUTO = "auto"
    HTML = "html"
    HEADLESS = "headless"


class Feature(StrEnum):
    """Optional JSON-LD enrichments a classification can carry."""

    OFFERS = "offers"
    AGGREGATE_RATING = "aggregateRating"
    REVIEWS = "reviews"
    BREADCRUMBS = "breadcrumbs"
    FAQ = "faq"
    VIDEO = "video"
    SAME_AS = "sameAs"
    BRAND = "brand"
    AUTHOR_SAME_AS = "authorSameAs"
    ABOUT = "about"
    MENTIONS = "mentions"
    HOWTO_STEPS = "howtoSteps"


class PrioritySignal(StrEnum):
    BYLINE = "byline"
    PRICE = "price"
    RATING = "rating"
    SKU = "sku"
    MAP = "map"
    STEPS = "steps"
    DATES = "dates"


# Types that never count as the primary entity of a graph.
SUPPORTING_TYPES: frozenset[str] = frozenset({"Organization", "WebSite", "BreadcrumbList"})
