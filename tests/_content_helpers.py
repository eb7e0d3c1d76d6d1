# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Builders for NormalizedContent test inputs.

Underscore prefix prevents pytest collection.
"""

from __future__ import annotations

from typing import Any

from schemapilot import DomSignals, NormalizedContent, PageMeta


def signals(*names: str) -> DomSignals:
    """DomSignals with the given ``has_*`` flags set (prefix optional)."""
    flags = {n if n.startswith("has_") else f"has_{n}": True for n in names}
    return DomSignals(**flags)


def make_content(
    *,
    url: str = "https://www.example.com/page",
    title: str = "Example Page",
    content: str = "",
    signal_names: tuple[str, ...] = (),
    og_image: str | None = "https://www.example.com/img.jpg",
    **kwargs: Any,
) -> NormalizedContent:
    meta = kwargs.pop("meta", None) or PageMeta(og_image=og_image)
    return NormalizedContent(
        url=url,
        title=title,
        content=content,
        meta=meta,
        dom_signals=signals(*signal_names),
        **kwargs,
    )


def product_content(**kwargs: Any) -> NormalizedContent:
    defaults: dict[str, Any] = {
        "url": "https://shop.example.com/p/trail-runner",
        "title": "Trail Runner Shoe",
        "content": "Trail Runner Shoe\nPrice: $129.99\nAdd to cart\nRated 4.6 out of 5 from 212 reviews",
        "signal_names": ("price", "currency", "add_to_cart", "rating", "reviews"),
    }
    defaults.update(kwargs)
    return make_content(**defaults)


def article_content(**kwargs: Any) -> NormalizedContent:
    defaults: dict[str, Any] = {
        "url": "https://www.example.com/2025/03/story",
        "title": "City council approves budget",
        "content": "By Jane Smith\nPublished 2025-03-01\nThe council voted on Tuesday.",
        "signal_names": ("byline", "publish_date"),
    }
    defaults.update(kwargs)
    return make_content(**defaults)
