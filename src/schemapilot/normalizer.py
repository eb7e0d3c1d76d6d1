# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Raw HTML -> NormalizedContent.

Pure function over an already fetched document: no network, no browser.
Structured data is pulled from the raw markup before anything is stripped,
then the document is parsed with lxml's recovering parser for meta tags and
visible text.  DOM signals are keyword heuristics over the lower-cased text
and HTML; they are computed once here and treated as ground truth by every
later stage.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any
from urllib.parse import urljoin

import lxml.html
from lxml import etree

from . import DomSignals, NormalizedContent, PageMeta
from .errors import NormalizationError
from .sanitizer import sanitize_content_block, sanitize_text

logger = logging.getLogger(__name__)

_JSON_LD_RE = re.compile(
    r'<script[^>]*type\s*=\s*["\']application/ld\+json["\'][^>]*>(.*?)</script>',
    re.DOTALL | re.IGNORECASE,
)

# Elements whose text is never visible.
_INVISIBLE_TAGS = ("script", "style", "noscript", "template", "svg", "head")

# Elements that start a new line in the extracted text.
_BLOCK_TAGS = frozenset(
    {
        "address", "article", "aside", "blockquote", "dd", "details", "div", "dl", "dt",
        "fieldset", "figcaption", "figure", "footer", "form", "h1", "h2", "h3", "h4", "h5",
        "h6", "header", "hr", "li", "main", "nav", "ol", "p", "pre", "section", "summary",
        "table", "tr", "ul",
    }
)  # fmt: skip


# ---------------------------------------------------------------------------
# DOM signal heuristics
# ---------------------------------------------------------------------------

# Text patterns run on lower-cased text, *_HTML_RE on lower-cased markup.
# _PHONE_RE, _NUMBERED_RE and _YEAR_RE run on the original-case text.
_PRICE_RE = re.compile(r"\$\d+|€\d+|£\d+|price|cost")
_PRICE_HTML_RE = re.compile(r"price|cost")
_CURRENCY_RE = re.compile(r"\$|€|£|usd|eur|gbp|currency")
_ADD_TO_CART_RE = re.compile(r"add.to.cart|buy.now|purchase|checkout")
_SKU_RE = re.compile(r"sku|product.id|item.number")
_RATING_RE = re.compile(r"rating|stars|score|\d+/\d+|\d+\.\d+.out.of")
_REVIEWS_RE = re.compile(r"review|comment|feedback|testimonial")
_NAP_RE = re.compile(r"address|phone|contact")
_PHONE_RE = re.compile(r"\d{3}[-.\s]?\d{3}[-.\s]?\d{4}")
_HOURS_RE = re.compile(r"hours|open|closed|monday|tuesday|wednesday|thursday|friday|saturday|sunday")
_MAP_RE = re.compile(r"map|location|directions|latitude|longitude")
_MAP_HTML_RE = re.compile(r"<iframe[^>]*maps")
_EVENT_RE = re.compile(r"event|date|time|venue|ticket|register")
_RECIPE_RE = re.compile(r"ingredients|recipe|cooking|baking|preparation")
_STEPS_RE = re.compile(r"step|instruction|how.to|tutorial")
_NUMBERED_RE = re.compile(r"\d+\.")
_BYLINE_RE = re.compile(r"author|by\s+\w+|written.by")
_PUBLISHED_RE = re.compile(r"published|posted|date|created")
_YEAR_RE = re.compile(r"\d{4}")
_BREADCRUMB_HTML_RE = re.compile(r"<nav[^>]*breadcrumb|<ol[^>]*breadcrumb|home\s*>\s*\w+\s*>\s*\w+")
_FAQ_RE = re.compile(r"faq|frequently.asked|question|answer")
_VIDEO_HTML_RE = re.compile(r"<video|<iframe[^>]*youtube|<iframe[^>]*vimeo")
_ITEM_LIST_RE = re.compile(r"top\s+\d+|best\s+\d+|list.of|\d+\.\s+\w+")
_SUBHEADING_HTML_RE = re.compile(r"h[2-6]")


def detect_dom_signals(html: str, content: str) -> DomSignals:
    """Keyword heuristics over page text and markup.

    Exposed separately so alternative fetchers can produce the same signal
    bag for content they normalized themselves.
    """
    low_html = html.lower()
    low = content.lower()
    return DomSignals(
        has_price=bool(_PRICE_RE.search(low) or _PRICE_HTML_RE.search(low_html)),
        has_currency=bool(_CURRENCY_RE.search(low)),
        has_add_to_cart=bool(_ADD_TO_CART_RE.search(low)),
        has_sku=bool(_SKU_RE.search(low)),
        has_rating=bool(_RATING_RE.search(low)),
        has_reviews=bool(_REVIEWS_RE.search(low)),
        has_nap=bool(_NAP_RE.search(low) and _PHONE_RE.search(content)),
        has_hours=bool(_HOURS_RE.search(low)),
        has_map=bool(_MAP_RE.search(low) or _MAP_HTML_RE.search(low_html)),
        has_event=bool(_EVENT_RE.search(low)),
        has_recipe=bool(_RECIPE_RE.search(low)),
        has_steps=bool(_STEPS_RE.search(low) and _NUMBERED_RE.search(content)),
        has_byline=bool(_BYLINE_RE.search(low)),
        has_publish_date=bool(_PUBLISHED_RE.search(low) and _YEAR_RE.search(content)),
        has_breadcrumbs=bool(_BREADCRUMB_HTML_RE.search(low_html)),
        has_faq=bool(_FAQ_RE.search(low)),
        has_video=bool(_VIDEO_HTML_RE.search(low_html)),
        has_item_list=bool(_ITEM_LIST_RE.search(low) and _SUBHEADING_HTML_RE.search(low_html)),
    )


# ---------------------------------------------------------------------------
# Structured data
# ---------------------------------------------------------------------------


def extract_json_ld(html: str) -> list[dict[str, Any]]:
    """JSON-LD blocks in document order.  Top-level arrays are flattened; invalid JSON is skipped."""
    blocks: list[dict[str, Any]] = []
    for i, m in enumerate(_JSON_LD_RE.finditer(html)):
        raw = m.group(1).strip()
        if not raw:
            continue
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.debug("Skipping invalid JSON-LD block %d: %s", i, e)
            continue
        items = parsed if isinstance(parsed, list) else [parsed]
        blocks.extend(item for item in items if isinstance(item, dict))
    return blocks


def _microdata(doc: lxml.html.HtmlElement) -> list[dict[str, Any]]:
    """One summary per outermost ``itemscope``: its ``itemtype`` and the ``itemprop`` names under it."""
    items: list[dict[str, Any]] = []
    for el in doc.xpath("//*[@itemscope][not(ancestor::*[@itemscope])]"):
        props = sorted({p for node in el.xpath(".//*[@itemprop]") for p in node.get("itemprop", "").split()})
        entry: dict[str, Any] = {"properties": props}
        itemtype = (el.get("itemtype") or "").strip()
        if itemtype:
            entry["itemtype"] = itemtype
            entry["@type"] = itemtype.rstrip("/").rsplit("/", 1)[-1]
        items.append(entry)
    return items


def _meta_tags(doc: lxml.html.HtmlElement) -> dict[str, str]:
    """``{property-or-name (lower-cased): content}``; first occurrence wins."""
    tags: dict[str, str] = {}
    for el in doc.iter("meta"):
        key = (el.get("property") or el.get("name") or "").strip().lower()
        value = el.get("content")
        if key and value and key not in tags:
            tags[key] = value
    return tags


def _canonical(doc: lxml.html.HtmlElement, url: str) -> str | None:
    for el in doc.iter("link"):
        rel = (el.get("rel") or "").lower().split()
        href = (el.get("href") or "").strip()
        if "canonical" in rel and href:
            return urljoin(url, href)
    return None


# ---------------------------------------------------------------------------
# Visible text
# ---------------------------------------------------------------------------


def _visible_text(doc: lxml.html.HtmlElement) -> str:
    """Text the reader sees, one block-level element per line."""
    etree.strip_elements(doc, *_INVISIBLE_TAGS, etree.Comment, with_tail=False)
    for el in doc.iter():
        if not isinstance(el.tag, str):
            continue
        tag = el.tag.lower()
        if tag == "br":
            el.tail = "\n" + (el.tail or "")
        elif tag in _BLOCK_TAGS:
            el.text = "\n" + (el.text or "")
            el.tail = "\n" + (el.tail or "")
        elif tag in ("td", "th"):
            el.tail = " " + (el.tail or "")
    return doc.text_content()


def _parse(html: str) -> lxml.html.HtmlElement:
    try:
        parser = lxml.html.HTMLParser(recover=True, encoding="utf-8")
        return lxml.html.document_fromstring(html.encode("utf-8"), parser=parser)
    except (etree.ParserError, etree.XMLSyntaxError, ValueError) as e:
        raise NormalizationError(f"HTML parsing failed: {e}") from e


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def normalize_html(
    url: str,
    html: str,
    *,
    text: str | None = None,
    title: str | None = None,
    description: str | None = None,
) -> NormalizedContent:
    """Build the NormalizedContent contract from a fetched page.

    Args:
        url: the URL the page was fetched from
        html: raw page markup (may be empty when only text is available)
        text: visible text from the fetcher; extracted from *html* when omitted
        title: page title from the fetcher; falls back to ``<title>``
        description: falls back to ``<meta name="description">``

    Raises:
        NormalizationError: non-empty *html* that lxml cannot parse at all.
    """
    if not html.strip():
        content = sanitize_content_block(text or "")
        return NormalizedContent(
            url=url,
            title=sanitize_text(title) or "",
            description=sanitize_text(description) or None,
            content=content,
            html=html,
            dom_signals=detect_dom_signals(html, content),
        )

    existing_jsonld = extract_json_ld(html)
    doc = _parse(html)

    tags = _meta_tags(doc)
    if title is None:
        title_el = doc.find(".//title")
        title = title_el.text_content() if title_el is not None else ""
    if description is None:
        description = tags.get("description")

    meta = PageMeta(
        og_title=sanitize_text(tags.get("og:title")),
        og_description=sanitize_text(tags.get("og:description")),
        og_image=sanitize_text(tags.get("og:image"), max_len=2048),
        twitter_title=sanitize_text(tags.get("twitter:title")),
        twitter_description=sanitize_text(tags.get("twitter:description")),
        language=sanitize_text(doc.get("lang"), max_len=35) or None,
    )
    canonical = _canonical(doc, url)
    microdata = _microdata(doc)

    if text is None:
        text = _visible_text(doc)
    content = sanitize_content_block(text)

    logger.debug(
        "Normalized %s: %d JSON-LD blocks, %d microdata items, %d chars of text",
        url,
        len(existing_jsonld),
        len(microdata),
        len(content),
    )
    return NormalizedContent(
        url=url,
        title=sanitize_text(title) or "",
        canonical_url=canonical,
        description=sanitize_text(description) or None,
        content=content,
        html=html,
        meta=meta,
        existing_jsonld=existing_jsonld,
        existing_microdata=microdata,
        dom_signals=detect_dom_signals(html, content),
    )
