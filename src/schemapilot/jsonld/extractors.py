# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Best-effort text mining over unstructured page text.

Each extractor is a narrow function returning ``None`` (or an empty list)
when its pattern does not match.  The assembler substitutes the matching
``PLACEHOLDER_*`` / ``DEFAULT_*`` constant; those fallbacks are part of the
output contract and must stay stable.
"""

from __future__ import annotations

import re

# --- Fallbacks ---

DEFAULT_CURRENCY = "USD"
PLACEHOLDER_PRICE = "0"
PLACEHOLDER_RATING = "5"
PLACEHOLDER_RATING_COUNT = "1"
PLACEHOLDER_AUTHOR = "Anonymous"
PLACEHOLDER_OPENING_HOURS = ("Mo-Fr 09:00-17:00",)
PLACEHOLDER_EVENT_LOCATION = "Event Location"
PLACEHOLDER_INGREDIENTS = ("Ingredient 1", "Ingredient 2")
PLACEHOLDER_RECIPE_STEP = "Follow the recipe instructions"
PLACEHOLDER_HOWTO_STEP = "Follow the instructions"
PLACEHOLDER_LIST_ITEM = "List item 1"

MAX_LIST_ITEMS = 10

# --- Patterns ---

_CURRENCY_SYMBOLS = (("$", "USD"), ("€", "EUR"), ("£", "GBP"))
_PRICE_RE = re.compile(r"[$€£](\d+(?:\.\d{2})?)")
_RATING_RE = re.compile(r"(\d+(?:\.\d+)?)\s*(?:out of|/)\s*(\d+)")
_RATING_COUNT_RE = re.compile(r"(\d+)\s*reviews?", re.IGNORECASE)
_AUTHOR_RE = re.compile(r"(?:by|author|written by)\s+([A-Z][a-z]+ [A-Z][a-z]+)", re.IGNORECASE)
_ISO_DATE_RE = re.compile(r"(\d{4}-\d{2}-\d{2})")
_STREET_RE = re.compile(
    r"(\d+\s+[A-Za-z\s]+(?:Street|St|Avenue|Ave|Road|Rd|Boulevard|Blvd))",
    re.IGNORECASE,
)
_PHONE_RE = re.compile(r"(\d{3}[-.\s]?\d{3}[-.\s]?\d{4})")
_DURATION_RE = re.compile(r"(\d+)\s*(?:minutes?|mins?|hours?|hrs?)", re.IGNORECASE)
_BREADCRUMB_RE = re.compile(r"Home\s*>\s*([^>\n]+)(?:\s*>\s*([^>\n]+))?", re.IGNORECASE)

_LEADING_NUMBER_RE = re.compile(r"^\s*\d+")
_UNIT_RE = re.compile(r"cup|tablespoon|teaspoon|pound|ounce")
_NUMBERED_LINE_RE = re.compile(r"^\s*\d+\.")
_NUMBERED_PREFIX_RE = re.compile(r"^\s*\d+\.\s*")
_STEP_LINE_RE = re.compile(r"^step \d+", re.IGNORECASE)
_STEP_PREFIX_RE = re.compile(r"^\s*(?:\d+\.|step \d+:?)\s*", re.IGNORECASE)


def _lines(text: str) -> list[str]:
    return text.split("\n")


# --- Commerce ---


def extract_currency(text: str) -> str | None:
    """ISO code for the first currency symbol family present ($, €, £ in that order)."""
    return next((code for symbol, code in _CURRENCY_SYMBOLS if symbol in text), None)


def extract_price(text: str) -> str | None:
    m = _PRICE_RE.search(text)
    return m.group(1) if m else None


def extract_rating(text: str) -> str | None:
    """Rating value from ``4.5 out of 5`` / ``4/5`` style text."""
    m = _RATING_RE.search(text)
    return m.group(1) if m else None


def extract_rating_count(text: str) -> str | None:
    m = _RATING_COUNT_RE.search(text)
    return m.group(1) if m else None


# --- Articles / events ---


def extract_author(text: str) -> str | None:
    m = _AUTHOR_RE.search(text)
    return m.group(1) if m else None


def extract_iso_date(text: str) -> str | None:
    """First ``YYYY-MM-DD`` sequence.  Not calendar-validated."""
    m = _ISO_DATE_RE.search(text)
    return m.group(1) if m else None


# --- Local business ---


def extract_street_address(text: str) -> str | None:
    m = _STREET_RE.search(text)
    return m.group(1) if m else None


def extract_phone(text: str) -> str | None:
    """US-style 10-digit phone number."""
    m = _PHONE_RE.search(text)
    return m.group(1) if m else None


# --- Recipes / how-tos / lists ---


def extract_cook_time(text: str) -> str | None:
    """ISO 8601 duration (``PT45M`` / ``PT2H``) from the first time expression."""
    m = _DURATION_RE.search(text)
    if not m:
        return None
    amount = int(m.group(1))
    unit = m.group(0).lower()
    if "hour" in unit or "hr" in unit:
        return f"PT{amount}H"
    return f"PT{amount}M"


def extract_ingredients(text: str) -> list[str]:
    """Lines starting with a number and mentioning a cooking unit."""
    return [
        line.strip() for line in _lines(text) if _LEADING_NUMBER_RE.search(line) and _UNIT_RE.search(line)
    ]


def extract_numbered_steps(text: str) -> list[str]:
    """Text of ``N.`` prefixed lines, prefix removed."""
    return [_NUMBERED_PREFIX_RE.sub("", line, count=1).strip() for line in _lines(text) if _NUMBERED_LINE_RE.search(line)]


def extract_howto_steps(text: str) -> list[str]:
    """Text of ``N.`` or ``Step N`` prefixed lines, prefix removed."""
    return [
        _STEP_PREFIX_RE.sub("", line, count=1).strip()
        for line in _lines(text)
        if _NUMBERED_LINE_RE.search(line) or _STEP_LINE_RE.search(line)
    ]


def extract_list_items(text: str, limit: int = MAX_LIST_ITEMS) -> list[str]:
    """Names of ``N.`` lines longer than 10 characters, at most *limit*."""
    items = [
        _NUMBERED_PREFIX_RE.sub("", line, count=1).strip()
        for line in _lines(text)
        if _NUMBERED_LINE_RE.search(line) and len(line) > 10
    ]
    return items[:limit]


def extract_breadcrumb_trail(text: str) -> list[str] | None:
    """``Home > X > Y`` trail as ``["Home", X, Y]`` (at most two trailing segments)."""
    m = _BREADCRUMB_RE.search(text)
    if not m:
        return None
    trail = ["Home"]
    trail.extend(seg.strip() for seg in m.groups() if seg)
    return trail
