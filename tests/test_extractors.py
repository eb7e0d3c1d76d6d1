# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Tests for schemapilot.jsonld.extractors: narrow regex text mining."""

from __future__ import annotations

import pytest

from schemapilot.jsonld import extractors as ex


class TestCommerce:
    @pytest.mark.parametrize(
        "text,expected",
        [("Only $20", "USD"), ("Nur €20", "EUR"), ("Just £20", "GBP"), ("€5 or $6", "USD"), ("20 dollars", None)],
    )
    def test_currency(self, text: str, expected: str | None):
        assert ex.extract_currency(text) == expected

    @pytest.mark.parametrize(
        "text,expected",
        [("Now $129.99!", "129.99"), ("€45", "45"), ("$7.5", "7"), ("Call for price", None)],
    )
    def test_price(self, text: str, expected: str | None):
        assert ex.extract_price(text) == expected

    def test_rating_out_of(self):
        assert ex.extract_rating("Rated 4.6 out of 5") == "4.6"

    def test_rating_slash(self):
        assert ex.extract_rating("Score: 8/10") == "8"

    def test_rating_count(self):
        assert ex.extract_rating_count("based on 212 Reviews") == "212"
        assert ex.extract_rating_count("1 review") == "1"
        assert ex.extract_rating_count("no feedback yet") is None


class TestArticles:
    @pytest.mark.parametrize(
        "text",
        ["By Jane Smith", "written by Jane Smith", "Author Jane Smith"],
    )
    def test_author(self, text: str):
        assert ex.extract_author(text) == "Jane Smith"

    def test_author_needs_two_words(self):
        assert ex.extract_author("by staff") is None

    def test_iso_date(self):
        assert ex.extract_iso_date("Posted on 2025-03-01 at noon") == "2025-03-01"
        assert ex.extract_iso_date("March 1, 2025") is None


class TestLocalBusiness:
    def test_street_address(self):
        assert ex.extract_street_address("Visit us at 123 Main Street today") == "123 Main Street"

    def test_street_address_missing(self):
        assert ex.extract_street_address("Visit us downtown") is None

    @pytest.mark.parametrize("text", ["555-123-4567", "555.123.4567", "555 123 4567", "5551234567"])
    def test_phone(self, text: str):
        assert ex.extract_phone(f"Call {text} now") == text


class TestRecipes:
    @pytest.mark.parametrize(
        "text,expected",
        [("Cook for 45 minutes", "PT45M"), ("Bake 2 hours", "PT2H"), ("Rest 1 hr", "PT1H"), ("Serve warm", None)],
    )
    def test_cook_time(self, text: str, expected: str | None):
        assert ex.extract_cook_time(text) == expected

    def test_ingredients(self):
        text = "Ingredients\n1 cup flour\n2 tablespoons sugar\nMix well\n3 eggs"
        assert ex.extract_ingredients(text) == ["1 cup flour", "2 tablespoons sugar"]

    def test_numbered_steps(self):
        assert ex.extract_numbered_steps("1. Preheat oven\n2.Mix\nEnjoy") == ["Preheat oven", "Mix"]

    def test_howto_steps_accept_step_prefix(self):
        text = "Step 1: Unplug the lamp\n2. Remove the shade\nDone"
        assert ex.extract_howto_steps(text) == ["Unplug the lamp", "Remove the shade"]


class TestLists:
    def test_short_lines_skipped(self):
        text = "1. Short\n2. The Grand Hotel\n3. Harbour View Inn"
        assert ex.extract_list_items(text) == ["The Grand Hotel", "Harbour View Inn"]

    def test_limit(self):
        text = "\n".join(f"{i}. Destination number {i}" for i in range(1, 16))
        assert len(ex.extract_list_items(text)) == ex.MAX_LIST_ITEMS
        assert ex.extract_list_items(text, limit=3) == [
            "Destination number 1",
            "Destination number 2",
            "Destination number 3",
        ]

    def test_breadcrumb_trail(self):
        assert ex.extract_breadcrumb_trail("Home > Shoes > Running\nNew arrivals") == ["Home", "Shoes", "Running"]
        assert ex.extract_breadcrumb_trail("home > Shoes") == ["Home", "Shoes"]
        assert ex.extract_breadcrumb_trail("Shoes and more") is None


class TestPlaceholders:
    def test_documented_fallback_values(self):
        assert ex.DEFAULT_CURRENCY == "USD"
        assert ex.PLACEHOLDER_PRICE == "0"
        assert ex.PLACEHOLDER_RATING == "5"
        assert ex.PLACEHOLDER_RATING_COUNT == "1"
        assert ex.PLACEHOLDER_AUTHOR == "Anonymous"
        assert ex.PLACEHOLDER_OPENING_HOURS == ("Mo-Fr 09:00-17:00",)
        assert ex.PLACEHOLDER_EVENT_LOCATION == "Event Location"
        assert ex.PLACEHOLDER_INGREDIENTS == ("Ingredient 1", "Ingredient 2")
        assert ex.PLACEHOLDER_RECIPE_STEP == "Follow the recipe instructions"
        assert ex.PLACEHOLDER_HOWTO_STEP == "Follow the instructions"
        assert ex.PLACEHOLDER_LIST_ITEM == "List item 1"
