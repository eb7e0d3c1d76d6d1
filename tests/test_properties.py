# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Property-based tests using Hypothesis.

Verifies invariants hold for arbitrary inputs across the hint parser,
classifier, policy engine, assembler, validator and sanitizer.
"""

from __future__ import annotations

try:
    from hypothesis import HealthCheck, example, given, settings
    from hypothesis import strategies as st
except ImportError:
    import pytest

    pytest.skip("hypothesis not installed", allow_module_level=True)

from dataclasses import fields
from datetime import date

import pytest

from schemapilot import DomSignals, NormalizedContent, PageMeta
from schemapilot.hint_parser import parse_hint
from schemapilot.jsonld import assemble, validate
from schemapilot.page_classifier import classify_page
from schemapilot.policy import apply_policy, merge_features
from schemapilot.sanitizer import sanitize_content_block, sanitize_text
from schemapilot.vocabulary import SUPPORTING_TYPES, Feature, SchemaType

# ---------------------------------------------------------------------------
# Module-level strategies
# ---------------------------------------------------------------------------

GENERAL_TEXT = st.text(min_size=0, max_size=2000)

HINT_WORDS = st.sampled_from(
    [
        "strict", "lenient", "product", "article", "recipe", "event", "include", "add", "no",
        "ignore", "suppress", "faq", "reviews", "offers", "video", "cap", "max", "limit", "5",
        "0", "en-gb", "fr", "headless", "html", "store", "blog", "price", "rating", ",",
    ]
)  # fmt: skip
HINT_TEXT = st.one_of(GENERAL_TEXT, st.lists(HINT_WORDS, max_size=12).map(" ".join))

PAGE_TEXT = st.lists(
    st.sampled_from(
        [
            "Price: $19.99", "Add to cart", "Rated 4.5 out of 5", "12 reviews", "By Jane Smith",
            "Published 2024-05-01", "123 Main Street", "555-123-4567", "1 cup flour", "1. Mix well together",
            "Step 2: Bake", "Home > Shoes > Trail", "Top 10 beaches", "Buy tickets at the venue", "news",
        ]
    ),
    max_size=10,
).map("\n".join)  # fmt: skip

DOM_SIGNALS = st.builds(DomSignals, **{f.name: st.booleans() for f in fields(DomSignals)})

CONTENT = st.builds(
    NormalizedContent,
    url=st.sampled_from(["https://example.com/p", "https://www.example.org/blog/x", "http://shop.example.net/"]),
    title=st.text(max_size=40),
    content=st.one_of(PAGE_TEXT, GENERAL_TEXT),
    meta=st.builds(PageMeta, og_image=st.one_of(st.none(), st.just("https://example.com/i.png"))),
    existing_jsonld=st.lists(st.dictionaries(st.sampled_from(["@type", "name"]), st.text(max_size=10)), max_size=2),
    dom_signals=DOM_SIGNALS,
)

JSON_VALUES = st.recursive(
    st.none() | st.booleans() | st.integers() | st.text(max_size=20),
    lambda children: st.lists(children, max_size=4) | st.dictionaries(st.text(max_size=8), children, max_size=4),
    max_leaves=20,
)

FEATURES = st.lists(st.sampled_from([str(f) for f in Feature]), max_size=6)

TODAY = date(2025, 3, 14)
KNOWN_TYPES = {str(t) for t in SchemaType}

# ---------------------------------------------------------------------------
# Shared settings
# ---------------------------------------------------------------------------

_fuzz_settings = settings(
    max_examples=150,
    suppress_health_check=[HealthCheck.too_slow],
)


@pytest.mark.fuzz
class TestFuzzHintParser:
    @_fuzz_settings
    @given(text=HINT_TEXT)
    @example("cap 0")
    @example("no no no")
    def test_never_raises_and_fields_well_formed(self, text: str) -> None:
        d = parse_hint(text)
        assert d.max_items is None or d.max_items > 0
        assert d.language is None or len(d.language) in (2, 5)
        assert len(set(d.enrich)) == len(d.enrich)
        assert set(d.to_dict()) <= {
            "preferredType", "profile", "strictness", "renderMode", "language",
            "maxItems", "enrich", "suppress", "prioritySignals",
        }  # fmt: skip


@pytest.mark.fuzz
class TestFuzzClassifierAndPolicy:
    @_fuzz_settings
    @given(content=CONTENT, hint_text=HINT_TEXT)
    def test_confidence_in_range_and_never_raised(self, content: NormalizedContent, hint_text: str) -> None:
        hint = parse_hint(hint_text)
        classification = classify_page(content, hint)
        assert 0.0 <= classification.confidence <= 1.0
        assert classification.primary_type in KNOWN_TYPES

        policy = apply_policy(classification, content, hint)
        assert policy.confidence <= classification.confidence
        if policy.primary_type != classification.primary_type:
            assert policy.primary_type == "WebPage"
            assert policy.subtype is None

    @_fuzz_settings
    @given(content=CONTENT, hint_text=HINT_TEXT)
    def test_hint_type_always_honoured(self, content: NormalizedContent, hint_text: str) -> None:
        hint = parse_hint(hint_text)
        if hint.preferred_type is not None:
            assert classify_page(content, hint).primary_type == hint.preferred_type

    @_fuzz_settings
    @given(detected=FEATURES, enrich=FEATURES, suppress=FEATURES)
    def test_merge_features(self, detected: list[str], enrich: list[str], suppress: list[str]) -> None:
        merged, added = merge_features(detected, enrich, suppress)
        assert set(enrich) <= set(merged)
        assert not (set(suppress) - set(enrich)) & set(merged)
        assert set(added) <= set(enrich)
        assert merged[len(merged) - len(added) :] == added


@pytest.mark.fuzz
class TestFuzzAssembly:
    @_fuzz_settings
    @given(content=CONTENT, hint_text=HINT_TEXT)
    def test_graph_shape(self, content: NormalizedContent, hint_text: str) -> None:
        hint = parse_hint(hint_text)
        policy = apply_policy(classify_page(content, hint), content, hint)
        doc = assemble(policy, content, today=TODAY, max_items=hint.max_items)

        assert doc["@context"] == "https://schema.org"
        graph = doc["@graph"]
        assert [n["@type"] for n in graph[:2]] == ["Organization", "WebSite"]
        assert graph[-1]["@type"] == policy.entity_type
        assert graph[-1]["@type"] not in SUPPORTING_TYPES
        assert len(graph) in (3, 4)
        if policy.primary_type == "ItemList":
            assert 1 <= graph[-1]["numberOfItems"] <= 10

    @_fuzz_settings
    @given(content=CONTENT)
    def test_assembly_idempotent(self, content: NormalizedContent) -> None:
        policy = apply_policy(classify_page(content), content)
        assert assemble(policy, content, today=TODAY) == assemble(policy, content, today=TODAY)

    @_fuzz_settings
    @given(content=CONTENT)
    def test_eligible_implies_valid(self, content: NormalizedContent) -> None:
        policy = apply_policy(classify_page(content), content)
        result = validate(assemble(policy, content, today=TODAY))
        assert result.schema_org_valid == (not result.errors)
        if result.rich_results_eligible:
            assert result.schema_org_valid

    @_fuzz_settings
    @given(document=JSON_VALUES)
    @example({"@context": "https://schema.org", "@graph": [None, 1, {"@type": ["A", "B"]}]})
    def test_validate_never_raises(self, document) -> None:
        result = validate(document)
        assert result.schema_org_valid == (not result.errors)


@pytest.mark.fuzz
class TestFuzzSanitizer:
    @_fuzz_settings
    @given(text=GENERAL_TEXT)
    @example("\x00hidden\x1ftext")
    def test_sanitize_text_no_control_chars(self, text: str) -> None:
        result = sanitize_text(text)
        for ch in result:
            cp = ord(ch)
            assert not (0x00 <= cp <= 0x1F), f"control char U+{cp:04X} in result"
            assert not (0x7F <= cp <= 0x9F), f"control char U+{cp:04X} in result"

    @_fuzz_settings
    @given(text=GENERAL_TEXT, max_len=st.integers(1, 1000))
    @example("x" * 2000, 10)
    def test_sanitize_text_respects_max_length(self, text: str, max_len: int) -> None:
        assert len(sanitize_text(text, max_len=max_len)) <= max_len

    @_fuzz_settings
    @given(text=GENERAL_TEXT)
    @example("a\r\n\r\n\r\nb")
    def test_content_block_line_structure(self, text: str) -> None:
        result = sanitize_content_block(text)
        assert "\r" not in result
        assert "\n\n\n" not in result
        assert result == result.strip()
