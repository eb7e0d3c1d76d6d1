# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""End-to-end generation: hint -> fetch -> classify -> policy -> assemble -> lint.

``run_pipeline`` works on content that is already normalized and is fully
deterministic for a fixed ``today``.  ``generate`` is the request-level
entry point: it validates the request, resolves the render mode and calls
the injected ``ContentFetcher`` collaborator.

The request/response models are pydantic and speak camelCase on the wire;
every stage in between works on frozen dataclasses.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date
from typing import Any, Protocol

import structlog
from pydantic import BaseModel, ConfigDict, Field, HttpUrl, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel

from . import NormalizedContent
from .errors import FetchError, InvalidInputError, SchemaPilotError
from .hint_parser import HintDirective, parse_hint
from .jsonld import assemble, validate
from .page_classifier import classify_page
from .policy import apply_policy
from .stage_timer import StageTimer
from .vocabulary import RenderMode

logger = logging.getLogger(__name__)

_HTTP_URL: TypeAdapter[HttpUrl] = TypeAdapter(HttpUrl)


# ---------------------------------------------------------------------------
# Boundary models
# ---------------------------------------------------------------------------


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GenerateOptions(_CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    render_mode: RenderMode | None = Field(None, description="auto, html or headless; overrides the hint")


class GenerateRequest(_CamelModel):
    url: str = Field("", description="Absolute http(s) URL of the page")
    hint: str = Field("", description="Free-text steering hint")
    options: GenerateOptions = Field(default_factory=GenerateOptions)


class LintReport(_CamelModel):
    schema_org_valid: bool
    rich_results_eligible: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


class GenerateResponse(_CamelModel):
    detected_type: str
    subtype: str | None = None
    features: list[str] = Field(default_factory=list)
    confidence: float
    jsonld: dict[str, Any]
    explanations: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    hint_directive: dict[str, Any] = Field(default_factory=dict)
    lint: LintReport

    def to_dict(self) -> dict[str, Any]:
        """camelCase wire form; ``subtype`` omitted when unset."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ContentFetcher(Protocol):
    """Fetches *url* and returns it normalized.  May raise anything; ``generate`` wraps it."""

    def __call__(self, url: str, *, render_mode: RenderMode) -> NormalizedContent: ...


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


def _run(content: NormalizedContent, hint: HintDirective, today: date | None) -> GenerateResponse:
    with StageTimer() as timer:
        timer.stage("classify")
        classification = classify_page(content, hint)

        timer.stage("policy")
        policy = apply_policy(classification, content, hint)
        if policy.primary_type != classification.primary_type:
            logger.debug("Policy changed %s -> %s for %s", classification.primary_type, policy.primary_type, content.url)

        timer.stage("assemble")
        jsonld = assemble(policy, content, today=today, max_items=hint.max_items)

        timer.stage("validate")
        lint = validate(jsonld)

    logger.info(
        "Generated %s for %s: confidence=%.2f warnings=%d lint_errors=%d stages_ms: %s",
        policy.entity_type,
        content.url,
        policy.confidence,
        len(policy.warnings),
        len(lint.errors),
        timer.summary(),
    )
    return GenerateResponse(
        detected_type=policy.primary_type,
        subtype=policy.subtype,
        features=list(policy.features),
        confidence=policy.confidence,
        jsonld=jsonld,
        explanations=list(policy.explanations),
        warnings=list(policy.warnings),
        hint_directive=hint.to_dict(),
        lint=LintReport(**lint.to_dict()),
    )


def run_pipeline(content: NormalizedContent, hint_text: str = "", *, today: date | None = None) -> GenerateResponse:
    """Generate JSON-LD for already normalized content.

    Args:
        content: normalized page
        hint_text: free-text hint; its ``cap N`` also caps ItemList output
        today: fallback date for Event/Article dates (defaults to the current date)
    """
    return _run(content, parse_hint(hint_text), today)


# ---------------------------------------------------------------------------
# Request entry point
# ---------------------------------------------------------------------------


def _coerce_request(request: GenerateRequest | Mapping[str, Any]) -> GenerateRequest:
    if isinstance(request, GenerateRequest):
        return request
    try:
        return GenerateRequest.model_validate(dict(request))
    except ValidationError as e:
        first = e.errors()[0]
        loc = ".".join(str(p) for p in first.get("loc", ()))
        raise InvalidInputError(f"Invalid request: {loc}: {first.get('msg', 'invalid value')}", field=loc) from e


def validate_url(url: str) -> str:
    """Return *url* stripped, or raise ``InvalidInputError`` unless it is an absolute http(s) URL."""
    url = (url or "").strip()
    if not url:
        raise InvalidInputError("URL is required", field="url")
    try:
        _HTTP_URL.validate_python(url)
    except ValidationError as e:
        raise InvalidInputError(f"Invalid URL: {url}", field="url") from e
    return url


def resolve_render_mode(options: GenerateOptions, hint: HintDirective) -> RenderMode:
    """Request option, then hint, then ``auto``."""
    return options.render_mode or hint.render_mode or RenderMode.AUTO


def generate(
    request: GenerateRequest | Mapping[str, Any],
    fetch: ContentFetcher,
    *,
    today: date | None = None,
) -> GenerateResponse:
    """Validate *request*, fetch its page through *fetch* and run the pipeline.

    Raises:
        InvalidInputError: missing/malformed URL or request fields (nothing is fetched)
        FetchError: the fetcher failed; the original error is chained
        NormalizationError: propagated unchanged from fetchers that normalize HTML
    """
    req = _coerce_request(request)
    url = validate_url(req.url)
    hint = parse_hint(req.hint)
    render_mode = resolve_render_mode(req.options, hint)

    with structlog.contextvars.bound_contextvars(url=url, render_mode=str(render_mode)):
        logger.debug("Fetching %s (render_mode=%s)", url, render_mode)
        try:
            content = fetch(url, render_mode=render_mode)
        except SchemaPilotError:
            raise
        except Exception as e:
            raise FetchError(f"Failed to fetch and normalize content: {e}", url=url) from e

        return _run(content, hint, today)
