# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Structural schema.org lint for assembled JSON-LD.

Checks are structural, not semantic: a placeholder value satisfies a
required field exactly like real data does.  Errors block validity;
warnings are recommendations.  Rich-results eligibility is only evaluated
on an error-free document.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from pydantic import AnyUrl, TypeAdapter, ValidationError

from ..vocabulary import SUPPORTING_TYPES

_URL_ADAPTER: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)


@dataclass(frozen=True, slots=True)
class ValidationResult:
    schema_org_valid: bool
    rich_results_eligible: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "schemaOrgValid": self.schema_org_valid,
            "richResultsEligible": self.rich_results_eligible,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }


# --- Helpers ---


def is_valid_url(value: Any) -> bool:
    """True if *value* parses as an absolute URL (``ImageObject``-style dicts use their ``url``)."""
    if isinstance(value, dict):
        value = value.get("url")
    if not isinstance(value, str):
        return False
    try:
        _URL_ADAPTER.validate_python(value)
    except ValidationError:
        return False
    return True


def _present(entity: dict[str, Any], *keys: str) -> bool:
    return all(entity.get(k) for k in keys)


# --- Per-type checks: (entity, errors, warnings) ---

_Check = Callable[[dict[str, Any], list[str], list[str]], None]


def _check_product(entity: dict[str, Any], errors: list[str], warnings: list[str]) -> None:
    if not entity.get("name"):
        errors.append("Product missing required name")
    offers = entity.get("offers")
    if offers:
        offer = offers if isinstance(offers, dict) else {}
        if not offer.get("price"):
            errors.append("Product offer missing price")
        if not offer.get("priceCurrency"):
            errors.append("Product offer missing priceCurrency")
    if not entity.get("image"):
        warnings.append("Product missing image - recommended for rich results")
    rating = entity.get("aggregateRating")
    if rating and not (isinstance(rating, dict) and rating.get("ratingCount")):
        warnings.append("AggregateRating missing ratingCount")


def _check_article(entity: dict[str, Any], errors: list[str], warnings: list[str]) -> None:
    if not entity.get("name") and not entity.get("headline"):
        errors.append("Article missing required name or headline")
    for key in ("author", "datePublished", "image", "publisher"):
        if not entity.get(key):
            warnings.append(f"Article missing {key} - recommended for rich results")


def _check_local_business(entity: dict[str, Any], errors: list[str], warnings: list[str]) -> None:
    if not entity.get("name"):
        errors.append("LocalBusiness missing required name")
    if not entity.get("address"):
        errors.append("LocalBusiness missing required address")
    for key in ("telephone", "openingHours"):
        if not entity.get(key):
            warnings.append(f"LocalBusiness missing {key} - recommended for rich results")


def _check_event(entity: dict[str, Any], errors: list[str], warnings: list[str]) -> None:
    for key in ("name", "startDate", "location"):
        if not entity.get(key):
            errors.append(f"Event missing required {key}")


def _check_recipe(entity: dict[str, Any], errors: list[str], warnings: list[str]) -> None:
    if not entity.get("name"):
        errors.append("Recipe missing required name")
    for key in ("recipeIngredient", "recipeInstructions"):
        if not isinstance(entity.get(key), list):
            errors.append(f"Recipe missing required {key} array")
    if not entity.get("image"):
        warnings.append("Recipe missing image - recommended for rich results")


def _check_organization(entity: dict[str, Any], errors: list[str], warnings: list[str]) -> None:
    if not entity.get("name"):
        errors.append("Organization missing required name")
    if not entity.get("url"):
        warnings.append("Organization missing URL - recommended")


def _check_website(entity: dict[str, Any], errors: list[str], warnings: list[str]) -> None:
    if not entity.get("url"):
        errors.append("WebSite missing required url")
    if not entity.get("name"):
        warnings.append("WebSite missing name - recommended")


_TYPE_CHECKS: dict[str, _Check] = {
    "Product": _check_product,
    "Article": _check_article,
    "BlogPosting": _check_article,
    "LocalBusiness": _check_local_business,
    "Event": _check_event,
    "Recipe": _check_recipe,
    "Organization": _check_organization,
    "WebSite": _check_website,
}

# Minimal field sets for rich-result eligibility; unlisted types are eligible.
_RICH_RESULT_FIELDS: dict[str, tuple[str, ...]] = {
    "Product": ("name", "image", "offers"),
    "Article": ("name", "image", "author", "datePublished"),
    "BlogPosting": ("name", "image", "author", "datePublished"),
    "LocalBusiness": ("name", "address"),
    "Event": ("name", "startDate", "location"),
    "Recipe": ("name", "image", "recipeIngredient", "recipeInstructions"),
}


def _validate_entity(entity: Any, errors: list[str], warnings: list[str]) -> None:
    if not isinstance(entity, dict):
        errors.append("Graph entry is not an object")
        return
    schema_type = entity.get("@type")
    if not schema_type:
        errors.append("Entity missing @type")
        return

    check = _TYPE_CHECKS.get(schema_type) if isinstance(schema_type, str) else None
    if check is not None:
        check(entity, errors, warnings)

    for key, label in (("url", "URL"), ("image", "image URL")):
        value = entity.get(key)
        if value and not is_valid_url(value):
            errors.append(f"Invalid {label}: {value}")


def _primary_entity(graph: list[Any]) -> dict[str, Any] | None:
    for e in graph:
        if not isinstance(e, dict) or not e.get("@type"):
            continue
        if isinstance(e["@type"], str) and e["@type"] in SUPPORTING_TYPES:
            continue
        return e
    return None


def _rich_results_eligible(graph: list[Any]) -> bool:
    primary = _primary_entity(graph)
    if primary is None:
        return False
    required = _RICH_RESULT_FIELDS.get(primary["@type"], ()) if isinstance(primary["@type"], str) else ()
    return _present(primary, *required)


def validate(jsonld: Any) -> ValidationResult:
    """Lint a JSON-LD document produced by ``assemble()`` (or any ``@graph`` document)."""
    errors: list[str] = []
    warnings: list[str] = []

    doc = jsonld if isinstance(jsonld, dict) else {}
    if not doc.get("@context"):
        errors.append("Missing @context")
    graph = doc.get("@graph")
    if not isinstance(graph, list):
        errors.append("Missing or invalid @graph")
        graph = []

    for entity in graph:
        _validate_entity(entity, errors, warnings)

    eligible = not errors and _rich_results_eligible(graph)
    return ValidationResult(
        schema_org_valid=not errors,
        rich_results_eligible=eligible,
        errors=errors,
        warnings=warnings,
    )
