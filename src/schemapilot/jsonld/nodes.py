# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Typed schema.org graph nodes.

One frozen dataclass per schema.org type, each carrying only its own
properties.  ``to_jsonld()`` projects a node to the open JSON-LD dict shape;
that projection is the only place the graph becomes an untyped mapping.

Python field names are snake_case; the JSON-LD key lives in the field
metadata (``prop("datePublished")``).  ``None`` values are omitted.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

SCHEMA_CONTEXT = "https://schema.org"


def prop(key: str, default: Any = None) -> Any:
    """Dataclass field serialized under JSON-LD key *key*."""
    return dataclasses.field(default=default, metadata={"jsonld": key})


def _project(value: Any) -> Any:
    if isinstance(value, (Node, Ref)):
        return value.to_jsonld()
    if isinstance(value, (list, tuple)):
        return [_project(v) for v in value]
    return value


@dataclass(frozen=True, slots=True)
class Ref:
    """Pointer to a node defined elsewhere in the graph."""

    id: str

    def to_jsonld(self) -> dict[str, str]:
        return {"@id": self.id}


@dataclass(frozen=True, slots=True, kw_only=True)
class Node:
    """Base for every typed node.  ``type`` defaults to the schema.org class name."""

    type: str = prop("@type", "")
    id: str | None = prop("@id")

    def __post_init__(self) -> None:
        if not self.type:
            object.__setattr__(self, "type", type(self).__name__)

    def to_jsonld(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            out[f.metadata.get("jsonld", f.name)] = _project(value)
        return out


# ---------------------------------------------------------------------------
# Supporting nodes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, kw_only=True)
class Organization(Node):
    name: str = prop("name", "")
    url: str = prop("url", "")


@dataclass(frozen=True, slots=True, kw_only=True)
class WebSite(Node):
    url: str = prop("url", "")
    name: str = prop("name", "")
    publisher: Ref | None = prop("publisher")


@dataclass(frozen=True, slots=True, kw_only=True)
class ListItem(Node):
    position: int = prop("position", 1)
    name: str = prop("name", "")


@dataclass(frozen=True, slots=True, kw_only=True)
class BreadcrumbList(Node):
    item_list_element: tuple[ListItem, ...] = prop("itemListElement", ())


@dataclass(frozen=True, slots=True, kw_only=True)
class Offer(Node):
    availability: str = prop("availability", "https://schema.org/InStock")
    price_currency: str = prop("priceCurrency", "")
    price: str = prop("price", "")


@dataclass(frozen=True, slots=True, kw_only=True)
class AggregateRating(Node):
    rating_value: str = prop("ratingValue", "")
    rating_count: str = prop("ratingCount", "")


@dataclass(frozen=True, slots=True, kw_only=True)
class Person(Node):
    name: str = prop("name", "")


@dataclass(frozen=True, slots=True, kw_only=True)
class PostalAddress(Node):
    street_address: str = prop("streetAddress", "")


@dataclass(frozen=True, slots=True, kw_only=True)
class Place(Node):
    name: str = prop("name", "")


@dataclass(frozen=True, slots=True, kw_only=True)
class HowToStep(Node):
    text: str = prop("text", "")


@dataclass(frozen=True, slots=True, kw_only=True)
class Mention(Node):
    """Secondary type demoted by policy; ``type`` is always set explicitly."""

    name: str = prop("name", "")


# ---------------------------------------------------------------------------
# Primary entities
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True, kw_only=True)
class Entity(Node):
    """Common head of every primary entity."""

    name: str = prop("name", "")
    url: str = prop("url", "")
    description: str | None = prop("description")
    mentions: tuple[Mention, ...] | None = prop("mentions")


@dataclass(frozen=True, slots=True, kw_only=True)
class Product(Entity):
    offers: Offer | None = prop("offers")
    aggregate_rating: AggregateRating | None = prop("aggregateRating")
    image: str | None = prop("image")


@dataclass(frozen=True, slots=True, kw_only=True)
class Article(Entity):
    """Article, BlogPosting and their subtypes (NewsArticle, TechArticle, Review)."""

    is_part_of: Ref | None = prop("isPartOf")
    author: Person | None = prop("author")
    date_published: str | None = prop("datePublished")
    image: str | None = prop("image")
    publisher: Ref | None = prop("publisher")


@dataclass(frozen=True, slots=True, kw_only=True)
class LocalBusiness(Entity):
    address: PostalAddress | None = prop("address")
    telephone: str | None = prop("telephone")
    opening_hours: tuple[str, ...] | None = prop("openingHours")


@dataclass(frozen=True, slots=True, kw_only=True)
class Event(Entity):
    start_date: str = prop("startDate", "")
    location: Place | None = prop("location")


@dataclass(frozen=True, slots=True, kw_only=True)
class Recipe(Entity):
    recipe_ingredient: tuple[str, ...] = prop("recipeIngredient", ())
    recipe_instructions: tuple[HowToStep, ...] = prop("recipeInstructions", ())
    cook_time: str | None = prop("cookTime")


@dataclass(frozen=True, slots=True, kw_only=True)
class HowTo(Entity):
    step: tuple[HowToStep, ...] = prop("step", ())


@dataclass(frozen=True, slots=True, kw_only=True)
class ItemList(Entity):
    item_list_element: tuple[ListItem, ...] = prop("itemListElement", ())
    number_of_items: int = prop("numberOfItems", 0)


@dataclass(frozen=True, slots=True, kw_only=True)
class WebPage(Entity):
    is_part_of: Ref | None = prop("isPartOf")
    image: str | None = prop("image")


def graph_document(nodes: list[Node]) -> dict[str, Any]:
    """Wrap nodes into a ``@context`` / ``@graph`` JSON-LD document."""
    return {"@context": SCHEMA_CONTEXT, "@graph": [n.to_jsonld() for n in nodes]}
