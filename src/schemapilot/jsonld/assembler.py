# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""PolicyResult + NormalizedContent -> ``@graph`` JSON-LD document.

Graph order: Organization, WebSite, optional BreadcrumbList, primary entity.
Organization and WebSite use fixed anchors on the site origin
(``{site}/#organization``, ``{site}/#website``) and are only ever referenced
by ``{"@id": ...}`` pointers from other nodes.

Type-specific properties come from a dispatch table keyed by the policy's
primary type.  All text mining goes through ``extractors``; a miss falls back
to a documented placeholder, so assembly never fails on sparse pages.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from typing import Any
from urllib.parse import urlparse

from .. import NormalizedContent
from ..policy import PolicyResult
from ..vocabulary import Feature
from . import extractors as ex
from .nodes import (
    AggregateRating,
    Article,
    BreadcrumbList,
    Entity,
    Event,
    HowTo,
    HowToStep,
    ItemList,
    ListItem,
    LocalBusiness,
    Mention,
    Node,
    Offer,
    Organization,
    Person,
    Place,
    PostalAddress,
    Product,
    Recipe,
    Ref,
    WebPage,
    WebSite,
    graph_document,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _Site:
    origin: str  # scheme://host[:port]
    host: str  # hostname without leading www.

    @property
    def organization_id(self) -> str:
        return f"{self.origin}/#organization"

    @property
    def website_id(self) -> str:
        return f"{self.origin}/#website"


def _site_for(content: NormalizedContent) -> _Site:
    base = urlparse(content.base_url)
    host = (urlparse(content.url).hostname or "").removeprefix("www.")
    return _Site(origin=f"{base.scheme}://{base.netloc}", host=host)


# ---------------------------------------------------------------------------
# Supporting nodes
# ---------------------------------------------------------------------------


def _organization(site: _Site) -> Organization:
    return Organization(id=site.organization_id, name=site.host, url=site.origin)


def _website(site: _Site, content: NormalizedContent) -> WebSite:
    return WebSite(
        id=site.website_id,
        url=site.origin,
        name=content.meta.og_title or content.title or site.host,
        publisher=Ref(site.organization_id),
    )


def _breadcrumbs(content: NormalizedContent) -> BreadcrumbList | None:
    trail = ex.extract_breadcrumb_trail(content.content)
    if trail is None:
        return None
    return BreadcrumbList(
        id=f"{content.url}#breadcrumbs",
        item_list_element=tuple(ListItem(position=i, name=name) for i, name in enumerate(trail, start=1)),
    )


# ---------------------------------------------------------------------------
# Primary entity builders: each receives the shared head fields
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class _Context:
    policy: PolicyResult
    content: NormalizedContent
    site: _Site
    today: date
    max_items: int

    @property
    def text(self) -> str:
        return self.content.content

    def has(self, feature: str) -> bool:
        return feature in self.policy.features


def _build_product(ctx: _Context, head: dict[str, Any]) -> Entity:
    offers = None
    if ctx.has(Feature.OFFERS):
        offers = Offer(
            price_currency=ex.extract_currency(ctx.text) or ex.DEFAULT_CURRENCY,
            price=ex.extract_price(ctx.text) or ex.PLACEHOLDER_PRICE,
        )
    rating = None
    if ctx.has(Feature.AGGREGATE_RATING):
        rating = AggregateRating(
            rating_value=ex.extract_rating(ctx.text) or ex.PLACEHOLDER_RATING,
            rating_count=ex.extract_rating_count(ctx.text) or ex.PLACEHOLDER_RATING_COUNT,
        )
    return Product(**head, offers=offers, aggregate_rating=rating, image=ctx.content.meta.og_image)


def _build_article(ctx: _Context, head: dict[str, Any]) -> Entity:
    signals = ctx.content.dom_signals
    author = None
    if signals.has_byline:
        author = Person(name=ex.extract_author(ctx.text) or ex.PLACEHOLDER_AUTHOR)
    published = None
    if signals.has_publish_date:
        published = ex.extract_iso_date(ctx.text) or ctx.today.isoformat()
    return Article(
        **head,
        is_part_of=Ref(ctx.site.website_id),
        author=author,
        date_published=published,
        image=ctx.content.meta.og_image,
        publisher=Ref(ctx.site.organization_id),
    )


def _build_local_business(ctx: _Context, head: dict[str, Any]) -> Entity:
    street = ex.extract_street_address(ctx.text)
    # Hours are not parsed from the page yet; the signal only toggles the placeholder.
    hours = ex.PLACEHOLDER_OPENING_HOURS if ctx.content.dom_signals.has_hours else None
    return LocalBusiness(
        **head,
        address=PostalAddress(street_address=street) if street else None,
        telephone=ex.extract_phone(ctx.text),
        opening_hours=hours,
    )


def _build_event(ctx: _Context, head: dict[str, Any]) -> Entity:
    # startDate and location are always emitted, real or not.
    return Event(
        **head,
        start_date=ex.extract_iso_date(ctx.text) or ctx.today.isoformat(),
        location=Place(name=ex.PLACEHOLDER_EVENT_LOCATION),
    )


def _build_recipe(ctx: _Context, head: dict[str, Any]) -> Entity:
    ingredients = ex.extract_ingredients(ctx.text) or list(ex.PLACEHOLDER_INGREDIENTS)
    steps = ex.extract_numbered_steps(ctx.text) or [ex.PLACEHOLDER_RECIPE_STEP]
    return Recipe(
        **head,
        recipe_ingredient=tuple(ingredients),
        recipe_instructions=tuple(HowToStep(text=s) for s in steps),
        cook_time=ex.extract_cook_time(ctx.text),
    )


def _build_howto(ctx: _Context, head: dict[str, Any]) -> Entity:
    steps = ex.extract_howto_steps(ctx.text) or [ex.PLACEHOLDER_HOWTO_STEP]
    return HowTo(**head, step=tuple(HowToStep(text=s) for s in steps))


def _build_item_list(ctx: _Context, head: dict[str, Any]) -> Entity:
    names = ex.extract_list_items(ctx.text, limit=ctx.max_items) or [ex.PLACEHOLDER_LIST_ITEM]
    items = tuple(ListItem(position=i, name=name) for i, name in enumerate(names, start=1))
    return ItemList(**head, item_list_element=items, number_of_items=len(items))


def _build_web_page(ctx: _Context, head: dict[str, Any]) -> Entity:
    return WebPage(**head, is_part_of=Ref(ctx.site.website_id), image=ctx.content.meta.og_image)


_BUILDERS: dict[str, Callable[[_Context, dict[str, Any]], Entity]] = {
    "Product": _build_product,
    "Article": _build_article,
    "BlogPosting": _build_article,
    "LocalBusiness": _build_local_business,
    "Event": _build_event,
    "Recipe": _build_recipe,
    "HowTo": _build_howto,
    "ItemList": _build_item_list,
}


def _primary_entity(ctx: _Context) -> Entity:
    policy, content = ctx.policy, ctx.content
    mentions = None
    if policy.mentions:
        mentions = tuple(Mention(type=m, name=content.title) for m in policy.mentions)
    head: dict[str, Any] = {
        "type": policy.entity_type,
        "id": f"{content.url}#{policy.primary_type.lower()}",
        "name": content.title,
        "url": content.url,
        "description": content.description or None,
        "mentions": mentions,
    }
    builder = _BUILDERS.get(policy.primary_type, _build_web_page)
    return builder(ctx, head)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def assemble(
    policy: PolicyResult,
    content: NormalizedContent,
    *,
    today: date | None = None,
    max_items: int | None = None,
) -> dict[str, Any]:
    """Render the policy decision as a JSON-LD ``@graph`` document.

    Args:
        policy: final type/feature decision
        content: normalized page the decision was made on
        today: date used when an Event/Article date cannot be found
            (defaults to the current date; inject it for reproducible output)
        max_items: optional cap on ItemList entries, never above 10

    Returns:
        ``{"@context": "https://schema.org", "@graph": [...]}``
    """
    site = _site_for(content)
    limit = ex.MAX_LIST_ITEMS if max_items is None else max(1, min(max_items, ex.MAX_LIST_ITEMS))
    ctx = _Context(policy=policy, content=content, site=site, today=today or date.today(), max_items=limit)

    graph: list[Node] = [_organization(site), _website(site, content)]
    if Feature.BREADCRUMBS in policy.features:
        crumbs = _breadcrumbs(content)
        if crumbs is not None:
            graph.append(crumbs)
        else:
            logger.debug("Breadcrumbs feature set but no trail found on %s", content.url)
    graph.append(_primary_entity(ctx))
    return graph_document(graph)
