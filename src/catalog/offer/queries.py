"""Read-side offer listings for sellers and customers."""

import math
from dataclasses import dataclass
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from catalog.item.grouping import normalize_category
from catalog.item.item import CatalogItem
from catalog.item.lookup import items_for
from catalog.offer.engine import OfferStatus, is_honourable, offer_status, parse_status
from catalog.offer.offer import Offer, as_utc
from catalog.offer.selection import select_offer_for_checkout

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50
DEFAULT_PUBLIC_LIMIT = 10


@dataclass(frozen=True)
class OfferPage:
    offers: tuple
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0

    @property
    def has_more(self) -> bool:
        return self.page * self.limit < self.total


@dataclass(frozen=True)
class ItemOffers:
    item: CatalogItem
    offers: tuple
    recommended: tuple | None = None  # (offer, SavingsEvaluation)


def _newest_first(offers):
    return sorted(offers, key=lambda offer: as_utc(offer.created_at), reverse=True)


def _offers_where(**filters) -> list[Offer]:
    return current_domain.repository_for(Offer)._dao.query.filter(**filters).all().items


def business_offers(
    business_id, status=OfferStatus.ACTIVE.value, page=1, limit=DEFAULT_PAGE_SIZE, now=None
) -> OfferPage:
    """One page of a seller's offers in one status bucket, newest first.

    The bucket defaults to ``active``. ``page`` and ``limit`` are clamped into
    range rather than rejected.
    """
    page = max(1, page)
    limit = min(MAX_PAGE_SIZE, max(1, limit))
    bucket = parse_status(status) or OfferStatus.ACTIVE
    now = as_utc(now) or datetime.now(UTC)

    offers = _offers_where(business_id=str(business_id))
    offers = [offer for offer in offers if offer_status(offer, now) is bucket]
    offers = _newest_first(offers)

    start = (page - 1) * limit
    return OfferPage(offers=tuple(offers[start : start + limit]), total=len(offers), page=page, limit=limit)


def item_offers(item_id, include_inactive=False, now=None) -> ItemOffers:
    """Offers for one item plus the one checkout would apply."""
    now = as_utc(now) or datetime.now(UTC)
    item = current_domain.repository_for(CatalogItem).get(item_id)

    offers = _offers_where(item_id=str(item_id))
    if not include_inactive:
        offers = [offer for offer in offers if is_honourable(offer, now)]
    offers = _newest_first(offers)

    recommended = select_offer_for_checkout(offers, item.current_price, now)
    return ItemOffers(item=item, offers=tuple(offers), recommended=recommended)


def public_business_offers(business_id, category=None, limit=DEFAULT_PUBLIC_LIMIT, now=None):
    """Honourable offers of a seller, optionally limited to one item category.

    Returns ``(offer, item)`` pairs, newest first.
    """
    if limit < 1 or limit > MAX_PAGE_SIZE:
        raise ValidationError({"limit": [f"Limit must be between 1 and {MAX_PAGE_SIZE}"]})
    now = as_utc(now) or datetime.now(UTC)

    items = {str(item.id): item for item in items_for(business_id)}
    if category:
        category = normalize_category(category)
        items = {item_id: item for item_id, item in items.items() if item.category == category}

    offers = [
        offer
        for offer in _offers_where(business_id=str(business_id))
        if str(offer.item_id) in items and is_honourable(offer, now)
    ]
    return [(offer, items[str(offer.item_id)]) for offer in _newest_first(offers)[:limit]]
