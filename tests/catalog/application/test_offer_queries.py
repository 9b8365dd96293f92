"""Application tests for offer listings."""

from datetime import UTC, datetime, timedelta

import pytest
from catalog.item.management import AddItem
from catalog.offer.engine import OfferStatus
from catalog.offer.management import CreateOffer, ToggleOfferStatus
from catalog.offer.queries import MAX_PAGE_SIZE, business_offers, item_offers, public_business_offers
from protean import current_domain
from protean.exceptions import ValidationError


def _add_item(name="Samosa", category=None, base_price=30.0, business_id="biz-001"):
    return current_domain.process(
        AddItem(business_id=business_id, name=name, base_price=base_price, category=category),
        asynchronous=False,
    )


def _create_offer(item_id, business_id="biz-001", **overrides):
    defaults = {
        "business_id": business_id,
        "item_id": item_id,
        "offer_type": "bulk-price",
        "title": "Deal",
        "purchase_quantity": 2,
        "discounted_price": 50.0,
    }
    defaults.update(overrides)
    return current_domain.process(CreateOffer(**defaults), asynchronous=False)


class TestBusinessOffers:
    def test_newest_first_with_pagination(self):
        item_id = _add_item()
        ids = [_create_offer(item_id, title=f"Deal {n}") for n in range(5)]

        page = business_offers("biz-001", page=1, limit=2)
        assert [str(o.id) for o in page.offers] == [ids[4], ids[3]]
        assert page.total == 5
        assert page.total_pages == 3
        assert page.has_more is True

        last = business_offers("biz-001", page=3, limit=2)
        assert [str(o.id) for o in last.offers] == [ids[0]]
        assert last.has_more is False

    def test_status_filter(self):
        item_id = _add_item()
        now = datetime.now(UTC)
        active = _create_offer(item_id)
        upcoming = _create_offer(item_id, start_date=now + timedelta(days=3))
        expired = _create_offer(item_id, start_date=now - timedelta(days=3), end_date=now - timedelta(days=1))

        assert [str(o.id) for o in business_offers("biz-001", status="active").offers] == [active]
        assert [str(o.id) for o in business_offers("biz-001", status="upcoming").offers] == [upcoming]
        assert [str(o.id) for o in business_offers("biz-001", status=OfferStatus.EXPIRED.value).offers] == [expired]

    def test_only_own_offers(self):
        _create_offer(_add_item(business_id="biz-002"), business_id="biz-002")
        assert business_offers("biz-001").total == 0

    def test_default_listing_shows_only_active_offers(self):
        item_id = _add_item()
        live = _create_offer(item_id)
        switched_off = _create_offer(item_id)
        current_domain.process(ToggleOfferStatus(business_id="biz-001", offer_id=switched_off), asynchronous=False)

        page = business_offers("biz-001")
        assert [str(o.id) for o in page.offers] == [str(live)]
        assert page.total == 1

    def test_out_of_range_paging_is_clamped(self):
        item_id = _add_item()
        _create_offer(item_id)

        page = business_offers("biz-001", page=0, limit=MAX_PAGE_SIZE + 10)
        assert page.page == 1
        assert page.limit == MAX_PAGE_SIZE
        assert business_offers("biz-001", limit=0).limit == 1

    def test_status_is_case_insensitive(self):
        item_id = _add_item()
        _create_offer(item_id)
        assert business_offers("biz-001", status=" Active ").total == 1

    def test_unknown_status(self):
        with pytest.raises(ValidationError):
            business_offers("biz-001", status="old")


class TestItemOffers:
    def test_lists_honourable_offers_and_recommends_best(self):
        item_id = _add_item(base_price=30.0)
        small = _create_offer(item_id, purchase_quantity=2, discounted_price=50.0)  # saves 5 a unit
        big = _create_offer(item_id, purchase_quantity=4, discounted_price=80.0)  # saves 10 a unit
        _create_offer(item_id, is_active=False)

        result = item_offers(item_id)
        assert {str(o.id) for o in result.offers} == {small, big}
        offer, evaluation = result.recommended
        assert str(offer.id) == big
        assert float(evaluation.unit_saving) == 10.0

    def test_include_inactive(self):
        item_id = _add_item()
        _create_offer(item_id, is_active=False)
        assert len(item_offers(item_id).offers) == 0
        assert len(item_offers(item_id, include_inactive=True).offers) == 1
        assert item_offers(item_id, include_inactive=True).recommended is None


class TestPublicBusinessOffers:
    def test_filters_by_category_and_limit(self):
        tea = _add_item(name="Tea", category="Drinks")
        samosa = _add_item(name="Samosa", category="Snacks")
        for _ in range(3):
            _create_offer(tea)
        _create_offer(samosa)

        drinks = public_business_offers("biz-001", category=" DRINKS ")
        assert len(drinks) == 3
        assert all(item.name == "Tea" for _, item in drinks)

        assert len(public_business_offers("biz-001", limit=2)) == 2

    def test_hides_expired_offers(self):
        item_id = _add_item()
        now = datetime.now(UTC)
        _create_offer(item_id, start_date=now - timedelta(days=3), end_date=now - timedelta(days=1))
        assert public_business_offers("biz-001") == []
