"""Tests for the checkout offer selection policy."""

from datetime import UTC, datetime, timedelta

from catalog.offer.offer import Offer
from catalog.offer.selection import select_offer_for_checkout

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=UTC)


def _bulk(quantity, price, start=None, end=None, active=True):
    spec = {
        "item_id": "item-001",
        "offer_type": "bulk-price",
        "title": f"{quantity} for {price}",
        "purchase_quantity": quantity,
        "discounted_price": price,
        "start_date": start or NOW - timedelta(days=1),
        "end_date": end,
    }
    return Offer.create("biz-001", spec, is_active=active)


def _bxgy(buy, free, start=None, end=None):
    spec = {
        "item_id": "item-001",
        "offer_type": "buy-x-get-y-free",
        "title": f"Buy {buy} get {free}",
        "buy_quantity": buy,
        "free_quantity": free,
        "start_date": start or NOW - timedelta(days=1),
        "end_date": end,
    }
    return Offer.create("biz-001", spec)


class TestSelectOfferForCheckout:
    def test_no_offers(self):
        assert select_offer_for_checkout([], 100, NOW) is None

    def test_greatest_unit_saving_wins(self):
        bulk = _bulk(3, 240.0)  # saves 20 per unit
        bxgy = _bxgy(2, 1)  # saves 33.33 per unit at 100
        offer, evaluation = select_offer_for_checkout([bulk, bxgy], 100, NOW)
        assert offer is bxgy
        assert evaluation.effective_unit_price < 100

    def test_non_positive_savings_never_recommended(self):
        assert select_offer_for_checkout([_bulk(2, 200.0), _bulk(2, 250.0)], 100, NOW) is None

    def test_ignores_inactive_expired_and_upcoming(self):
        offers = [
            _bulk(2, 100.0, active=False),
            _bulk(2, 100.0, end=NOW - timedelta(seconds=1)),
            _bulk(2, 100.0, start=NOW + timedelta(days=1)),
        ]
        assert select_offer_for_checkout(offers, 100, NOW) is None

    def test_tie_goes_to_earliest_end_date(self):
        open_ended = _bulk(2, 150.0)
        ending_soon = _bulk(2, 150.0, end=NOW + timedelta(days=1))
        ending_later = _bulk(2, 150.0, end=NOW + timedelta(days=5))
        offer, _ = select_offer_for_checkout([open_ended, ending_later, ending_soon], 100, NOW)
        assert offer is ending_soon

    def test_tie_then_earliest_start(self):
        newer = _bulk(2, 150.0, start=NOW - timedelta(days=1))
        older = _bulk(2, 150.0, start=NOW - timedelta(days=7))
        offer, _ = select_offer_for_checkout([newer, older], 100, NOW)
        assert offer is older
