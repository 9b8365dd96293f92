"""Application tests for offer management commands."""

from datetime import UTC, datetime, timedelta

import pytest
from catalog.item.management import AddItem
from catalog.offer.management import CreateOffer, DeleteOffer, ToggleOfferStatus, UpdateOffer
from catalog.offer.offer import Offer
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _add_item(business_id="biz-001"):
    return current_domain.process(
        AddItem(business_id=business_id, name="Samosa", base_price=30.0),
        asynchronous=False,
    )


def _create_offer(item_id, business_id="biz-001", **overrides):
    defaults = {
        "business_id": business_id,
        "item_id": item_id,
        "offer_type": "bulk-price",
        "title": "4 for 100",
        "purchase_quantity": 4,
        "discounted_price": 100.0,
    }
    defaults.update(overrides)
    return current_domain.process(CreateOffer(**defaults), asynchronous=False)


def _get(offer_id):
    return current_domain.repository_for(Offer).get(offer_id)


class TestCreateOfferCommand:
    def test_create_persists(self):
        item_id = _add_item()
        offer_id = _create_offer(item_id)
        offer = _get(offer_id)
        assert offer.title == "4 for 100"
        assert offer.is_active is True
        assert offer.terms.discounted_price == 100.0

    def test_missing_item_reference(self):
        with pytest.raises(ValidationError) as exc:
            _create_offer(None)
        assert "item_id" in exc.value.messages

    def test_item_of_another_seller_is_not_found(self):
        item_id = _add_item(business_id="biz-002")
        with pytest.raises(ObjectNotFoundError):
            _create_offer(item_id)

    def test_date_ordering(self):
        item_id = _add_item()
        start = datetime.now(UTC) + timedelta(days=2)
        with pytest.raises(ValidationError) as exc:
            _create_offer(item_id, start_date=start, end_date=start - timedelta(days=1))
        assert "end_date" in exc.value.messages


class TestUpdateOfferCommand:
    def test_update_persists(self):
        item_id = _add_item()
        offer_id = _create_offer(item_id)
        current_domain.process(
            UpdateOffer(business_id="biz-001", offer_id=offer_id, title="Five for 120", purchase_quantity=5,
                        discounted_price=120.0),
            asynchronous=False,
        )
        offer = _get(offer_id)
        assert offer.title == "Five for 120"
        assert offer.terms.purchase_quantity == 5

    def test_switch_type_revalidates(self):
        item_id = _add_item()
        offer_id = _create_offer(item_id)
        with pytest.raises(ValidationError):
            current_domain.process(
                UpdateOffer(business_id="biz-001", offer_id=offer_id, offer_type="buy-x-get-y-free", buy_quantity=2),
                asynchronous=False,
            )
        assert _get(offer_id).offer_type == "bulk-price"

    def test_other_seller_cannot_update(self):
        item_id = _add_item()
        offer_id = _create_offer(item_id)
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(
                UpdateOffer(business_id="biz-002", offer_id=offer_id, title="Mine now"),
                asynchronous=False,
            )


class TestToggleAndDelete:
    def test_toggle_returns_state(self):
        item_id = _add_item()
        offer_id = _create_offer(item_id)
        state = current_domain.process(ToggleOfferStatus(business_id="biz-001", offer_id=offer_id), asynchronous=False)
        assert state is False
        assert _get(offer_id).is_active is False

    def test_delete(self):
        item_id = _add_item()
        offer_id = _create_offer(item_id)
        current_domain.process(DeleteOffer(business_id="biz-001", offer_id=offer_id), asynchronous=False)
        with pytest.raises(ObjectNotFoundError):
            _get(offer_id)
