"""Application tests for catalog item commands."""

import json

import pytest
from catalog.item.bulk import BulkAddItems, BulkRemoveItems, RenameCategory, RenameSubcategory
from catalog.item.discount import ApplyItemDiscount, RemoveItemDiscount, SetDiscountedPrice
from catalog.item.item import CatalogItem
from catalog.item.lookup import items_for
from catalog.item.management import AddItem, RemoveItem, UpdateItem
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _add_item(**overrides):
    defaults = {
        "business_id": "biz-001",
        "name": "Veg Biryani",
        "base_price": 180.0,
        "category": "Mains",
        "subcategory": "Rice",
    }
    defaults.update(overrides)
    return current_domain.process(AddItem(**defaults), asynchronous=False)


def _get(item_id):
    return current_domain.repository_for(CatalogItem).get(item_id)


class TestAddItemCommand:
    def test_add_item_persists(self):
        item_id = _add_item()
        item = _get(item_id)
        assert item.name == "Veg Biryani"
        assert item.category == "mains"

    def test_invalid_discount_rejected(self):
        with pytest.raises(ValidationError):
            _add_item(discount_percentage=100.0)
        assert items_for("biz-001") == []


class TestUpdateItemCommand:
    def test_update_persists(self):
        item_id = _add_item()
        current_domain.process(
            UpdateItem(business_id="biz-001", item_id=item_id, base_price=200.0, in_stock=False),
            asynchronous=False,
        )
        item = _get(item_id)
        assert item.base_price == 200.0
        assert item.in_stock is False

    def test_other_sellers_item_is_not_found(self):
        item_id = _add_item()
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(
                UpdateItem(business_id="biz-999", item_id=item_id, name="Hijacked"),
                asynchronous=False,
            )
        assert _get(item_id).name == "Veg Biryani"


class TestRemoveItemCommand:
    def test_remove(self):
        item_id = _add_item()
        current_domain.process(RemoveItem(business_id="biz-001", item_id=item_id), asynchronous=False)
        with pytest.raises(ObjectNotFoundError):
            _get(item_id)

    def test_remove_missing_item(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(RemoveItem(business_id="biz-001", item_id="nope"), asynchronous=False)


class TestDiscountCommands:
    def test_apply_discount(self):
        item_id = _add_item(base_price=200.0)
        current_domain.process(
            ApplyItemDiscount(business_id="biz-001", item_id=item_id, discount_percentage=25.0),
            asynchronous=False,
        )
        assert float(_get(item_id).current_price) == 150.0

    def test_apply_discount_out_of_range(self):
        item_id = _add_item()
        with pytest.raises(ValidationError):
            current_domain.process(
                ApplyItemDiscount(business_id="biz-001", item_id=item_id, discount_percentage=150.0),
                asynchronous=False,
            )

    def test_set_discounted_price(self):
        item_id = _add_item(base_price=200.0)
        current_domain.process(
            SetDiscountedPrice(business_id="biz-001", item_id=item_id, discounted_price=160.0),
            asynchronous=False,
        )
        assert _get(item_id).discount_percentage == 20.0

    def test_remove_discount(self):
        item_id = _add_item(discount_percentage=10.0)
        current_domain.process(RemoveItemDiscount(business_id="biz-001", item_id=item_id), asynchronous=False)
        assert _get(item_id).discount_percentage == 0.0


class TestBulkCommands:
    def test_bulk_add_returns_ids(self):
        items = [{"name": "Tea", "base_price": 20}, {"name": "Coffee", "base_price": 30, "category": "Drinks"}]
        ids = current_domain.process(
            BulkAddItems(business_id="biz-001", items=json.dumps(items)),
            asynchronous=False,
        )
        assert len(ids) == 2
        assert [item.name for item in items_for("biz-001")] == ["Tea", "Coffee"]

    def test_bulk_add_is_all_or_nothing(self):
        items = [{"name": "Tea", "base_price": 20}, {"name": "Broken", "base_price": 10, "discount_percentage": 100}]
        with pytest.raises(ValidationError) as exc:
            current_domain.process(BulkAddItems(business_id="biz-001", items=json.dumps(items)), asynchronous=False)
        assert "Item 1" in exc.value.messages["items"][0]
        assert items_for("biz-001") == []

    def test_bulk_remove_counts_actual_deletions(self):
        first = _add_item(name="A")
        second = _add_item(name="B")
        deleted = current_domain.process(
            BulkRemoveItems(business_id="biz-001", item_ids=json.dumps([first, second, "gone"])),
            asynchronous=False,
        )
        assert deleted == 2

    def test_bulk_remove_skips_other_sellers_items(self):
        mine = _add_item(name="Mine")
        theirs = _add_item(business_id="biz-002", name="Theirs")
        deleted = current_domain.process(
            BulkRemoveItems(business_id="biz-001", item_ids=json.dumps([mine, theirs])),
            asynchronous=False,
        )
        assert deleted == 1
        assert _get(theirs).name == "Theirs"

    def test_rename_category(self):
        _add_item(name="A", category="Mains")
        _add_item(name="B", category="mains ")
        _add_item(name="C", category="Drinks")
        updated = current_domain.process(
            RenameCategory(business_id="biz-001", old_name="MAINS", new_name="Main Course"),
            asynchronous=False,
        )
        assert updated == 2
        assert sorted({item.category for item in items_for("biz-001")}) == ["drinks", "main course"]

    def test_rename_subcategory_scoped_to_category(self):
        _add_item(name="A", category="Mains", subcategory="Specials")
        _add_item(name="B", category="Drinks", subcategory="Specials")
        updated = current_domain.process(
            RenameSubcategory(business_id="biz-001", old_name="specials", new_name="Chef", category="Drinks"),
            asynchronous=False,
        )
        assert updated == 1
        subs = {item.name: item.subcategory for item in items_for("biz-001")}
        assert subs == {"A": "specials", "B": "chef"}
