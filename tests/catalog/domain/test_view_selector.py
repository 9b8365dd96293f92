"""Tests for choosing between the flat and grouped catalog views."""

from catalog.item.grouping import CategoryGroup
from catalog.item.item import CatalogItem
from catalog.item.view_selector import CatalogMode, resolve_scope, select_view


def _items():
    return [
        CatalogItem.create(business_id="biz-001", name="Lassi", base_price=60, category="Drinks"),
        CatalogItem.create(business_id="biz-001", name="Papad", base_price=20),
    ]


class TestResolveScope:
    def test_own_identity_is_self_mode(self):
        scope = resolve_scope("biz-001")
        assert scope.mode is CatalogMode.SELF
        assert scope.business_id == "biz-001"
        assert scope.is_admin is False

    def test_owner_reference_is_admin_mode(self):
        scope = resolve_scope("admin-7", owner_id="biz-001")
        assert scope.mode is CatalogMode.ADMIN
        assert scope.business_id == "biz-001"

    def test_owner_reference_without_identity(self):
        scope = resolve_scope(None, owner_id="biz-001")
        assert scope.is_admin is True
        assert scope.business_id == "biz-001"

    def test_no_identity_and_no_owner(self):
        assert resolve_scope(None) is None
        assert resolve_scope("", owner_id="") is None


class TestSelectView:
    def test_self_mode_gets_flat_list(self):
        items = _items()
        view = select_view(resolve_scope("biz-001"), items=items)
        assert view == items

    def test_admin_mode_gets_grouped_view(self):
        items = _items()
        view = select_view(resolve_scope("admin-7", owner_id="biz-001"), items=items)
        assert all(isinstance(group, CategoryGroup) for group in view)
        assert [group.name for group in view] == ["uncategorized", "drinks"]

    def test_both_views_share_item_objects(self):
        items = _items()
        grouped = select_view(resolve_scope("biz-001"), items=items, grouped=True)
        assert grouped[1].subcategories[0].items[0] is items[0]
