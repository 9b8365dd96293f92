"""Seller-scoped reads of the flat item collection."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from catalog.item.item import CatalogItem


def items_for(business_id) -> list[CatalogItem]:
    """Every item of one seller, oldest first."""
    repo = current_domain.repository_for(CatalogItem)
    items = repo._dao.query.filter(business_id=str(business_id)).all().items
    return sorted(items, key=lambda item: item.created_at)


def owned_item(business_id, item_id) -> CatalogItem:
    """Load an item, treating another seller's item as missing."""
    item = current_domain.repository_for(CatalogItem).get(item_id)
    if str(item.business_id) != str(business_id):
        raise ObjectNotFoundError(f"Item {item_id} not found for business {business_id}")
    return item
