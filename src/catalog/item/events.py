"""Domain events for the CatalogItem aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from catalog.domain import catalog


@catalog.event(part_of="CatalogItem")
class ItemAdded:
    """A sellable item was added to a seller's catalog."""

    __version__ = 1

    item_id: Identifier(required=True)
    business_id: Identifier(required=True)
    name: String(required=True)
    base_price: Float(required=True)
    category: String(required=True)
    subcategory: String(required=True)
    discount_percentage: Float()
    created_at: DateTime(required=True)


@catalog.event(part_of="CatalogItem")
class ItemDetailsUpdated:
    """Descriptive, price or stock fields of an item changed."""

    __version__ = 1

    item_id: Identifier(required=True)
    name: String()
    base_price: Float()
    in_stock: Boolean()
    quantity: Integer()


@catalog.event(part_of="CatalogItem")
class ItemDiscountChanged:
    """The item's own percentage discount was set, changed or removed."""

    __version__ = 1

    item_id: Identifier(required=True)
    previous_percentage: Float()
    new_percentage: Float(required=True)
    current_price: Float(required=True)


@catalog.event(part_of="CatalogItem")
class ItemRecategorized:
    """The item moved to a different category or subcategory."""

    __version__ = 1

    item_id: Identifier(required=True)
    previous_category: String()
    previous_subcategory: String()
    category: String(required=True)
    subcategory: String(required=True)
