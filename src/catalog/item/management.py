"""Single-item management — commands and handler."""

from protean import handle
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from catalog.domain import catalog
from catalog.item.item import CatalogItem
from catalog.item.lookup import owned_item
from catalog.utils.logging import get_logger

logger = get_logger(__name__)


@catalog.command(part_of="CatalogItem")
class AddItem:
    business_id: Identifier(required=True)
    name: String(required=True, max_length=200)
    base_price: Float(required=True)
    category: String(max_length=100)
    subcategory: String(max_length=100)
    discount_percentage: Float(default=0.0)
    description: Text()
    food_type: String(max_length=10)
    unit: String(max_length=10)
    in_stock: Boolean(default=True)
    quantity: Integer()


@catalog.command(part_of="CatalogItem")
class UpdateItem:
    business_id: Identifier(required=True)
    item_id: Identifier(required=True)
    name: String(max_length=200)
    base_price: Float()
    category: String(max_length=100)
    subcategory: String(max_length=100)
    discount_percentage: Float()
    description: Text()
    food_type: String(max_length=10)
    unit: String(max_length=10)
    in_stock: Boolean()
    quantity: Integer()


@catalog.command(part_of="CatalogItem")
class RemoveItem:
    business_id: Identifier(required=True)
    item_id: Identifier(required=True)


@catalog.command_handler(part_of=CatalogItem)
class ManageItemHandler:
    @handle(AddItem)
    def add_item(self, command):
        item = CatalogItem.create(
            business_id=command.business_id,
            name=command.name,
            base_price=command.base_price,
            category=command.category,
            subcategory=command.subcategory,
            discount_percentage=command.discount_percentage,
            description=command.description,
            food_type=command.food_type,
            unit=command.unit,
            in_stock=command.in_stock,
            quantity=command.quantity,
        )
        current_domain.repository_for(CatalogItem).add(item)
        logger.info("Catalog item added", item_id=str(item.id), business_id=str(command.business_id))
        return str(item.id)

    @handle(UpdateItem)
    def update_item(self, command):
        repo = current_domain.repository_for(CatalogItem)
        item = owned_item(command.business_id, command.item_id)
        item.update_details(
            name=command.name,
            description=command.description,
            base_price=command.base_price,
            food_type=command.food_type,
            unit=command.unit,
            in_stock=command.in_stock,
            quantity=command.quantity,
            category=command.category,
            subcategory=command.subcategory,
            discount_percentage=command.discount_percentage,
        )
        repo.add(item)

    @handle(RemoveItem)
    def remove_item(self, command):
        repo = current_domain.repository_for(CatalogItem)
        item = owned_item(command.business_id, command.item_id)
        repo._dao.delete(item)
        logger.info("Catalog item removed", item_id=str(command.item_id), business_id=str(command.business_id))
