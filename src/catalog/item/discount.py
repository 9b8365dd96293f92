"""Item discount management — commands and handler."""

from protean import handle
from protean.fields import Float, Identifier
from protean.utils.globals import current_domain

from catalog.domain import catalog
from catalog.item.item import CatalogItem
from catalog.item.lookup import owned_item


@catalog.command(part_of="CatalogItem")
class ApplyItemDiscount:
    business_id: Identifier(required=True)
    item_id: Identifier(required=True)
    discount_percentage: Float(required=True)


@catalog.command(part_of="CatalogItem")
class SetDiscountedPrice:
    business_id: Identifier(required=True)
    item_id: Identifier(required=True)
    discounted_price: Float(required=True)


@catalog.command(part_of="CatalogItem")
class RemoveItemDiscount:
    business_id: Identifier(required=True)
    item_id: Identifier(required=True)


@catalog.command_handler(part_of=CatalogItem)
class ItemDiscountHandler:
    @handle(ApplyItemDiscount)
    def apply_discount(self, command):
        repo = current_domain.repository_for(CatalogItem)
        item = owned_item(command.business_id, command.item_id)
        item.apply_discount(command.discount_percentage)
        repo.add(item)

    @handle(SetDiscountedPrice)
    def set_discounted_price(self, command):
        repo = current_domain.repository_for(CatalogItem)
        item = owned_item(command.business_id, command.item_id)
        item.set_discounted_price(command.discounted_price)
        repo.add(item)

    @handle(RemoveItemDiscount)
    def remove_discount(self, command):
        repo = current_domain.repository_for(CatalogItem)
        item = owned_item(command.business_id, command.item_id)
        item.remove_discount()
        repo.add(item)
