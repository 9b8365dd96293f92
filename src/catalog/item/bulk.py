"""Bulk item operations — commands and handler.

Bulk additions are all-or-nothing: every entry is validated before any of
them is stored. Bulk removals skip identifiers that no longer exist and
report how many records were actually deleted.
"""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from catalog.domain import catalog
from catalog.item.grouping import normalize_category, normalize_subcategory
from catalog.item.item import CatalogItem
from catalog.item.lookup import items_for, owned_item
from catalog.utils.logging import get_logger

logger = get_logger(__name__)

_ITEM_FIELDS = (
    "name",
    "base_price",
    "category",
    "subcategory",
    "discount_percentage",
    "description",
    "food_type",
    "unit",
    "in_stock",
    "quantity",
)


@catalog.command(part_of="CatalogItem")
class BulkAddItems:
    business_id: Identifier(required=True)
    items: Text(required=True)  # JSON: list of item field dicts


@catalog.command(part_of="CatalogItem")
class BulkRemoveItems:
    business_id: Identifier(required=True)
    item_ids: Text(required=True)  # JSON: list of item ids


@catalog.command(part_of="CatalogItem")
class RenameCategory:
    business_id: Identifier(required=True)
    old_name: String(required=True, max_length=100)
    new_name: String(required=True, max_length=100)


@catalog.command(part_of="CatalogItem")
class RenameSubcategory:
    business_id: Identifier(required=True)
    old_name: String(required=True, max_length=100)
    new_name: String(required=True, max_length=100)
    category: String(max_length=100)  # Restrict the rename to one category


def _load_json_list(value, field_name):
    payload = json.loads(value) if isinstance(value, str) else value
    if not isinstance(payload, list) or not payload:
        raise ValidationError({field_name: ["Provide a non-empty list"]})
    return payload


@catalog.command_handler(part_of=CatalogItem)
class BulkItemHandler:
    @handle(BulkAddItems)
    def bulk_add_items(self, command):
        entries = _load_json_list(command.items, "items")

        created = []
        for index, entry in enumerate(entries):
            fields = {key: entry.get(key) for key in _ITEM_FIELDS if key in entry}
            try:
                created.append(CatalogItem.create(business_id=command.business_id, **fields))
            except (TypeError, ValidationError) as exc:
                detail = exc.messages if isinstance(exc, ValidationError) else str(exc)
                raise ValidationError({"items": [f"Item {index}: {detail}"]}) from None

        repo = current_domain.repository_for(CatalogItem)
        for item in created:
            repo.add(item)

        logger.info("Catalog items added in bulk", business_id=str(command.business_id), count=len(created))
        return [str(item.id) for item in created]

    @handle(BulkRemoveItems)
    def bulk_remove_items(self, command):
        item_ids = _load_json_list(command.item_ids, "item_ids")
        repo = current_domain.repository_for(CatalogItem)

        deleted = 0
        for item_id in dict.fromkeys(str(i) for i in item_ids):
            try:
                item = owned_item(command.business_id, item_id)
            except ObjectNotFoundError:
                continue
            repo._dao.delete(item)
            deleted += 1

        if deleted < len(item_ids):
            logger.warning(
                "Bulk removal deleted fewer items than requested",
                business_id=str(command.business_id),
                requested=len(item_ids),
                deleted=deleted,
            )
        return deleted

    @handle(RenameCategory)
    def rename_category(self, command):
        old_name = normalize_category(command.old_name)
        return self._rewrite(
            command.business_id,
            lambda item: item.category == old_name,
            category=command.new_name,
        )

    @handle(RenameSubcategory)
    def rename_subcategory(self, command):
        old_name = normalize_subcategory(command.old_name)
        category = normalize_category(command.category) if command.category else None
        return self._rewrite(
            command.business_id,
            lambda item: item.subcategory == old_name and (category is None or item.category == category),
            subcategory=command.new_name,
        )

    @staticmethod
    def _rewrite(business_id, matches, category=None, subcategory=None):
        repo = current_domain.repository_for(CatalogItem)
        updated = 0
        for item in items_for(business_id):
            if not matches(item):
                continue
            item.recategorize(category=category, subcategory=subcategory)
            repo.add(item)
            updated += 1
        return updated
