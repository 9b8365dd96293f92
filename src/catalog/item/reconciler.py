"""Catalog reconciler — applies mutations to a seller's flat item collection
and rebuilds the grouped view from the complete result.

One reconciler is constructed per request or session for one seller. It keeps
the last good flat snapshot and its grouping; a failed mutation leaves both
untouched, except that a stale identifier triggers a fresh read of the flat
collection.
"""

import json
from dataclasses import dataclass, field

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from catalog.item.bulk import BulkAddItems, BulkRemoveItems, RenameCategory, RenameSubcategory
from catalog.item.discount import ApplyItemDiscount, RemoveItemDiscount, SetDiscountedPrice
from catalog.item.grouping import CategoryGroup, group_items, normalize_category
from catalog.item.lookup import items_for
from catalog.item.management import AddItem, RemoveItem, UpdateItem
from catalog.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Reconciliation:
    """Outcome of one catalog mutation."""

    succeeded: bool
    categories: tuple[CategoryGroup, ...] = ()
    affected_count: int = 0
    requested_count: int = 0
    created_ids: tuple[str, ...] = ()
    errors: dict = field(default_factory=dict)
    not_found: bool = False

    @property
    def partial(self) -> bool:
        """A bulk removal that deleted fewer records than were requested."""
        return self.succeeded and self.affected_count < self.requested_count


class CatalogReconciler:
    def __init__(self, business_id):
        self.business_id = str(business_id)
        self.items = []
        self.categories = []

    def refresh(self) -> list[CategoryGroup]:
        self.items = items_for(self.business_id)
        self.categories = group_items(self.items)
        return self.categories

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def add(self, **fields) -> Reconciliation:
        return self._apply(
            AddItem,
            fields,
            requested=1,
            count=lambda result: 1,
            created=lambda result: (result,),
        )

    def bulk_add(self, items) -> Reconciliation:
        items = list(items)
        return self._apply(
            BulkAddItems,
            {"items": json.dumps(items)},
            requested=len(items),
            count=len,
            created=tuple,
        )

    def update(self, item_id, **patch) -> Reconciliation:
        return self._apply(UpdateItem, {"item_id": item_id, **patch}, requested=1)

    def apply_discount(self, item_id, discount_percentage) -> Reconciliation:
        return self._apply(
            ApplyItemDiscount,
            {"item_id": item_id, "discount_percentage": discount_percentage},
            requested=1,
        )

    def set_discounted_price(self, item_id, discounted_price) -> Reconciliation:
        return self._apply(
            SetDiscountedPrice,
            {"item_id": item_id, "discounted_price": discounted_price},
            requested=1,
        )

    def remove_discount(self, item_id) -> Reconciliation:
        return self._apply(RemoveItemDiscount, {"item_id": item_id}, requested=1)

    def remove(self, item_id) -> Reconciliation:
        return self._apply(RemoveItem, {"item_id": item_id}, requested=1)

    def bulk_remove(self, item_ids) -> Reconciliation:
        item_ids = [str(i) for i in item_ids]
        return self._apply(
            BulkRemoveItems,
            {"item_ids": json.dumps(item_ids)},
            requested=len(item_ids),
            count=lambda deleted: deleted,
        )

    def rename_category(self, old_name, new_name) -> Reconciliation:
        return self._apply(
            RenameCategory,
            {"old_name": old_name, "new_name": new_name},
            count=lambda updated: updated,
        )

    def rename_subcategory(self, old_name, new_name, category=None) -> Reconciliation:
        return self._apply(
            RenameSubcategory,
            {"old_name": old_name, "new_name": new_name, "category": category},
            count=lambda updated: updated,
        )

    def delete_category(self, name) -> Reconciliation:
        """Remove every item filed under ``name`` through ``bulk_remove``."""
        category = normalize_category(name)
        item_ids = [str(item.id) for item in items_for(self.business_id) if item.category == category]
        if not item_ids:
            return Reconciliation(succeeded=True, categories=tuple(self.refresh()))
        return self.bulk_remove(item_ids)

    # -------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------
    def _apply(self, command_cls, fields, requested=0, count=None, created=None) -> Reconciliation:
        try:
            command = command_cls(business_id=self.business_id, **fields)
            result = current_domain.process(command, asynchronous=False)
        except ObjectNotFoundError as exc:
            logger.info(
                "Stale item reference, refreshing catalog",
                business_id=self.business_id,
                command=command_cls.__name__,
            )
            self.refresh()
            return Reconciliation(
                succeeded=False,
                categories=tuple(self.categories),
                requested_count=requested,
                errors={"item_id": [str(exc)]},
                not_found=True,
            )
        except ValidationError as exc:
            return Reconciliation(
                succeeded=False,
                categories=tuple(self.categories),
                requested_count=requested,
                errors=exc.messages,
            )

        self.refresh()
        affected = count(result) if count else requested
        return Reconciliation(
            succeeded=True,
            categories=tuple(self.categories),
            affected_count=affected,
            requested_count=requested or affected,
            created_ids=created(result) if created else (),
        )
