"""Choose between the self-service (flat) and administrative (grouped) catalog
views for a caller.

Administrative mode is entered only through an explicit owner reference. The
acting caller's own seller identity never stands in for it.
"""

from dataclasses import dataclass
from enum import Enum

from catalog.item.grouping import group_items
from catalog.item.lookup import items_for


class CatalogMode(Enum):
    SELF = "self"
    ADMIN = "admin"


@dataclass(frozen=True)
class CatalogScope:
    mode: CatalogMode
    business_id: str

    @property
    def is_admin(self) -> bool:
        return self.mode is CatalogMode.ADMIN


def resolve_scope(acting_business_id, owner_id=None) -> CatalogScope | None:
    """Work out whose catalog a request targets.

    Returns ``None`` when the caller has no identity and names no owner.
    """
    if owner_id:
        return CatalogScope(mode=CatalogMode.ADMIN, business_id=str(owner_id))
    if acting_business_id:
        return CatalogScope(mode=CatalogMode.SELF, business_id=str(acting_business_id))
    return None


def select_view(scope: CatalogScope, items=None, grouped=None):
    """Project the seller's items for the scope.

    Self mode gets the flat item list, admin mode gets the category hierarchy.
    ``grouped`` forces one projection regardless of mode. Both projections
    carry the same item objects.
    """
    if items is None:
        items = items_for(scope.business_id)
    if grouped is None:
        grouped = scope.is_admin
    return group_items(items) if grouped else list(items)
