"""Category → subcategory → items hierarchy built from the flat item collection.

The hierarchy is a view. It is rebuilt from the complete item set every time
and never patched in place.
"""

from dataclasses import dataclass, field

UNCATEGORIZED = "uncategorized"
GENERAL = "general"


def normalize_category(value) -> str:
    value = (value or "").strip().lower()
    return value or UNCATEGORIZED


def normalize_subcategory(value) -> str:
    value = (value or "").strip().lower()
    return value or GENERAL


@dataclass(frozen=True)
class SubcategoryGroup:
    name: str
    items: tuple = field(default_factory=tuple)


@dataclass(frozen=True)
class CategoryGroup:
    name: str
    subcategories: tuple = field(default_factory=tuple)

    @property
    def item_count(self) -> int:
        return sum(len(sub.items) for sub in self.subcategories)


def group_items(items) -> list[CategoryGroup]:
    """Partition ``items`` by category then subcategory.

    Distinct values keep the order in which they are first seen while scanning
    ``items`` left to right. The ``uncategorized`` category, when present, is
    moved to the front.
    """
    tree: dict[str, dict[str, list]] = {}
    for item in items:
        category = normalize_category(item.category)
        subcategory = normalize_subcategory(item.subcategory)
        tree.setdefault(category, {}).setdefault(subcategory, []).append(item)

    groups = [
        CategoryGroup(
            name=category,
            subcategories=tuple(SubcategoryGroup(name=name, items=tuple(members)) for name, members in subs.items()),
        )
        for category, subs in tree.items()
    ]

    for index, group in enumerate(groups):
        if group.name == UNCATEGORIZED:
            groups.insert(0, groups.pop(index))
            break

    return groups


def flatten(groups) -> list:
    """Items of a grouped view in hierarchy order."""
    return [item for group in groups for sub in group.subcategories for item in sub.items]
