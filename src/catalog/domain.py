"""Catalog bounded context — sellable items, pricing, grouping and offers."""

from protean.domain import Domain

from catalog.utils.logging import get_logger

logger = get_logger(__name__)

catalog = Domain(name="catalog")
