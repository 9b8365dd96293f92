"""Catalog domain API package."""

from catalog.api.routes import catalog_router, offer_router

__all__ = ["catalog_router", "offer_router"]
