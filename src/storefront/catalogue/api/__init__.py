"""Catalogue API package."""

from storefront.catalogue.api.routes import catalog_router, product_router

__all__ = ["catalog_router", "product_router"]
