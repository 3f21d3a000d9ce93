"""Ordering API package."""

from storefront.ordering.api.routes import order_router

__all__ = ["order_router"]
