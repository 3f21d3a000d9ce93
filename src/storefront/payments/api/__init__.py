"""Payments API package."""

from storefront.payments.api.routes import checkout_router

__all__ = ["checkout_router"]
