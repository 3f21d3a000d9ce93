"""Promotions API package."""

from storefront.promotions.api.routes import coupon_router

__all__ = ["coupon_router"]
