"""Identity API package."""

from storefront.identity.api.routes import identity_router

__all__ = ["identity_router"]
