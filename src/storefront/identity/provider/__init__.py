"""Identity provider registry.

Provides get_provider() / set_provider() to swap implementations:
- FakeIdentityProvider for development and testing
- ClerkIdentityProvider for production
"""

from storefront.config import get_settings
from storefront.identity.provider.clerk_adapter import ClerkIdentityProvider
from storefront.identity.provider.fake_adapter import FakeIdentityProvider
from storefront.identity.provider.port import IdentityProvider

_current_provider: IdentityProvider | None = None


def build_provider(settings) -> IdentityProvider:
    if settings.is_production:
        return ClerkIdentityProvider(
            secret_key=settings.clerk_secret_key,
            authorized_parties=settings.cors_origins,
            api_url=settings.clerk_api_url,
        )
    return FakeIdentityProvider()


def get_provider() -> IdentityProvider:
    """Return the current identity provider, built from settings on first use."""
    global _current_provider
    if _current_provider is None:
        _current_provider = build_provider(get_settings())
    return _current_provider


def set_provider(provider: IdentityProvider) -> None:
    """Override the active identity provider (useful for tests)."""
    global _current_provider
    _current_provider = provider


def reset_provider() -> None:
    """Reset to default provider."""
    global _current_provider
    _current_provider = None
