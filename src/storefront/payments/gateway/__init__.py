"""Payment gateway factory.

Provides get_gateway() / set_gateway() to swap implementations:
- FakeGateway for development and testing
- StripeGateway for production, selected by PAYMENT_GATEWAY=stripe
"""

from storefront.config import get_settings
from storefront.payments.gateway.fake_adapter import FakeGateway
from storefront.payments.gateway.port import PaymentGateway
from storefront.payments.gateway.stripe_adapter import StripeGateway

_current_gateway: PaymentGateway | None = None


def build_gateway(settings) -> PaymentGateway:
    if settings.payment_gateway == "stripe":
        return StripeGateway(api_key=settings.stripe_secret_key, webhook_secret=settings.stripe_webhook_secret)
    if settings.stripe_webhook_secret:
        return FakeGateway(webhook_secret=settings.stripe_webhook_secret)
    return FakeGateway()


def get_gateway() -> PaymentGateway:
    """Return the current payment gateway, built from settings on first use."""
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = build_gateway(get_settings())
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    """Reset to default gateway."""
    global _current_gateway
    _current_gateway = None
