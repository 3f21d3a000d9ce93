"""Shared checkout fixtures for the payments tests."""

import json

import pytest
from protean.utils.globals import current_domain
from storefront.payments.checkout.intent import CreatePaymentIntent


@pytest.fixture()
def checkout(shipping, gateway):
    """Run CreatePaymentIntent for ``items`` and return the coordinator's result."""

    def _checkout(items, coupon_code=None, email="ada@example.com", name="Ada Tan"):
        command = CreatePaymentIntent(
            email=email,
            name=name,
            coupon_code=coupon_code,
            shipping=json.dumps(shipping),
            items=json.dumps(items),
        )
        return current_domain.process(command, asynchronous=False)

    return _checkout


@pytest.fixture()
def line():
    def _line(product, quantity, variant=None):
        variant = variant or product.variants[0]
        return {"product_id": str(product.id), "variant_id": str(variant.id), "quantity": quantity}

    return _line
