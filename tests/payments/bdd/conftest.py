"""Shared BDD fixtures and step definitions for the Payments domain."""

import pytest
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, then
from storefront.catalogue.product.product import Product
from storefront.ordering.order.order import Order
from storefront.payments.checkout.intent import PaymentIntentCoordinator


@pytest.fixture()
def coordinator(gateway):
    return PaymentIntentCoordinator(current_domain, gateway)


@pytest.fixture()
def webhook():
    """Container for the last webhook response or the error it raised."""
    return {"response": None, "error": None}


def _variant(product):
    return current_domain.repository_for(Product).get(product.id).variants[0]


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse("a product with {stock:d} units in stock"), target_fixture="product")
def _(make_product, stock):
    return make_product(name="Wool Coat", variants=[{"sku": "COAT-L", "stock": stock}])


@given(parsers.cfparse("a checkout for {quantity:d} units is awaiting payment"), target_fixture="order_id")
def _(checkout, line, product, quantity):
    return checkout([line(product, quantity)])["order_id"]


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def _(order_id, status):
    assert current_domain.repository_for(Order).get(order_id).status == status


@then(parsers.cfparse('the order payment status is "{status}"'))
def _(order_id, status):
    assert current_domain.repository_for(Order).get(order_id).payment_status == status


@then(parsers.cfparse("{stock:d} units remain in stock"))
def _(product, stock):
    assert _variant(product).stock == stock


@then(parsers.cfparse("{reserved:d} units are held"))
def _(product, reserved):
    assert _variant(product).reserved == reserved
