"""Shared BDD fixtures and step definitions for the Ordering domain."""

import json

import pytest
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, then, when
from storefront.catalogue.product.product import Product
from storefront.ordering.order.order import Order
from storefront.ordering.order.placement import PlaceOrder
from storefront.shared.errors import StorefrontError


@pytest.fixture()
def outcome():
    """Container for the placement result or the error it raised."""
    return {"result": None, "error": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse("a product priced at {price:d} cents with {stock:d} units in stock"),
    target_fixture="product",
)
def _(make_product, price, stock):
    return make_product(name="Silk Scarf", base_price_cents=price, variants=[{"sku": "SCARF", "stock": stock}])


@given(parsers.cfparse('a coupon "{code}" taking {percent:d} percent off'))
def _(make_coupon, code, percent):
    make_coupon(code=code, percent_off=percent)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
def _place(product, shipping, quantity, coupon_code=None):
    command = PlaceOrder(
        email=shipping["email"],
        name=shipping["full_name"],
        coupon_code=coupon_code,
        shipping=json.dumps(shipping),
        items=json.dumps(
            [{"product_id": str(product.id), "variant_id": str(product.variants[0].id), "quantity": quantity}]
        ),
    )
    return current_domain.process(command, asynchronous=False)


@when(parsers.cfparse("the shopper orders {quantity:d} units"))
def _(product, shipping, outcome, quantity):
    try:
        outcome["result"] = _place(product, shipping, quantity)
    except StorefrontError as exc:
        outcome["error"] = exc


@when(parsers.cfparse('the shopper orders {quantity:d} units with coupon "{code}"'))
def _(product, shipping, outcome, quantity, code):
    try:
        outcome["result"] = _place(product, shipping, quantity, coupon_code=code)
    except StorefrontError as exc:
        outcome["error"] = exc


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the {component} is {cents:d} cents"))
def _(outcome, component, cents):
    assert outcome["error"] is None
    assert outcome["result"][f"{component}_cents"] == cents


@then(parsers.cfparse('the order is rejected with "{message}"'))
def _(outcome, message):
    assert outcome["error"] is not None
    assert outcome["error"].message.startswith(message)


@then(parsers.cfparse("{stock:d} units remain in stock"))
def _(product, stock):
    assert current_domain.repository_for(Product).get(product.id).variants[0].stock == stock


@then("no order was recorded")
def _():
    assert current_domain.repository_for(Order)._dao.query.all().total == 0
