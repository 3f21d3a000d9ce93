"""Direct order placement: command and handler.

Prices the cart on the server, then hands it to the transaction manager,
which decrements stock in the same unit of work. Client-side totals are
never trusted.
"""

import json

import structlog
from protean import handle
from protean.fields import String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.identity.customer.registration import upsert_customer
from storefront.ordering.order.order import Order
from storefront.ordering.order.transaction import OrderInput, OrderTransactionManager
from storefront.ordering.pricing.engine import PricingEngine

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    email = String(max_length=254)
    name = String(max_length=255)
    coupon_code = String(max_length=50)
    notes = Text()
    shipping = Text(required=True)  # JSON: address dict
    items = Text(required=True)  # JSON: list of {product_id, variant_id, quantity}


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        order_input = OrderInput(
            shipping=json.loads(command.shipping),
            items=json.loads(command.items),
            email=command.email,
            name=command.name,
            coupon_code=command.coupon_code,
            notes=command.notes,
        )

        pricing = PricingEngine(current_domain).price_cart(order_input.items, order_input.coupon_code)

        if order_input.email:
            customer = upsert_customer(current_domain, order_input.email, order_input.name)
            order_input.customer_id = str(customer.id)

        order = OrderTransactionManager(current_domain).create_order(order_input, pricing)
        return {"order_id": str(order.id), **pricing.to_dict()}
