"""Order Transaction Manager.

Turns a priced cart into a persisted order. Everything here runs inside the
calling command handler's unit of work: the shipping address, every stock
change and the order itself commit together or not at all.
"""

from dataclasses import dataclass
from datetime import datetime

import structlog
from protean.exceptions import ObjectNotFoundError

from storefront.catalogue.product.product import Product
from storefront.ordering.order.order import Order
from storefront.ordering.pricing.engine import CartLine, as_cart_lines
from storefront.promotions.coupon.coupon import normalize_code
from storefront.shared.errors import ProductNotFound, VariantMismatch

logger = structlog.get_logger(__name__)


@dataclass
class OrderInput:
    shipping: dict
    items: list[CartLine]
    email: str | None = None
    name: str | None = None
    coupon_code: str | None = None
    notes: str | None = None
    customer_id: str | None = None

    def __post_init__(self):
        self.items = as_cart_lines(self.items)


class OrderTransactionManager:
    def __init__(self, domain):
        self.domain = domain

    def create_order(self, order_input: OrderInput, pricing, hold_until: datetime | None = None) -> Order:
        """Persist the order for ``order_input`` with the totals in ``pricing``.

        Stock is decremented straight away unless ``hold_until`` is given, in
        which case the units are only reserved until that moment.
        """
        product_repo = self.domain.repository_for(Product)
        products: dict[str, Product] = {}
        lines = []

        for item in order_input.items:
            product = products.get(item.product_id)
            if product is None:
                try:
                    product = product_repo.get(item.product_id)
                except ObjectNotFoundError:
                    raise ProductNotFound(item.product_id) from None
                products[item.product_id] = product

            variant = None
            if item.variant_id:
                variant = product.find_variant(item.variant_id)
                if variant is None:
                    raise VariantMismatch(item.product_id, item.variant_id)
                if hold_until is None:
                    product.decrement_stock(item.variant_id, item.quantity)
                else:
                    product.hold_stock(item.variant_id, item.quantity)

            lines.append(
                {
                    "product_id": item.product_id,
                    "variant_id": item.variant_id,
                    "product_name": product.name,
                    "quantity": item.quantity,
                    "unit_price_cents": product.unit_price_cents(variant),
                }
            )

        for product in products.values():
            product_repo.add(product)

        order = Order.place(
            pricing=pricing,
            shipping=order_input.shipping,
            lines=lines,
            customer_id=order_input.customer_id,
            email=order_input.email or order_input.shipping.get("email"),
            coupon_code=normalize_code(order_input.coupon_code) or None,
            notes=order_input.notes,
        )
        if hold_until is not None:
            order.place_hold(hold_until)

        self.domain.repository_for(Order).add(order)

        logger.info(
            "order.created",
            order_id=str(order.id),
            lines=len(lines),
            total_cents=order.total_cents,
            stock_held=hold_until is not None,
        )
        return order
