"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """An order was persisted with its frozen line prices and totals."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    customer_id = Identifier()
    email = String()
    item_count = Integer(required=True)
    subtotal_cents = Integer(required=True)
    discount_cents = Integer(required=True)
    shipping_cents = Integer(required=True)
    total_cents = Integer(required=True)
    coupon_code = String()
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderPaid:
    __version__ = "v1"

    order_id = Identifier(required=True)
    payment_intent_id = String()
    paid_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderPaymentFailed:
    __version__ = "v1"

    order_id = Identifier(required=True)
    payment_intent_id = String()
    failed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class StockHoldReleased:
    """Units held for an unpaid order went back to available stock."""

    __version__ = "v1"

    order_id = Identifier(required=True)
    reason = String(required=True)
    released_at = DateTime(required=True)
