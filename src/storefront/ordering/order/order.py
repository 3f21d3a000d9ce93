"""Order aggregate with its shipping Address and OrderItems.

An order is created once, at checkout, with prices frozen on each line and
totals computed by the pricing rules. After that only its status fields
change: through payment reconciliation or an admin update.

Stock hold lifecycle for orders placed through the payment flow:
    NONE (direct orders, stock already decremented)
    HELD → COMMITTED (payment succeeded)
    HELD → RELEASED (payment failed or the hold expired)
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, HasOne, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.ordering.order.events import OrderPaid, OrderPaymentFailed, OrderPlaced, StockHoldReleased


class OrderStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentStatus(Enum):
    PENDING = "PENDING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class StockHold(Enum):
    NONE = "NONE"
    HELD = "HELD"
    COMMITTED = "COMMITTED"
    RELEASED = "RELEASED"


@storefront.entity(part_of="Order")
class Address:
    """Shipping address snapshot, created fresh for every order."""

    full_name = String(required=True, max_length=255)
    email = String(required=True, max_length=254)
    phone = String(max_length=32)
    address = String(required=True, max_length=500)
    city = String(required=True, max_length=100)
    country = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=20)

    def to_dict(self) -> dict:
        return {
            "full_name": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "city": self.city,
            "country": self.country,
            "postal_code": self.postal_code,
        }


@storefront.entity(part_of="Order")
class OrderItem:
    """A purchased line. Prices are captured at checkout and never recomputed."""

    product_id = Identifier(required=True)
    variant_id = Identifier()
    product_name = String(max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price_cents = Integer(required=True, min_value=0)
    line_total_cents = Integer(required=True, min_value=0)

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "product_id": str(self.product_id),
            "variant_id": str(self.variant_id) if self.variant_id else None,
            "product_name": self.product_name,
            "quantity": self.quantity,
            "unit_price_cents": self.unit_price_cents,
            "line_total_cents": self.line_total_cents,
        }


@storefront.aggregate
class Order:
    customer_id = Identifier()
    email = String(max_length=254)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    subtotal_cents = Integer(required=True, min_value=0)
    discount_cents = Integer(default=0, min_value=0)
    shipping_cents = Integer(default=0, min_value=0)
    total_cents = Integer(required=True, min_value=0)
    coupon_code = String(max_length=50)
    notes = Text()
    payment_intent_id = String(max_length=255)
    stock_hold = String(choices=StockHold, default=StockHold.NONE.value)
    hold_expires_at = DateTime()
    shipping_address = HasOne(Address)
    items = HasMany(OrderItem)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_follow_from_components(self):
        expected = max(0, (self.subtotal_cents or 0) - (self.discount_cents or 0) + (self.shipping_cents or 0))
        if self.total_cents != expected:
            raise ValidationError({"total_cents": [f"Total must be {expected} for the recorded components"]})

    @invariant.post
    def discount_cannot_exceed_subtotal(self):
        if (self.discount_cents or 0) > (self.subtotal_cents or 0):
            raise ValidationError({"discount_cents": ["Discount cannot exceed the subtotal"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, pricing, shipping, lines, customer_id=None, email=None, coupon_code=None, notes=None):
        """Build an order from a ``Pricing`` and already-priced ``lines``.

        ``lines`` are dicts with product_id, variant_id, product_name,
        quantity and unit_price_cents.
        """
        now = datetime.now(UTC)
        order = cls(
            customer_id=customer_id,
            email=email,
            subtotal_cents=pricing.subtotal_cents,
            discount_cents=pricing.discount_cents,
            shipping_cents=pricing.shipping_cents,
            total_cents=pricing.total_cents,
            coupon_code=coupon_code,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        order.shipping_address = Address(**shipping)

        for line in lines:
            order.add_items(
                OrderItem(
                    product_id=line["product_id"],
                    variant_id=line.get("variant_id"),
                    product_name=line.get("product_name"),
                    quantity=line["quantity"],
                    unit_price_cents=line["unit_price_cents"],
                    line_total_cents=line["unit_price_cents"] * line["quantity"],
                )
            )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id) if customer_id else None,
                email=email,
                item_count=sum(line["quantity"] for line in lines),
                subtotal_cents=pricing.subtotal_cents,
                discount_cents=pricing.discount_cents,
                shipping_cents=pricing.shipping_cents,
                total_cents=pricing.total_cents,
                coupon_code=coupon_code,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Stock hold
    # -------------------------------------------------------------------
    def place_hold(self, expires_at):
        self.stock_hold = StockHold.HELD.value
        self.hold_expires_at = expires_at

    @property
    def is_holding_stock(self) -> bool:
        return self.stock_hold == StockHold.HELD.value

    def hold_expired(self, now) -> bool:
        if not self.is_holding_stock or self.hold_expires_at is None:
            return False
        expires_at = self.hold_expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)
        return expires_at <= now

    def release_hold(self, reason):
        now = datetime.now(UTC)
        self.stock_hold = StockHold.RELEASED.value
        self.updated_at = now
        self.raise_(StockHoldReleased(order_id=str(self.id), reason=reason, released_at=now))

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.SUCCEEDED.value

    def attach_payment_intent(self, payment_intent_id):
        self.payment_intent_id = payment_intent_id
        self.updated_at = datetime.now(UTC)

    def mark_paid(self, payment_intent_id=None):
        """Record a successful payment. Returns False when already recorded."""
        if self.is_paid:
            return False

        now = datetime.now(UTC)
        self.status = OrderStatus.PAID.value
        self.payment_status = PaymentStatus.SUCCEEDED.value
        if self.stock_hold == StockHold.HELD.value or self.stock_hold == StockHold.RELEASED.value:
            self.stock_hold = StockHold.COMMITTED.value
        self.payment_intent_id = payment_intent_id or self.payment_intent_id
        self.updated_at = now
        self.raise_(OrderPaid(order_id=str(self.id), payment_intent_id=self.payment_intent_id, paid_at=now))
        return True

    def mark_payment_failed(self, payment_intent_id=None):
        """Record a failed payment attempt; the order itself stays PENDING."""
        if self.is_paid:
            return False

        now = datetime.now(UTC)
        self.payment_status = PaymentStatus.FAILED.value
        self.payment_intent_id = payment_intent_id or self.payment_intent_id
        self.updated_at = now
        self.raise_(
            OrderPaymentFailed(order_id=str(self.id), payment_intent_id=self.payment_intent_id, failed_at=now)
        )
        return True

    # -------------------------------------------------------------------
    # Administration
    # -------------------------------------------------------------------
    def update(self, status=None, payment_status=None, notes=None):
        """Apply back-office edits. An empty ``notes`` string clears the notes."""
        if status:
            self.status = OrderStatus(status).value
        if payment_status:
            self.payment_status = PaymentStatus(payment_status).value
        if notes is not None:
            self.notes = notes or None
        self.updated_at = datetime.now(UTC)

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)
