"""Payment intent creation: command, handler and coordinator.

Checkout creates a PENDING order with server-computed totals, reserves its
stock, then asks the payment processor to prepare a charge for the total.
Stock is only decremented once the processor confirms payment through the
webhook.

The processor call happens before the unit of work commits. When the commit
fails afterwards (a concurrent checkout won the stock, say) the intent is
cancelled so the processor is not left holding a charge for an order that
never existed.
"""

import json
from contextvars import ContextVar
from datetime import UTC, datetime, timedelta

import structlog
from protean import handle
from protean.fields import String, Text
from protean.utils.globals import current_domain

from storefront.config import get_settings
from storefront.domain import storefront
from storefront.identity.customer.registration import upsert_customer
from storefront.ordering.order.order import Order
from storefront.ordering.order.transaction import OrderInput, OrderTransactionManager
from storefront.ordering.pricing.engine import PricingEngine
from storefront.payments.checkout.webhook import ReconcilePayment
from storefront.payments.gateway import get_gateway
from storefront.payments.gateway.port import (
    PAYMENT_FAILED,
    PAYMENT_SUCCEEDED,
    PaymentGatewayError,
    WebhookSignatureError,
)
from storefront.shared.errors import RequestInvalid, UpstreamFailure, WebhookVerificationError

logger = structlog.get_logger(__name__)

# Intents created by the checkout currently being submitted in this context
_created_intents: ContextVar[list | None] = ContextVar("created_intents", default=None)


def idempotency_key_for(order_id) -> str:
    return f"pi_{order_id}"


class PaymentIntentCoordinator:
    """Coordinates checkout with the external payment processor."""

    def __init__(self, domain, gateway, currency=None, hold_minutes=None):
        settings = get_settings()
        self.domain = domain
        self.gateway = gateway
        self.currency = currency or settings.currency
        self.hold_minutes = settings.stock_hold_minutes if hold_minutes is None else hold_minutes

    def create_payment_intent(self, checkout: OrderInput) -> dict:
        """Create the pending order and its payment intent.

        Must run inside a unit of work: a processor failure raises
        ``UpstreamFailure`` and the order, address and stock hold roll back.
        """
        if not checkout.email or not checkout.name or not checkout.shipping or not checkout.items:
            raise RequestInvalid("Missing required fields")

        pricing = PricingEngine(self.domain).price_cart(checkout.items, checkout.coupon_code)

        customer = upsert_customer(self.domain, checkout.email, checkout.name)
        checkout.customer_id = str(customer.id)

        hold_until = datetime.now(UTC) + timedelta(minutes=self.hold_minutes)
        order = OrderTransactionManager(self.domain).create_order(checkout, pricing, hold_until=hold_until)

        try:
            intent = self.gateway.create_payment_intent(
                amount_cents=order.total_cents,
                currency=self.currency,
                description=f"Order {order.id}",
                metadata={"order_id": str(order.id), "email": checkout.email},
                idempotency_key=idempotency_key_for(order.id),
            )
        except PaymentGatewayError as exc:
            logger.error("payment_intent.failed", order_id=str(order.id), reason=str(exc))
            raise UpstreamFailure("Failed to create payment intent") from exc

        created = _created_intents.get()
        if created is not None:
            created.append((str(order.id), intent.intent_id))

        order.attach_payment_intent(intent.intent_id)
        self.domain.repository_for(Order).add(order)

        logger.info(
            "payment_intent.created",
            order_id=str(order.id),
            intent_id=intent.intent_id,
            amount_cents=order.total_cents,
            currency=self.currency,
        )
        return {
            "client_secret": intent.client_secret,
            "order_id": str(order.id),
            "totals": pricing.to_dict(),
        }

    def submit_checkout(self, command) -> dict:
        """Process a ``CreatePaymentIntent`` command in its own unit of work.

        Intents created while processing are cancelled if the unit of work
        does not commit. The original error is re-raised either way.
        """
        created = []
        token = _created_intents.set(created)
        try:
            return self.domain.process(command, asynchronous=False)
        except Exception:
            for order_id, intent_id in created:
                self._cancel_orphaned_intent(order_id, intent_id)
            raise
        finally:
            _created_intents.reset(token)

    def _cancel_orphaned_intent(self, order_id, intent_id):
        try:
            self.gateway.cancel_payment_intent(intent_id)
        except PaymentGatewayError as exc:
            logger.error("payment_intent.orphaned", order_id=order_id, intent_id=intent_id, reason=str(exc))
        else:
            logger.warning("payment_intent.cancelled", order_id=order_id, intent_id=intent_id)

    def handle_payment_webhook(self, raw_body: bytes, signature: str) -> dict:
        """Verify a processor callback and reconcile the order it names.

        Unverified payloads are rejected before anything else happens.
        """
        try:
            event = self.gateway.construct_event(raw_body, signature or "")
        except WebhookSignatureError as exc:
            logger.warning("webhook.rejected", reason=str(exc))
            raise WebhookVerificationError(str(exc)) from exc

        logger.info("webhook.received", event_id=event.event_id, type=event.type, order_id=event.order_id)

        if event.type in (PAYMENT_SUCCEEDED, PAYMENT_FAILED):
            self.domain.process(
                ReconcilePayment(event_type=event.type, order_id=event.order_id, payment_intent_id=event.intent_id),
                asynchronous=False,
            )
        return {"received": True}


@storefront.command(part_of="Order")
class CreatePaymentIntent:
    email = String(required=True, max_length=254)
    name = String(required=True, max_length=255)
    coupon_code = String(max_length=50)
    notes = Text()
    shipping = Text(required=True)  # JSON: address dict
    items = Text(required=True)  # JSON: list of {product_id, variant_id, quantity}


@storefront.command_handler(part_of=Order)
class CreatePaymentIntentHandler:
    @handle(CreatePaymentIntent)
    def create_payment_intent(self, command):
        checkout = OrderInput(
            shipping=json.loads(command.shipping),
            items=json.loads(command.items),
            email=command.email,
            name=command.name,
            coupon_code=command.coupon_code,
            notes=command.notes,
        )
        return PaymentIntentCoordinator(current_domain, get_gateway()).create_payment_intent(checkout)
