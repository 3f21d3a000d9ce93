"""Payment reconciliation: command and handler.

Processor webhooks arrive at least once, so every branch here is safe to
replay: an order whose payment already succeeded ignores later events, and a
released stock hold is never released twice.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order.order import Order
from storefront.ordering.order.holds import commit_order_stock, release_order_hold
from storefront.payments.gateway.port import PAYMENT_FAILED, PAYMENT_SUCCEEDED

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class ReconcilePayment:
    event_type = String(required=True, max_length=100)
    order_id = Identifier()
    payment_intent_id = String(max_length=255)


@storefront.command_handler(part_of=Order)
class ReconcilePaymentHandler:
    @handle(ReconcilePayment)
    def reconcile_payment(self, command):
        if not command.order_id:
            logger.warning("webhook.missing_order_id", type=command.event_type)
            return

        repo = current_domain.repository_for(Order)
        try:
            order = repo.get(command.order_id)
        except ObjectNotFoundError:
            logger.warning("webhook.unknown_order", order_id=str(command.order_id), type=command.event_type)
            return

        if order.is_paid:
            logger.info("webhook.replayed", order_id=str(order.id), type=command.event_type)
            return

        if command.event_type == PAYMENT_SUCCEEDED:
            shortfalls = commit_order_stock(current_domain, order)
            order.mark_paid(command.payment_intent_id)
            logger.info("order.paid", order_id=str(order.id), shortfalls=shortfalls or None)
        elif command.event_type == PAYMENT_FAILED:
            release_order_hold(current_domain, order, reason="payment_failed")
            order.mark_payment_failed(command.payment_intent_id)
            logger.warning("order.payment_failed", order_id=str(order.id))

        repo.add(order)
