"""Back-office order management: commands and handler.

Status edits that imply a payment outcome go through the same transitions
as payment reconciliation, so a stock hold is committed or released exactly
as if the processor had reported it.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order.holds import commit_order_stock, release_order_hold
from storefront.ordering.order.order import Address, Order, OrderItem, OrderStatus, PaymentStatus
from storefront.shared.errors import OrderNotFound

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrder:
    order_id = Identifier(required=True)
    status = String(choices=OrderStatus)
    payment_status = String(choices=PaymentStatus)
    notes = Text()
    clear_notes = Boolean(default=False)


@storefront.command(part_of="Order")
class DeleteOrder:
    order_id = Identifier(required=True)


def _load(repo, order_id) -> Order:
    try:
        return repo.get(order_id)
    except ObjectNotFoundError:
        raise OrderNotFound(str(order_id)) from None


def _confirms_payment(command) -> bool:
    return command.payment_status == PaymentStatus.SUCCEEDED.value or (
        command.status == OrderStatus.PAID.value and not command.payment_status
    )


@storefront.command_handler(part_of=Order)
class OrderAdministrationHandler:
    @handle(UpdateOrder)
    def update_order(self, command):
        repo = current_domain.repository_for(Order)
        order = _load(repo, command.order_id)

        if not order.is_paid:
            if _confirms_payment(command):
                shortfalls = commit_order_stock(current_domain, order)
                order.mark_paid()
                logger.info("order.paid_manually", order_id=str(order.id), shortfalls=shortfalls or None)
            elif command.payment_status == PaymentStatus.FAILED.value:
                release_order_hold(current_domain, order, reason="payment_failed")
                order.mark_payment_failed()

        if command.status == OrderStatus.CANCELLED.value:
            release_order_hold(current_domain, order, reason="cancelled")

        order.update(
            status=command.status,
            payment_status=command.payment_status,
            notes="" if command.clear_notes else command.notes,
        )
        repo.add(order)

    @handle(DeleteOrder)
    def delete_order(self, command):
        """Return any held stock, then remove the items, address and order."""
        repo = current_domain.repository_for(Order)
        order = _load(repo, command.order_id)

        release_order_hold(current_domain, order, reason="deleted")

        item_dao = current_domain.repository_for(OrderItem)._dao
        for item in list(order.items):
            item_dao.delete(item)

        if order.shipping_address is not None:
            current_domain.repository_for(Address)._dao.delete(order.shipping_address)

        repo._dao.delete(order)
