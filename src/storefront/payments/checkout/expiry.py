"""Stock hold expiry: command and handler.

Checkouts that never complete payment would otherwise keep their units
reserved forever. Expired holds go back to available stock; the order stays
PENDING so a late successful payment can still be reconciled.
"""

from datetime import UTC, datetime

import structlog
from protean import handle
from protean.fields import DateTime
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order.order import Order, StockHold
from storefront.ordering.order.holds import release_order_hold

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class ReleaseExpiredHolds:
    as_of = DateTime()


@storefront.command_handler(part_of=Order)
class ReleaseExpiredHoldsHandler:
    @handle(ReleaseExpiredHolds)
    def release_expired_holds(self, command):
        now = command.as_of or datetime.now(UTC)
        if now.tzinfo is None:
            now = now.replace(tzinfo=UTC)

        repo = current_domain.repository_for(Order)
        held = repo._dao.query.filter(stock_hold=StockHold.HELD.value).all().items

        released = 0
        for order in held:
            if not order.hold_expired(now):
                continue
            release_order_hold(current_domain, order, reason="expired")
            repo.add(order)
            released += 1

        logger.info("stock_hold.expiry_sweep", released=released, checked=len(held))
        return released
