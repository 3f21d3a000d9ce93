"""Application tests for releasing expired checkout stock holds."""

import json
from datetime import UTC, datetime, timedelta

from protean.utils.globals import current_domain
from storefront.catalogue.product.product import Product
from storefront.ordering.order.order import Order, OrderStatus, StockHold
from storefront.ordering.order.placement import PlaceOrder
from storefront.payments.checkout.expiry import ReleaseExpiredHolds


def _release(as_of):
    return current_domain.process(ReleaseExpiredHolds(as_of=as_of), asynchronous=False)


class TestReleaseExpiredHolds:
    def test_active_holds_are_kept(self, checkout, line, make_product):
        product = make_product()
        checkout([line(product, 2)])

        assert _release(datetime.now(UTC)) == 0

        assert current_domain.repository_for(Product).get(product.id).variants[0].reserved == 2

    def test_expired_holds_are_released(self, checkout, line, make_product):
        product = make_product()
        order_id = checkout([line(product, 2)])["order_id"]

        assert _release(datetime.now(UTC) + timedelta(minutes=31)) == 1

        variant = current_domain.repository_for(Product).get(product.id).variants[0]
        assert (variant.stock, variant.reserved) == (10, 0)
        order = current_domain.repository_for(Order).get(order_id)
        assert order.stock_hold == StockHold.RELEASED.value
        assert order.status == OrderStatus.PENDING.value

    def test_sweep_is_idempotent(self, checkout, line, make_product):
        product = make_product()
        checkout([line(product, 2)])
        later = datetime.now(UTC) + timedelta(hours=2)

        assert _release(later) == 1
        assert _release(later) == 0

    def test_direct_orders_are_never_touched(self, shipping, make_product):
        product = make_product()
        items = [{"product_id": str(product.id), "variant_id": str(product.variants[0].id), "quantity": 1}]
        current_domain.process(
            PlaceOrder(shipping=json.dumps(shipping), items=json.dumps(items)),
            asynchronous=False,
        )

        assert _release(datetime.now(UTC) + timedelta(days=1)) == 0
        assert current_domain.repository_for(Product).get(product.id).variants[0].stock == 9
