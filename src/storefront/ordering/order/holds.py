"""Stock hold bookkeeping shared by payment reconciliation and hold expiry."""

import structlog
from protean.exceptions import ObjectNotFoundError

from storefront.catalogue.product.product import Product
from storefront.ordering.order.order import StockHold
from storefront.shared.errors import InsufficientStock, ProductNotFound

logger = structlog.get_logger(__name__)


def _held_lines(order):
    return [item for item in order.items if item.variant_id]


def _products_for(domain, items) -> dict[str, Product]:
    repo = domain.repository_for(Product)
    products = {}
    for item in items:
        product_id = str(item.product_id)
        if product_id not in products:
            try:
                products[product_id] = repo.get(product_id)
            except ObjectNotFoundError:
                raise ProductNotFound(product_id) from None
    return products


def release_order_hold(domain, order, reason):
    """Return the order's reserved units to available stock."""
    if order.stock_hold != StockHold.HELD.value:
        return

    items = _held_lines(order)
    products = _products_for(domain, items)
    for item in items:
        products[str(item.product_id)].release_hold(str(item.variant_id), item.quantity)

    repo = domain.repository_for(Product)
    for product in products.values():
        repo.add(product)

    order.release_hold(reason)
    logger.info("stock_hold.released", order_id=str(order.id), reason=reason)


def commit_order_stock(domain, order) -> list[str]:
    """Turn the order's stock hold into a sale once payment is confirmed.

    A hold that was already released is re-checked against current stock.
    Lines that can no longer be covered are left untouched and returned so
    the caller can flag them.
    """
    items = _held_lines(order)
    if order.stock_hold not in (StockHold.HELD.value, StockHold.RELEASED.value) or not items:
        return []

    products = _products_for(domain, items)
    shortfalls = []
    for item in items:
        product = products[str(item.product_id)]
        if order.stock_hold == StockHold.HELD.value:
            product.commit_hold(str(item.variant_id), item.quantity)
            continue
        try:
            product.decrement_stock(str(item.variant_id), item.quantity)
        except InsufficientStock as exc:
            logger.error(
                "stock.shortfall_after_payment",
                order_id=str(order.id),
                variant_id=exc.variant_id,
                requested=exc.requested,
                available=exc.available,
            )
            shortfalls.append(str(item.variant_id))

    repo = domain.repository_for(Product)
    for product in products.values():
        repo.add(product)
    return shortfalls
