"""Read-side queries over orders for the back office."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.identity.customer.customer import Customer
from storefront.ordering.order.order import Order
from storefront.shared.errors import OrderNotFound


def _customer(customer_id) -> Customer | None:
    if not customer_id:
        return None
    try:
        return current_domain.repository_for(Customer).get(customer_id)
    except ObjectNotFoundError:
        return None


def list_orders() -> list[dict]:
    """Newest first, summarised for the orders table."""
    results = current_domain.repository_for(Order)._dao.query.order_by(["-created_at"]).all()
    summaries = []
    for order in results.items:
        customer = _customer(order.customer_id)
        summaries.append(
            {
                "id": str(order.id),
                "customer": (customer.name if customer else None) or "Guest",
                "email": (customer.email if customer else order.email) or "N/A",
                "phone": (customer.phone if customer else None) or "N/A",
                "created_at": order.created_at,
                "total_cents": order.total_cents,
                "status": order.status,
                "payment_status": order.payment_status,
                "items": order.item_count,
            }
        )
    return summaries


def get_order(order_id) -> dict:
    try:
        order = current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        raise OrderNotFound(str(order_id)) from None

    customer = _customer(order.customer_id)
    return {
        "id": str(order.id),
        "status": order.status,
        "payment_status": order.payment_status,
        "subtotal_cents": order.subtotal_cents,
        "discount_cents": order.discount_cents,
        "shipping_cents": order.shipping_cents,
        "total_cents": order.total_cents,
        "coupon_code": order.coupon_code,
        "notes": order.notes,
        "payment_intent_id": order.payment_intent_id,
        "stock_hold": order.stock_hold,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
        "customer": (
            {"id": str(customer.id), "name": customer.name, "email": customer.email, "phone": customer.phone}
            if customer
            else None
        ),
        "shipping_address": order.shipping_address.to_dict() if order.shipping_address else None,
        "items": [item.to_dict() for item in order.items],
    }
