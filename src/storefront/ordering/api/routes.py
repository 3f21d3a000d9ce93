"""FastAPI endpoints for the Ordering context."""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from storefront.api.auth import require_admin
from storefront.ordering.api.schemas import (
    CreateOrderRequest,
    OrderDeletedResponse,
    OrderPlacedResponse,
    UpdateOrderRequest,
)
from storefront.ordering.order.administration import DeleteOrder, UpdateOrder
from storefront.ordering.order.placement import PlaceOrder
from storefront.ordering.order.queries import get_order, list_orders

order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderPlacedResponse)
async def place_order(body: CreateOrderRequest) -> OrderPlacedResponse:
    command = PlaceOrder(
        email=body.email,
        name=body.name,
        coupon_code=body.coupon_code,
        notes=body.notes,
        shipping=json.dumps(body.shipping.model_dump()),
        items=json.dumps([item.model_dump() for item in body.items]),
    )
    result = current_domain.process(command, asynchronous=False)
    return OrderPlacedResponse(**result)


@order_router.get("", dependencies=[Depends(require_admin)])
async def orders() -> list[dict]:
    return list_orders()


@order_router.get("/{order_id}", dependencies=[Depends(require_admin)])
async def order_detail(order_id: str) -> dict:
    return get_order(order_id)


@order_router.patch("/{order_id}", dependencies=[Depends(require_admin)])
async def update_order(order_id: str, body: UpdateOrderRequest) -> dict:
    command = UpdateOrder(
        order_id=order_id,
        status=body.status,
        payment_status=body.payment_status,
        notes=body.notes,
        clear_notes="notes" in body.model_fields_set and not body.notes,
    )
    current_domain.process(command, asynchronous=False)
    return get_order(order_id)


@order_router.delete("/{order_id}", response_model=OrderDeletedResponse, dependencies=[Depends(require_admin)])
async def delete_order(order_id: str) -> OrderDeletedResponse:
    current_domain.process(DeleteOrder(order_id=order_id), asynchronous=False)
    return OrderDeletedResponse(id=order_id)
