"""FastAPI endpoints for checkout and processor callbacks."""

import json

from fastapi import APIRouter, Depends, Header, Request
from protean.utils.globals import current_domain

from storefront.api.auth import require_admin
from storefront.payments.api.schemas import (
    CreateIntentRequest,
    CreateIntentResponse,
    HoldSweepResponse,
    WebhookAckResponse,
)
from storefront.payments.checkout.expiry import ReleaseExpiredHolds
from storefront.payments.checkout.intent import CreatePaymentIntent, PaymentIntentCoordinator
from storefront.payments.gateway import get_gateway

checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.post("/create-intent", response_model=CreateIntentResponse)
async def create_intent(body: CreateIntentRequest) -> CreateIntentResponse:
    command = CreatePaymentIntent(
        email=body.email,
        name=body.name,
        coupon_code=body.coupon_code,
        notes=body.notes,
        shipping=json.dumps(body.shipping.model_dump()),
        items=json.dumps([item.model_dump() for item in body.items]),
    )
    result = PaymentIntentCoordinator(current_domain, get_gateway()).submit_checkout(command)
    return CreateIntentResponse(**result)


@checkout_router.post("/webhook", response_model=WebhookAckResponse)
async def payment_webhook(
    request: Request,
    stripe_signature: str | None = Header(default=None, alias="Stripe-Signature"),
) -> WebhookAckResponse:
    """Raw body is required: the signature covers the exact bytes sent."""
    payload = await request.body()
    coordinator = PaymentIntentCoordinator(current_domain, get_gateway())
    coordinator.handle_payment_webhook(payload, stripe_signature or "")
    return WebhookAckResponse()


@checkout_router.post(
    "/release-expired-holds",
    response_model=HoldSweepResponse,
    dependencies=[Depends(require_admin)],
)
async def release_expired_holds() -> HoldSweepResponse:
    """Return stock held by abandoned checkouts. Meant for a scheduler."""
    released = current_domain.process(ReleaseExpiredHolds(), asynchronous=False)
    return HoldSweepResponse(released=released)
