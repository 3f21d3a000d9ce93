"""FastAPI endpoints for identity provider callbacks."""

from fastapi import APIRouter, Depends, Request

from storefront.config import Settings, get_settings
from storefront.identity.api.schemas import IdentityWebhookAck
from storefront.identity.onboarding import handle_identity_webhook
from storefront.identity.provider import get_provider

identity_router = APIRouter(prefix="/api/webhooks", tags=["identity"])


@identity_router.post("/clerk", response_model=IdentityWebhookAck)
async def clerk_webhook(request: Request, settings: Settings = Depends(get_settings)) -> IdentityWebhookAck:
    """Raw body is required: the svix signature covers the exact bytes sent."""
    payload = await request.body()
    result = handle_identity_webhook(payload, request.headers, get_provider(), settings.clerk_webhook_secret)
    return IdentityWebhookAck(**result)
