"""Pydantic response schemas for identity provider callbacks."""

from pydantic import BaseModel


class IdentityWebhookAck(BaseModel):
    success: bool = True
