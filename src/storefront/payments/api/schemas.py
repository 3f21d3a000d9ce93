"""Pydantic request/response schemas for the checkout API."""

from pydantic import BaseModel, EmailStr, Field

from storefront.ordering.api.schemas import CartItemSchema, ShippingSchema


class CreateIntentRequest(BaseModel):
    email: EmailStr
    name: str = Field(min_length=1, max_length=255)
    coupon_code: str | None = Field(default=None, max_length=50)
    notes: str | None = Field(default=None, max_length=2000)
    shipping: ShippingSchema
    items: list[CartItemSchema] = Field(min_length=1)


class TotalsSchema(BaseModel):
    subtotal_cents: int
    discount_cents: int
    shipping_cents: int
    total_cents: int


class CreateIntentResponse(BaseModel):
    client_secret: str
    order_id: str
    totals: TotalsSchema


class WebhookAckResponse(BaseModel):
    received: bool = True


class HoldSweepResponse(BaseModel):
    released: int
