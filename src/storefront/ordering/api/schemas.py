"""Pydantic request/response schemas for the Ordering API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands. Checkout reuses the shipping and cart line
models defined here.
"""

from typing import Literal

from pydantic import BaseModel, EmailStr, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ShippingSchema(BaseModel):
    full_name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    phone: str | None = None
    address: str = Field(min_length=1, max_length=500)
    city: str = Field(min_length=1, max_length=100)
    country: str = Field(min_length=1, max_length=100)
    postal_code: str = Field(min_length=1, max_length=20)


class CartItemSchema(BaseModel):
    product_id: str
    variant_id: str | None = None
    quantity: int = Field(ge=1)


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    email: EmailStr | None = None
    name: str | None = None
    coupon_code: str | None = Field(default=None, max_length=50)
    notes: str | None = Field(default=None, max_length=2000)
    shipping: ShippingSchema
    items: list[CartItemSchema] = Field(min_length=1)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "email": "ada@example.com",
                    "name": "Ada Tan",
                    "coupon_code": "SUMMER20",
                    "shipping": {
                        "full_name": "Ada Tan",
                        "email": "ada@example.com",
                        "address": "1 Orchard Road",
                        "city": "Singapore",
                        "country": "SG",
                        "postal_code": "238800",
                    },
                    "items": [{"product_id": "prod-001", "variant_id": "var-001", "quantity": 2}],
                }
            ]
        }
    }


class UpdateOrderRequest(BaseModel):
    status: Literal["PENDING", "PAID", "SHIPPED", "DELIVERED", "CANCELLED"] | None = None
    payment_status: Literal["PENDING", "SUCCEEDED", "FAILED", "REFUNDED"] | None = None
    notes: str | None = Field(default=None, max_length=2000)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class OrderPlacedResponse(BaseModel):
    order_id: str
    subtotal_cents: int
    discount_cents: int
    shipping_cents: int
    total_cents: int


class OrderDeletedResponse(BaseModel):
    message: str = "Order deleted"
    id: str
