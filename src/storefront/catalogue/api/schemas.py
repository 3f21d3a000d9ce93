"""Pydantic request/response schemas for the Catalogue API.

These are external contracts (anti-corruption layer), separate from
internal Protean commands.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ImageSchema(BaseModel):
    url: str = Field(min_length=1, max_length=500)
    alt: str | None = None


class VariantSchema(BaseModel):
    sku: str = Field(min_length=1, max_length=64)
    name: str | None = None
    price_cents: int | None = Field(default=None, ge=0)
    stock: int = Field(default=0, ge=0)


# ---------------------------------------------------------------------------
# Request Schemas
# ---------------------------------------------------------------------------
class CreateProductRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    subtitle: str | None = None
    description: str | None = None
    base_price_cents: int = Field(ge=1)
    sale_price_cents: int | None = Field(default=None, ge=0)
    is_active: bool = True
    is_sale: bool = False
    is_new: bool = False
    is_best_seller: bool = False
    category_id: str
    images: list[ImageSchema] = []
    variants: list[VariantSchema] = []

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Linen Wrap Dress",
                    "base_price_cents": 8900,
                    "sale_price_cents": 6900,
                    "is_sale": True,
                    "category_id": "cat-001",
                    "images": [{"url": "https://cdn.example.com/wrap.jpg", "alt": "Wrap dress"}],
                    "variants": [{"sku": "WRAP-S", "name": "Small", "stock": 10}],
                }
            ]
        }
    }


class AdjustStockRequest(BaseModel):
    stock: int = Field(ge=0)


class CreateCategoryRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    slug: str | None = Field(default=None, max_length=120)
    description: str | None = None


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class ProductIdResponse(BaseModel):
    product_id: str


class CategoryIdResponse(BaseModel):
    category_id: str


class StatusResponse(BaseModel):
    status: str = "ok"
