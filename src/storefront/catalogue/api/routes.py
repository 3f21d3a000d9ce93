"""FastAPI endpoints for the Catalogue context."""

import json
from dataclasses import asdict
from typing import Literal

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.api.auth import require_admin
from storefront.catalogue.api.schemas import (
    AdjustStockRequest,
    CategoryIdResponse,
    CreateCategoryRequest,
    CreateProductRequest,
    ProductIdResponse,
    StatusResponse,
)
from storefront.catalogue.category.management import CreateCategory
from storefront.catalogue.product.creation import CreateProduct
from storefront.catalogue.product.queries import (
    featured_products,
    get_product,
    list_categories,
    list_products,
)
from storefront.catalogue.product.removal import DeleteProduct
from storefront.catalogue.product.stock import AdjustVariantStock
from storefront.utils.pagination import MAX_PAGE_SIZE

product_router = APIRouter(prefix="/products", tags=["products"])
category_router = APIRouter(prefix="/categories", tags=["categories"])


# --- Product endpoints ---


@product_router.get("")
async def browse_products(
    category: str | None = None,
    min_price: float | None = Query(default=None, ge=0),
    max_price: float | None = Query(default=None, ge=0),
    status: Literal["sale", "new", "best"] | None = None,
    sort: Literal["newest", "price-low", "price-high", "popular"] = "newest",
    page: int = Query(default=1, ge=1),
    page_size: int | None = Query(default=None, ge=1, le=MAX_PAGE_SIZE),
) -> dict:
    result = list_products(
        category=category,
        min_price=min_price,
        max_price=max_price,
        status=status,
        sort=sort,
        page=page,
        page_size=page_size,
    )
    return asdict(result)


@product_router.get("/featured")
async def featured() -> list[dict]:
    return featured_products()


@product_router.get("/{product_id}")
async def product_detail(product_id: str) -> dict:
    return get_product(product_id)


@product_router.post("", status_code=201, response_model=ProductIdResponse, dependencies=[Depends(require_admin)])
async def create_product(body: CreateProductRequest) -> ProductIdResponse:
    command = CreateProduct(
        name=body.name,
        subtitle=body.subtitle,
        description=body.description,
        base_price_cents=body.base_price_cents,
        sale_price_cents=body.sale_price_cents,
        is_active=body.is_active,
        is_sale=body.is_sale,
        is_new=body.is_new,
        is_best_seller=body.is_best_seller,
        category_id=body.category_id,
        images=json.dumps([image.model_dump() for image in body.images]),
        variants=json.dumps([variant.model_dump() for variant in body.variants]),
    )
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.delete("/{product_id}", response_model=StatusResponse, dependencies=[Depends(require_admin)])
async def delete_product(product_id: str) -> StatusResponse:
    current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


@product_router.put(
    "/{product_id}/variants/{variant_id}/stock",
    response_model=StatusResponse,
    dependencies=[Depends(require_admin)],
)
async def adjust_variant_stock(product_id: str, variant_id: str, body: AdjustStockRequest) -> StatusResponse:
    command = AdjustVariantStock(product_id=product_id, variant_id=variant_id, stock=body.stock)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# --- Category endpoints ---


@category_router.get("")
async def categories() -> list[dict]:
    return list_categories()


@category_router.post("", status_code=201, response_model=CategoryIdResponse, dependencies=[Depends(require_admin)])
async def create_category(body: CreateCategoryRequest) -> CategoryIdResponse:
    command = CreateCategory(name=body.name, slug=body.slug, description=body.description)
    result = current_domain.process(command, asynchronous=False)
    return CategoryIdResponse(category_id=result)
