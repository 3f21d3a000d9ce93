"""Read-side queries over the product catalogue."""

from dataclasses import dataclass
from enum import Enum

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.category.category import Category
from storefront.catalogue.product.product import Product
from storefront.shared.errors import ProductNotFound
from storefront.utils.pagination import clamp_page_size, page_offset

FEATURED_LIMIT = 8


class ProductStatusFilter(Enum):
    SALE = "sale"
    NEW = "new"
    BEST = "best"


class ProductSort(Enum):
    NEWEST = "newest"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"
    POPULAR = "popular"


_SORT_ORDER = {
    ProductSort.NEWEST: ["-created_at"],
    ProductSort.PRICE_LOW: ["display_price_cents"],
    ProductSort.PRICE_HIGH: ["-display_price_cents"],
    ProductSort.POPULAR: ["-popularity"],
}

_STATUS_FLAGS = {
    ProductStatusFilter.SALE: "is_sale",
    ProductStatusFilter.NEW: "is_new",
    ProductStatusFilter.BEST: "is_best_seller",
}


@dataclass(frozen=True)
class ProductPage:
    items: list[dict]
    total: int
    page: int
    page_size: int


def to_cents(price: float | None) -> int | None:
    """Convert a major-unit price from a query string into cents."""
    if price is None:
        return None
    return round(price * 100)


def _category_names(category_ids) -> dict[str, Category]:
    repo = current_domain.repository_for(Category)
    categories = {}
    for category_id in set(category_ids):
        try:
            categories[category_id] = repo.get(category_id)
        except ObjectNotFoundError:
            continue
    return categories


def summarize(product: Product, category: Category | None) -> dict:
    images = sorted(product.images, key=lambda image: image.position or 0)
    return {
        "id": str(product.id),
        "name": product.name,
        "subtitle": product.subtitle,
        "price_cents": product.effective_price_cents,
        "base_price_cents": product.base_price_cents,
        "sale_price_cents": product.sale_price_cents,
        "image": images[0].url if images else "",
        "category": category.name if category else None,
        "is_new": product.is_new,
        "is_sale": product.is_sale,
        "is_best_seller": product.is_best_seller,
        "popularity": product.popularity,
        "created_at": product.created_at,
    }


def list_products(
    category=None,
    min_price=None,
    max_price=None,
    status=None,
    sort=ProductSort.NEWEST,
    page=1,
    page_size=None,
) -> ProductPage:
    """Filter, sort and paginate active products.

    ``min_price``/``max_price`` are in major units and compare against the
    price a shopper would pay (sale price while on sale, else base price).
    """
    size = clamp_page_size(page_size)
    criteria = {"is_active": True}

    if category:
        try:
            found = current_domain.repository_for(Category)._dao.find_by(slug=category)
        except ObjectNotFoundError:
            return ProductPage(items=[], total=0, page=page, page_size=size)
        criteria["category_id"] = str(found.id)

    if status is not None:
        criteria[_STATUS_FLAGS[ProductStatusFilter(status)]] = True

    min_cents = to_cents(min_price)
    if min_cents is not None:
        criteria["display_price_cents__gte"] = min_cents
    max_cents = to_cents(max_price)
    if max_cents is not None:
        criteria["display_price_cents__lte"] = max_cents

    results = (
        current_domain.repository_for(Product)
        ._dao.query.filter(**criteria)
        .order_by(_SORT_ORDER[ProductSort(sort)])
        .offset(page_offset(page, size))
        .limit(size)
        .all()
    )

    categories = _category_names(str(p.category_id) for p in results.items)
    items = [summarize(p, categories.get(str(p.category_id))) for p in results.items]
    return ProductPage(items=items, total=results.total, page=page, page_size=size)


def featured_products(limit=FEATURED_LIMIT) -> list[dict]:
    """Best sellers first, then new arrivals, newest first within each group."""
    dao = current_domain.repository_for(Product)._dao
    best = dao.query.filter(is_active=True, is_best_seller=True).order_by(["-created_at"]).limit(limit).all().items
    new = dao.query.filter(is_active=True, is_new=True).order_by(["-created_at"]).limit(limit).all().items

    featured = list(best)
    seen = {str(p.id) for p in featured}
    featured.extend(p for p in new if str(p.id) not in seen)
    featured = featured[:limit]

    categories = _category_names(str(p.category_id) for p in featured)
    return [summarize(p, categories.get(str(p.category_id))) for p in featured]


def get_product(product_id) -> dict:
    try:
        product = current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        raise ProductNotFound(str(product_id)) from None

    category = _category_names([str(product.category_id)]).get(str(product.category_id))
    detail = summarize(product, category)
    detail.update(
        {
            "description": product.description,
            "is_active": product.is_active,
            "category": (
                {"id": str(category.id), "name": category.name, "slug": category.slug} if category else None
            ),
            "images": [
                {"id": str(image.id), "url": image.url, "alt": image.alt, "position": image.position}
                for image in sorted(product.images, key=lambda image: image.position or 0)
            ],
            "variants": [
                {
                    "id": str(variant.id),
                    "sku": variant.sku,
                    "name": variant.name,
                    "price_cents": variant.price_cents,
                    "stock": variant.stock,
                    "available": variant.available,
                }
                for variant in product.variants
            ],
        }
    )
    return detail


def list_categories() -> list[dict]:
    results = current_domain.repository_for(Category)._dao.query.order_by(["name"]).all()
    return [
        {"id": str(c.id), "name": c.name, "slug": c.slug, "description": c.description} for c in results.items
    ]
