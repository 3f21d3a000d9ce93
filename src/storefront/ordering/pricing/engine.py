"""Cart pricing against the live catalogue and coupon state."""

from dataclasses import dataclass

import structlog
from protean.exceptions import ObjectNotFoundError

from storefront.catalogue.product.product import Product
from storefront.ordering.pricing.rules import Pricing, compute_discount, compute_totals
from storefront.promotions.coupon.coupon import normalize_code
from storefront.promotions.coupon.resolver import CouponResolver
from storefront.shared.errors import InvalidCoupon, ProductNotFound, RequestInvalid, VariantMismatch

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CartLine:
    product_id: str
    quantity: int
    variant_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        variant_id = data.get("variant_id")
        return cls(
            product_id=str(data["product_id"]),
            quantity=int(data["quantity"]),
            variant_id=str(variant_id) if variant_id else None,
        )


def as_cart_lines(items) -> list[CartLine]:
    return [item if isinstance(item, CartLine) else CartLine.from_dict(item) for item in items]


class PricingEngine:
    """Computes subtotal, discount, shipping and total for a cart.

    Reads products and coupons but never writes; identical inputs against the
    same catalogue state always price identically.
    """

    def __init__(self, domain, coupon_resolver=None):
        self.domain = domain
        self.coupon_resolver = coupon_resolver or CouponResolver(domain)

    def load_active_product(self, product_id) -> Product:
        try:
            product = self.domain.repository_for(Product).get(product_id)
        except ObjectNotFoundError:
            raise ProductNotFound(str(product_id)) from None
        if not product.is_active:
            raise ProductNotFound(str(product_id))
        return product

    def unit_price(self, line: CartLine) -> int:
        product = self.load_active_product(line.product_id)
        variant = None
        if line.variant_id:
            variant = product.find_variant(line.variant_id)
            if variant is None:
                raise VariantMismatch(line.product_id, line.variant_id)
        return product.unit_price_cents(variant)

    def price_cart(self, items, coupon_code=None, now=None) -> Pricing:
        lines = as_cart_lines(items)
        if not lines:
            raise RequestInvalid("Cart must contain at least one item")

        subtotal = 0
        for line in lines:
            if line.quantity < 1:
                raise RequestInvalid(f"Quantity must be at least 1 for product {line.product_id}")
            subtotal += self.unit_price(line) * line.quantity

        discount = 0
        if normalize_code(coupon_code):
            coupon = self.coupon_resolver.resolve(coupon_code, now=now)
            if coupon is None:
                raise InvalidCoupon(normalize_code(coupon_code))
            discount = compute_discount(subtotal, coupon.percent_off, coupon.amount_off_cents)

        pricing = compute_totals(subtotal, discount)
        logger.debug("cart.priced", lines=len(lines), coupon=normalize_code(coupon_code) or None, **pricing.to_dict())
        return pricing
