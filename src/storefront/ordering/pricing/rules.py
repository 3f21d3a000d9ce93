"""Pricing rules.

Pure functions over integer cents. Nothing here touches storage, so the
rules can be checked in isolation from the catalogue.
"""

from dataclasses import asdict, dataclass

FREE_SHIPPING_THRESHOLD_CENTS = 5000
FLAT_SHIPPING_CENTS = 1500


@dataclass(frozen=True)
class Pricing:
    subtotal_cents: int
    discount_cents: int
    shipping_cents: int
    total_cents: int

    def to_dict(self) -> dict:
        return asdict(self)


def resolve_unit_price(base_price_cents, sale_price_cents=None, is_sale=False, variant_price_cents=None) -> int:
    """Variant override, then sale price while on sale, then base price."""
    if variant_price_cents is not None:
        return variant_price_cents
    if is_sale and sale_price_cents is not None:
        return sale_price_cents
    return base_price_cents


def compute_discount(subtotal_cents, percent_off=None, amount_off_cents=None) -> int:
    """Percent-off wins when both are present; the result never exceeds the subtotal."""
    if percent_off is not None:
        return subtotal_cents * percent_off // 100
    if amount_off_cents is not None:
        return min(subtotal_cents, amount_off_cents)
    return 0


def compute_shipping(subtotal_cents, discount_cents=0) -> int:
    """Flat fee unless the discounted subtotal is strictly above the threshold."""
    if subtotal_cents - discount_cents > FREE_SHIPPING_THRESHOLD_CENTS:
        return 0
    return FLAT_SHIPPING_CENTS


def compute_totals(subtotal_cents, discount_cents=0) -> Pricing:
    shipping_cents = compute_shipping(subtotal_cents, discount_cents)
    return Pricing(
        subtotal_cents=subtotal_cents,
        discount_cents=discount_cents,
        shipping_cents=shipping_cents,
        total_cents=max(0, subtotal_cents - discount_cents + shipping_cents),
    )
