"""Coupon lookup by normalized code and validity window."""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError

from storefront.promotions.coupon.coupon import Coupon, normalize_code


class CouponResolver:
    """Resolves a shopper-entered code to a coupon that applies right now.

    Absence is not an error here: ``resolve`` returns None for unknown,
    inactive or out-of-window codes and callers decide whether that is fatal.
    """

    def __init__(self, domain):
        self.domain = domain

    def resolve(self, code, now=None) -> Coupon | None:
        normalized = normalize_code(code)
        if not normalized:
            return None

        try:
            coupon = self.domain.repository_for(Coupon)._dao.find_by(code=normalized)
        except ObjectNotFoundError:
            return None

        if not coupon.is_valid_at(now or datetime.now(UTC)):
            return None
        return coupon
