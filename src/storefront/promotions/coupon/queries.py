"""Read-side queries over coupons."""

from protean.utils.globals import current_domain

from storefront.promotions.coupon.coupon import Coupon


def list_coupons() -> list[dict]:
    results = current_domain.repository_for(Coupon)._dao.query.order_by(["code"]).all()
    return [coupon.to_dict() for coupon in results.items]
