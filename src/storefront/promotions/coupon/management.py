"""Coupon management: commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.promotions.coupon.coupon import Coupon, normalize_code
from storefront.shared.errors import CouponNotFound, DuplicateCoupon


@storefront.command(part_of="Coupon")
class CreateCoupon:
    code = String(required=True, max_length=50)
    percent_off = Integer(min_value=0, max_value=100)
    amount_off_cents = Integer(min_value=0)
    starts_at = DateTime()
    ends_at = DateTime()


@storefront.command(part_of="Coupon")
class DeactivateCoupon:
    code = String(required=True, max_length=50)


@storefront.command_handler(part_of=Coupon)
class CouponManagementHandler:
    @handle(CreateCoupon)
    def create_coupon(self, command):
        repo = current_domain.repository_for(Coupon)
        code = normalize_code(command.code)
        try:
            repo._dao.find_by(code=code)
        except ObjectNotFoundError:
            pass
        else:
            raise DuplicateCoupon(code)

        coupon = Coupon.create(
            code=code,
            percent_off=command.percent_off,
            amount_off_cents=command.amount_off_cents,
            starts_at=command.starts_at,
            ends_at=command.ends_at,
        )
        repo.add(coupon)
        return str(coupon.id)

    @handle(DeactivateCoupon)
    def deactivate_coupon(self, command):
        repo = current_domain.repository_for(Coupon)
        code = normalize_code(command.code)
        try:
            coupon = repo._dao.find_by(code=code)
        except ObjectNotFoundError:
            raise CouponNotFound(code) from None

        coupon.deactivate()
        repo.add(coupon)
