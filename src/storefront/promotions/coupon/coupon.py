"""Coupon aggregate.

A coupon carries exactly one kind of reduction: a percentage of the subtotal
or a fixed amount in cents. It applies while active and inside its optional
``starts_at``/``ends_at`` window; either bound may be absent.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Integer, String

from storefront.domain import storefront


def normalize_code(code: str | None) -> str:
    return (code or "").strip().upper()


def _aware(moment):
    if moment is not None and moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment


@storefront.aggregate
class Coupon:
    code = String(required=True, max_length=50, unique=True)
    active = Boolean(default=True)
    percent_off = Integer(min_value=0, max_value=100)
    amount_off_cents = Integer(min_value=0)
    starts_at = DateTime()
    ends_at = DateTime()
    created_at = DateTime()

    @invariant.post
    def code_must_be_normalized(self):
        if self.code != normalize_code(self.code):
            raise ValidationError({"code": ["Coupon codes are stored trimmed and uppercase"]})

    @invariant.post
    def exactly_one_reduction(self):
        if (self.percent_off is None) == (self.amount_off_cents is None):
            raise ValidationError({"coupon": ["Set exactly one of percent_off or amount_off_cents"]})

    @invariant.post
    def window_must_be_ordered(self):
        if self.starts_at and self.ends_at and _aware(self.starts_at) > _aware(self.ends_at):
            raise ValidationError({"ends_at": ["ends_at must not precede starts_at"]})

    @classmethod
    def create(cls, code, percent_off=None, amount_off_cents=None, starts_at=None, ends_at=None, active=True):
        return cls(
            code=normalize_code(code),
            active=active,
            percent_off=percent_off,
            amount_off_cents=amount_off_cents,
            starts_at=starts_at,
            ends_at=ends_at,
            created_at=datetime.now(UTC),
        )

    def is_valid_at(self, now: datetime) -> bool:
        now = _aware(now)
        if not self.active:
            return False
        if self.starts_at is not None and now < _aware(self.starts_at):
            return False
        if self.ends_at is not None and now > _aware(self.ends_at):
            return False
        return True

    def deactivate(self):
        self.active = False

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "code": self.code,
            "active": self.active,
            "percent_off": self.percent_off,
            "amount_off_cents": self.amount_off_cents,
            "starts_at": self.starts_at,
            "ends_at": self.ends_at,
        }
