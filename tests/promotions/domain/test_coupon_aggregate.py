"""Tests for the Coupon aggregate and its validity window."""

from datetime import UTC, datetime, timedelta

import pytest
from protean.exceptions import ValidationError
from storefront.promotions.coupon.coupon import Coupon, normalize_code

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=UTC)


class TestCouponConstruction:
    def test_code_is_normalized(self):
        coupon = Coupon.create(code="  summer20 ", percent_off=20)
        assert coupon.code == "SUMMER20"

    def test_normalize_code(self):
        assert normalize_code(" abc ") == "ABC"
        assert normalize_code(None) == ""

    def test_percent_off_bounds(self):
        with pytest.raises(ValidationError):
            Coupon.create(code="TOO-MUCH", percent_off=101)

    def test_requires_a_reduction(self):
        with pytest.raises(ValidationError):
            Coupon.create(code="NOTHING")

    def test_reductions_are_mutually_exclusive(self):
        with pytest.raises(ValidationError):
            Coupon.create(code="BOTH", percent_off=10, amount_off_cents=500)

    def test_window_must_be_ordered(self):
        with pytest.raises(ValidationError):
            Coupon.create(code="BACKWARDS", percent_off=10, starts_at=NOW, ends_at=NOW - timedelta(days=1))


class TestCouponValidity:
    def test_unbounded_active_coupon_is_valid(self):
        coupon = Coupon.create(code="ALWAYS", percent_off=10)
        assert coupon.is_valid_at(NOW)

    def test_inactive_coupon_is_invalid(self):
        coupon = Coupon.create(code="OFF", percent_off=10, active=False)
        assert not coupon.is_valid_at(NOW)

    def test_future_start_is_invalid(self):
        coupon = Coupon.create(code="SOON", percent_off=10, starts_at=NOW + timedelta(hours=1))
        assert not coupon.is_valid_at(NOW)

    def test_past_end_is_invalid(self):
        coupon = Coupon.create(code="GONE", percent_off=10, ends_at=NOW - timedelta(seconds=1))
        assert not coupon.is_valid_at(NOW)

    def test_window_bounds_are_inclusive(self):
        coupon = Coupon.create(code="EDGE", percent_off=10, starts_at=NOW, ends_at=NOW)
        assert coupon.is_valid_at(NOW)

    def test_naive_datetimes_are_treated_as_utc(self):
        coupon = Coupon.create(code="NAIVE", percent_off=10, ends_at=datetime(2026, 6, 1, 13, 0))
        assert coupon.is_valid_at(NOW)

    def test_deactivate(self):
        coupon = Coupon.create(code="STOP", percent_off=10)
        coupon.deactivate()
        assert not coupon.is_valid_at(NOW)
