"""Integration tests for Coupon API endpoints via TestClient."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from storefront.api.errors import install_error_handlers
from storefront.promotions.api.routes import coupon_router


@pytest.fixture()
def client():
    app = FastAPI()
    install_error_handlers(app)
    app.include_router(coupon_router)
    return TestClient(app)


class TestCouponCheck:
    def test_valid_coupon(self, client, make_coupon):
        make_coupon(code="WELCOME", percent_off=10)

        response = client.get("/coupons/welcome")

        assert response.status_code == 200
        body = response.json()
        assert body["valid"] is True
        assert body["coupon"]["code"] == "WELCOME"
        assert body["coupon"]["percent_off"] == 10

    def test_unknown_coupon(self, client):
        response = client.get("/coupons/NOPE")

        assert response.status_code == 404
        assert response.json() == {"valid": False}

    def test_expired_coupon_is_not_valid(self, client, make_coupon):
        make_coupon(code="OLD", ends_at=datetime.now(UTC) - timedelta(days=1))

        assert client.get("/coupons/OLD").json() == {"valid": False}


class TestCouponAdministration:
    def test_create_and_list(self, client, admin_headers):
        created = client.post("/coupons", json={"code": "summer", "amount_off_cents": 1000}, headers=admin_headers)

        assert created.status_code == 201
        listing = client.get("/coupons", headers=admin_headers)
        assert [c["code"] for c in listing.json()] == ["SUMMER"]

    def test_create_requires_one_reduction(self, client, admin_headers):
        response = client.post(
            "/coupons",
            json={"code": "BOTH", "percent_off": 10, "amount_off_cents": 100},
            headers=admin_headers,
        )

        assert response.status_code == 400

    def test_duplicate_code(self, client, make_coupon, admin_headers):
        make_coupon(code="TAKEN")

        response = client.post("/coupons", json={"code": "taken", "percent_off": 5}, headers=admin_headers)

        assert response.status_code == 409

    def test_deactivate(self, client, make_coupon, admin_headers):
        make_coupon(code="BYE")

        response = client.put("/coupons/bye/deactivate", headers=admin_headers)

        assert response.status_code == 200
        assert client.get("/coupons/BYE").status_code == 404

    def test_listing_requires_admin(self, client, user_headers):
        assert client.get("/coupons", headers=user_headers).status_code == 403
