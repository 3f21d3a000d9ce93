import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Fetch and activate the domain by pushing the associated domain_context. The activated domain can then be referred to elsewhere as `current_domain`
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env

    from storefront.domain import storefront

    storefront.init()
    storefront.domain_context().push()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session", autouse=True)
def setup_db(request):
    from storefront.domain import storefront
    from storefront.utils.db import drop_db, setup_db

    setup_db(storefront)

    yield

    drop_db(storefront)


@pytest.fixture(autouse=True)
def run_around_tests():
    """Fixture to automatically cleanup infrastructure after every test"""
    from storefront.domain import storefront

    ctx = storefront.domain_context()
    ctx.push()

    yield

    from protean import current_domain
    from storefront.identity.provider import reset_provider
    from storefront.payments.gateway import reset_gateway

    # Clear all databases
    for _, provider in current_domain.providers.items():
        provider._data_reset()

    # Drain event stores
    current_domain.event_store.store._data_reset()

    reset_gateway()
    reset_provider()
    ctx.pop()


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def gateway():
    """A fresh fake payment gateway installed as the active gateway."""
    from storefront.payments.gateway import set_gateway
    from storefront.payments.gateway.fake_adapter import FakeGateway

    fake = FakeGateway()
    set_gateway(fake)
    return fake


@pytest.fixture()
def identity_provider():
    from storefront.identity.provider import set_provider
    from storefront.identity.provider.fake_adapter import FakeIdentityProvider

    provider = FakeIdentityProvider()
    provider.register_admin("admin-token")
    provider.register_user("user-token")
    set_provider(provider)
    return provider


@pytest.fixture()
def admin_headers(identity_provider):
    return {"Authorization": "Bearer admin-token"}


@pytest.fixture()
def user_headers(identity_provider):
    return {"Authorization": "Bearer user-token"}


@pytest.fixture()
def category():
    from protean import current_domain
    from storefront.catalogue.category.category import Category

    record = Category.create(name="Dresses")
    current_domain.repository_for(Category).add(record)
    return record


@pytest.fixture()
def make_product(category):
    """Factory persisting a product; variants default to one SKU with stock 10."""
    from protean import current_domain
    from storefront.catalogue.product.product import Product

    def _make(
        name="Linen Dress",
        base_price_cents=1000,
        sale_price_cents=None,
        is_sale=False,
        variants=None,
        **kwargs,
    ):
        product = Product.create(
            name=name,
            base_price_cents=base_price_cents,
            sale_price_cents=sale_price_cents,
            is_sale=is_sale,
            category_id=str(category.id),
            variants=variants if variants is not None else [{"sku": f"{name[:4].upper()}-M", "stock": 10}],
            **kwargs,
        )
        current_domain.repository_for(Product).add(product)
        return current_domain.repository_for(Product).get(product.id)

    return _make


@pytest.fixture()
def make_coupon():
    from protean import current_domain
    from storefront.promotions.coupon.coupon import Coupon

    def _make(code="SAVE20", **kwargs):
        if "percent_off" not in kwargs and "amount_off_cents" not in kwargs:
            kwargs["percent_off"] = 20
        coupon = Coupon.create(code=code, **kwargs)
        current_domain.repository_for(Coupon).add(coupon)
        return coupon

    return _make


@pytest.fixture()
def shipping():
    return {
        "full_name": "Ada Tan",
        "email": "ada@example.com",
        "phone": "+65 8123 4567",
        "address": "1 Orchard Road",
        "city": "Singapore",
        "country": "SG",
        "postal_code": "238800",
    }
