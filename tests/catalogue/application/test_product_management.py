"""Application tests for catalogue administration commands."""

import json

import pytest
from protean.utils.globals import current_domain
from storefront.catalogue.category.category import Category
from storefront.catalogue.category.management import CreateCategory
from storefront.catalogue.product.creation import CreateProduct
from storefront.catalogue.product.product import Product
from storefront.catalogue.product.removal import DeleteProduct
from storefront.catalogue.product.stock import AdjustVariantStock
from storefront.ordering.order.placement import PlaceOrder
from storefront.shared.errors import CategoryNotFound, DuplicateCategory, ProductInUse, ProductNotFound


def _create_product(category, **overrides):
    defaults = {
        "name": "Pleated Skirt",
        "base_price_cents": 5400,
        "category_id": str(category.id),
        "variants": json.dumps([{"sku": "SKIRT-S", "name": "Small", "stock": 4}]),
        "images": json.dumps([{"url": "https://cdn.example.com/skirt.jpg", "alt": "Skirt"}]),
    }
    defaults.update(overrides)
    return current_domain.process(CreateProduct(**defaults), asynchronous=False)


class TestCreateProduct:
    def test_create_product(self, category):
        product_id = _create_product(category)

        product = current_domain.repository_for(Product).get(product_id)
        assert product.name == "Pleated Skirt"
        assert product.variants[0].sku == "SKIRT-S"
        assert product.images[0].alt == "Skirt"

    def test_unknown_category(self):
        with pytest.raises(CategoryNotFound):
            current_domain.process(
                CreateProduct(name="Orphan", base_price_cents=100, category_id="missing"),
                asynchronous=False,
            )


class TestDeleteProduct:
    def test_delete_unreferenced_product(self, category):
        product_id = _create_product(category)

        current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)

        assert current_domain.repository_for(Product)._dao.query.all().total == 0

    def test_delete_unknown_product(self):
        with pytest.raises(ProductNotFound):
            current_domain.process(DeleteProduct(product_id="missing"), asynchronous=False)

    def test_product_with_order_history_is_kept(self, category, shipping):
        product_id = _create_product(category)
        product = current_domain.repository_for(Product).get(product_id)
        items = [{"product_id": product_id, "variant_id": str(product.variants[0].id), "quantity": 1}]
        current_domain.process(
            PlaceOrder(shipping=json.dumps(shipping), items=json.dumps(items)),
            asynchronous=False,
        )

        with pytest.raises(ProductInUse):
            current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)

        assert current_domain.repository_for(Product).get(product_id) is not None


class TestAdjustVariantStock:
    def test_set_stock(self, make_product):
        product = make_product()
        variant = product.variants[0]

        current_domain.process(
            AdjustVariantStock(product_id=str(product.id), variant_id=str(variant.id), stock=25),
            asynchronous=False,
        )

        assert current_domain.repository_for(Product).get(product.id).variants[0].stock == 25

    def test_unknown_product(self):
        with pytest.raises(ProductNotFound):
            current_domain.process(
                AdjustVariantStock(product_id="missing", variant_id="missing", stock=1),
                asynchronous=False,
            )


class TestCreateCategory:
    def test_create_category(self):
        category_id = current_domain.process(CreateCategory(name="Outerwear"), asynchronous=False)

        category = current_domain.repository_for(Category).get(category_id)
        assert category.slug == "outerwear"

    def test_duplicate_slug(self):
        current_domain.process(CreateCategory(name="Outerwear"), asynchronous=False)

        with pytest.raises(DuplicateCategory):
            current_domain.process(CreateCategory(name="OUTERWEAR"), asynchronous=False)
