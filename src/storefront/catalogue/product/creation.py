"""Product creation: command and handler."""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.category.category import Category
from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.shared.errors import CategoryNotFound


@storefront.command(part_of="Product")
class CreateProduct:
    name = String(required=True, max_length=255)
    subtitle = String(max_length=255)
    description = Text()
    base_price_cents = Integer(required=True, min_value=1)
    sale_price_cents = Integer(min_value=0)
    is_active = Boolean(default=True)
    is_sale = Boolean(default=False)
    is_new = Boolean(default=False)
    is_best_seller = Boolean(default=False)
    category_id = Identifier(required=True)
    images = Text()  # JSON array of {url, alt}
    variants = Text()  # JSON array of {sku, name, price_cents, stock}


@storefront.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        try:
            current_domain.repository_for(Category).get(command.category_id)
        except ObjectNotFoundError:
            raise CategoryNotFound(str(command.category_id)) from None

        product = Product.create(
            name=command.name,
            subtitle=command.subtitle,
            description=command.description,
            base_price_cents=command.base_price_cents,
            sale_price_cents=command.sale_price_cents,
            is_active=command.is_active,
            is_sale=command.is_sale,
            is_new=command.is_new,
            is_best_seller=command.is_best_seller,
            category_id=command.category_id,
            images=json.loads(command.images) if command.images else None,
            variants=json.loads(command.variants) if command.variants else None,
        )
        current_domain.repository_for(Product).add(product)
        return str(product.id)
