"""Variant stock adjustment: command and handler (admin inventory)."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.shared.errors import ProductNotFound


@storefront.command(part_of="Product")
class AdjustVariantStock:
    product_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    stock = Integer(required=True, min_value=0)


@storefront.command_handler(part_of=Product)
class AdjustVariantStockHandler:
    @handle(AdjustVariantStock)
    def adjust_variant_stock(self, command):
        repo = current_domain.repository_for(Product)
        try:
            product = repo.get(command.product_id)
        except ObjectNotFoundError:
            raise ProductNotFound(str(command.product_id)) from None

        product.adjust_stock(command.variant_id, command.stock)
        repo.add(product)
