"""Product removal: command and handler.

A product that appears in any order line stays in the catalogue: order
history references it, so removal is refused with a conflict.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Image, Product, Variant
from storefront.domain import storefront
from storefront.shared.errors import ProductInUse, ProductNotFound


@storefront.command(part_of="Product")
class DeleteProduct:
    product_id = Identifier(required=True)


@storefront.command_handler(part_of=Product)
class DeleteProductHandler:
    @handle(DeleteProduct)
    def delete_product(self, command):
        from storefront.ordering.order.order import OrderItem

        repo = current_domain.repository_for(Product)
        try:
            product = repo.get(command.product_id)
        except ObjectNotFoundError:
            raise ProductNotFound(str(command.product_id)) from None

        referencing = (
            current_domain.repository_for(OrderItem)._dao.query.filter(product_id=str(product.id)).limit(1).all()
        )
        if referencing.total > 0:
            raise ProductInUse(str(product.id))

        variant_dao = current_domain.repository_for(Variant)._dao
        for variant in list(product.variants):
            variant_dao.delete(variant)

        image_dao = current_domain.repository_for(Image)._dao
        for image in list(product.images):
            image_dao.delete(image)

        repo._dao.delete(product)
