"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    """A product was added to the catalogue."""

    __version__ = "v1"

    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    category_id = Identifier(required=True)
    base_price_cents = Integer(required=True)
    created_at = DateTime(required=True)


@storefront.event(part_of="Product")
class VariantStockAdjusted:
    """An operator set a variant's on-hand stock to a new count."""

    __version__ = "v1"

    product_id = Identifier(required=True)
    variant_id = Identifier(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
