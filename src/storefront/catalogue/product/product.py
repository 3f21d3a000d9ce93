"""Product aggregate root with Variant and Image entities.

Prices are integer minor units (cents). A product's unit price resolves as
variant override, then sale price (only while ``is_sale`` is set), then base
price. Stock lives on variants: ``stock`` is what is physically sellable and
``reserved`` is the part of it held for checkouts awaiting payment.
"""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, Identifier, Integer, String, Text

from storefront.catalogue.product.events import ProductCreated, VariantStockAdjusted
from storefront.domain import storefront
from storefront.shared.errors import InsufficientStock, VariantNotFound


@storefront.entity(part_of="Product")
class Variant:
    sku = String(required=True, max_length=64)
    name = String(max_length=100)
    price_cents = Integer(min_value=0)  # Optional override of the product price
    stock = Integer(default=0, min_value=0)
    reserved = Integer(default=0, min_value=0)

    @property
    def available(self) -> int:
        return (self.stock or 0) - (self.reserved or 0)


@storefront.entity(part_of="Product")
class Image:
    url = String(required=True, max_length=500)
    alt = String(max_length=255)
    position = Integer(default=0)


@storefront.aggregate
class Product:
    name = String(required=True, max_length=255)
    subtitle = String(max_length=255)
    description = Text()
    base_price_cents = Integer(required=True, min_value=1)
    sale_price_cents = Integer(min_value=0)
    display_price_cents = Integer(min_value=0)
    is_active = Boolean(default=True)
    is_sale = Boolean(default=False)
    is_new = Boolean(default=False)
    is_best_seller = Boolean(default=False)
    popularity = Integer(default=0)
    category_id = Identifier(required=True)
    variants = HasMany(Variant)
    images = HasMany(Image)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def reserved_stock_cannot_exceed_stock(self):
        for variant in self.variants:
            if (variant.reserved or 0) > (variant.stock or 0):
                raise ValidationError({"variants": [f"Variant {variant.sku} has more stock reserved than on hand"]})

    @invariant.post
    def variant_skus_must_be_unique(self):
        skus = [variant.sku for variant in self.variants]
        if len(skus) != len(set(skus)):
            raise ValidationError({"variants": ["Variant SKUs must be unique within a product"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        name,
        base_price_cents,
        category_id,
        subtitle=None,
        description=None,
        sale_price_cents=None,
        is_active=True,
        is_sale=False,
        is_new=False,
        is_best_seller=False,
        images=None,
        variants=None,
    ):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            subtitle=subtitle,
            description=description,
            base_price_cents=base_price_cents,
            sale_price_cents=sale_price_cents,
            display_price_cents=_display_price(base_price_cents, sale_price_cents, is_sale),
            is_active=is_active,
            is_sale=is_sale,
            is_new=is_new,
            is_best_seller=is_best_seller,
            category_id=category_id,
            created_at=now,
            updated_at=now,
        )

        for position, image in enumerate(images or []):
            product.add_images(Image(url=image["url"], alt=image.get("alt"), position=position))

        for variant in variants or []:
            product.add_variants(
                Variant(
                    sku=variant["sku"],
                    name=variant.get("name"),
                    price_cents=variant.get("price_cents"),
                    stock=variant.get("stock", 0),
                )
            )

        product.raise_(
            ProductCreated(
                product_id=str(product.id),
                name=name,
                category_id=str(category_id),
                base_price_cents=base_price_cents,
                created_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Pricing
    # -------------------------------------------------------------------
    @property
    def effective_price_cents(self) -> int:
        """Sale price while the product is on sale, otherwise the base price."""
        return _display_price(self.base_price_cents, self.sale_price_cents, self.is_sale)

    def unit_price_cents(self, variant=None) -> int:
        if variant is not None and variant.price_cents is not None:
            return variant.price_cents
        return self.effective_price_cents

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def find_variant(self, variant_id):
        return next((v for v in self.variants if str(v.id) == str(variant_id)), None)

    def _variant_or_raise(self, variant_id):
        variant = self.find_variant(variant_id)
        if variant is None:
            raise VariantNotFound(str(variant_id))
        return variant

    def decrement_stock(self, variant_id, quantity):
        """Sell ``quantity`` units straight from unreserved stock."""
        variant = self._variant_or_raise(variant_id)
        if variant.available < quantity:
            raise InsufficientStock(str(variant_id), quantity, max(variant.available, 0))
        variant.stock -= quantity
        self.updated_at = datetime.now(UTC)

    def hold_stock(self, variant_id, quantity):
        """Reserve ``quantity`` units for a checkout awaiting payment."""
        variant = self._variant_or_raise(variant_id)
        if variant.available < quantity:
            raise InsufficientStock(str(variant_id), quantity, max(variant.available, 0))
        variant.reserved += quantity
        self.updated_at = datetime.now(UTC)

    def release_hold(self, variant_id, quantity):
        variant = self._variant_or_raise(variant_id)
        variant.reserved = max(0, variant.reserved - quantity)
        self.updated_at = datetime.now(UTC)

    def commit_hold(self, variant_id, quantity):
        """Turn a held reservation into a sale."""
        variant = self._variant_or_raise(variant_id)
        if variant.reserved < quantity or variant.stock < quantity:
            raise InsufficientStock(str(variant_id), quantity, variant.stock)
        variant.reserved -= quantity
        variant.stock -= quantity
        self.updated_at = datetime.now(UTC)

    def adjust_stock(self, variant_id, stock):
        variant = self._variant_or_raise(variant_id)
        if stock < (variant.reserved or 0):
            raise ValidationError({"stock": [f"Stock cannot drop below the {variant.reserved} units currently reserved"]})

        previous = variant.stock
        variant.stock = stock
        self.updated_at = datetime.now(UTC)

        self.raise_(
            VariantStockAdjusted(
                product_id=str(self.id),
                variant_id=str(variant.id),
                previous_stock=previous,
                new_stock=stock,
            )
        )


def _display_price(base_price_cents, sale_price_cents, is_sale):
    if is_sale and sale_price_cents is not None:
        return sale_price_cents
    return base_price_cents
