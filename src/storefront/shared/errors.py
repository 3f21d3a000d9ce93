"""Storefront error taxonomy.

Every business failure is a ``StorefrontError`` tagged with an ``ErrorKind``;
the HTTP layer turns the kind into a status code through ``STATUS_CODES``.
"""

from enum import Enum


class ErrorKind(Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    UPSTREAM_FAILURE = "upstream_failure"
    INTERNAL = "internal"


STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.UNAUTHORIZED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.UPSTREAM_FAILURE: 502,
    ErrorKind.INTERNAL: 500,
}


class StorefrontError(Exception):
    """Base exception for all storefront errors."""

    kind = ErrorKind.INTERNAL

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return STATUS_CODES[self.kind]


class RequestInvalid(StorefrontError):
    """Raised when a request is malformed beyond what schema validation catches."""

    kind = ErrorKind.VALIDATION


class ProductNotFound(StorefrontError):
    """Raised when a product id does not resolve to an active catalogue product."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product not found: {product_id}")


class VariantNotFound(StorefrontError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, variant_id: str):
        self.variant_id = variant_id
        super().__init__(f"Variant not found: {variant_id}")


class VariantMismatch(StorefrontError):
    """Raised when a variant does not belong to the product it was ordered with."""

    kind = ErrorKind.CONFLICT

    def __init__(self, product_id: str, variant_id: str):
        self.product_id = product_id
        self.variant_id = variant_id
        super().__init__(f"Variant {variant_id} does not belong to product {product_id}")


class InsufficientStock(StorefrontError):
    """Raised when a variant cannot cover the requested quantity."""

    kind = ErrorKind.CONFLICT

    def __init__(self, variant_id: str, requested: int, available: int):
        self.variant_id = variant_id
        self.requested = requested
        self.available = available
        super().__init__(f"Insufficient stock for variant {variant_id}: requested {requested}, available {available}")


class InvalidCoupon(StorefrontError):
    """Raised when a coupon code is unknown, inactive or outside its validity window."""

    kind = ErrorKind.VALIDATION

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Invalid coupon: {code}")


class DuplicateCoupon(StorefrontError):
    kind = ErrorKind.CONFLICT

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Coupon already exists: {code}")


class CouponNotFound(StorefrontError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Coupon not found: {code}")


class OrderNotFound(StorefrontError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order not found: {order_id}")


class CategoryNotFound(StorefrontError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, category_id: str):
        self.category_id = category_id
        super().__init__(f"Category not found: {category_id}")


class DuplicateCategory(StorefrontError):
    kind = ErrorKind.CONFLICT

    def __init__(self, slug: str):
        self.slug = slug
        super().__init__(f"Category already exists: {slug}")


class ProductInUse(StorefrontError):
    """Raised when deleting a product that order history still references."""

    kind = ErrorKind.CONFLICT

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product {product_id} is referenced by existing orders and cannot be deleted")


class Unauthorized(StorefrontError):
    kind = ErrorKind.UNAUTHORIZED

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class Forbidden(StorefrontError):
    kind = ErrorKind.FORBIDDEN

    def __init__(self, message: str = "Admin privileges required"):
        super().__init__(message)


class UpstreamFailure(StorefrontError):
    """Raised when the payment processor or identity provider call fails."""

    kind = ErrorKind.UPSTREAM_FAILURE


class WebhookVerificationError(StorefrontError):
    """Raised when a webhook payload fails signature verification."""

    kind = ErrorKind.VALIDATION

    def __init__(self, reason: str):
        super().__init__(f"Webhook Error: {reason}")
