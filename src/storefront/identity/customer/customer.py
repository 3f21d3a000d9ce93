"""Customer aggregate: the shopper an order is billed to."""

from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String

from storefront.domain import storefront


def normalize_email(email: str) -> str:
    return email.strip().lower()


@storefront.aggregate
class Customer:
    email = String(required=True, max_length=254, unique=True)
    name = String(max_length=255)
    phone = String(max_length=32)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def email_must_look_like_an_address(self):
        email = self.email or ""
        local, _, domain = email.partition("@")
        if not local or "." not in domain or " " in email:
            raise ValidationError({"email": [f"Invalid email address: {self.email!r}"]})

    @classmethod
    def register(cls, email, name=None, phone=None):
        now = datetime.now(UTC)
        return cls(email=normalize_email(email), name=name, phone=phone, created_at=now, updated_at=now)

    def rename(self, name):
        if name and name != self.name:
            self.name = name
            self.updated_at = datetime.now(UTC)
