"""Category aggregate."""

import re
from datetime import UTC, datetime

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, String, Text

from storefront.domain import storefront

_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def slugify(name: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", name.strip().lower()).strip("-")


@storefront.aggregate
class Category:
    name = String(required=True, max_length=100)
    slug = String(required=True, max_length=120, unique=True)
    description = Text()
    created_at = DateTime()

    @invariant.post
    def slug_must_be_url_safe(self):
        if not _SLUG_PATTERN.match(self.slug or ""):
            raise ValidationError({"slug": ["Slug must contain only lowercase alphanumerics separated by hyphens"]})

    @classmethod
    def create(cls, name, slug=None, description=None):
        return cls(
            name=name,
            slug=slug or slugify(name),
            description=description,
            created_at=datetime.now(UTC),
        )
