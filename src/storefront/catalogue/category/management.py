"""Category management: command and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.category.category import Category, slugify
from storefront.domain import storefront
from storefront.shared.errors import DuplicateCategory


@storefront.command(part_of="Category")
class CreateCategory:
    name = String(required=True, max_length=100)
    slug = String(max_length=120)
    description = Text()


@storefront.command_handler(part_of=Category)
class CategoryManagementHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        repo = current_domain.repository_for(Category)
        slug = command.slug or slugify(command.name)
        try:
            repo._dao.find_by(slug=slug)
        except ObjectNotFoundError:
            pass
        else:
            raise DuplicateCategory(slug)

        category = Category.create(name=command.name, slug=slug, description=command.description)
        repo.add(category)
        return str(category.id)
