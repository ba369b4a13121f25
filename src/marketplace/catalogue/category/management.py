"""Category management — commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.catalogue.category.category import Category
from marketplace.domain import marketplace
from marketplace.shared.slug import unique_slug


@marketplace.command(part_of="Category")
class CreateCategory:
    name: String(required=True, max_length=100)
    description: Text()
    parent_id: Identifier()


@marketplace.repository(part_of=Category)
class CategoryRepository:
    def find_by_slug(self, slug: str) -> Category | None:
        results = self._dao.query.filter(slug=slug).all()
        return results.first if results and results.items else None


@marketplace.command_handler(part_of=Category)
class ManageCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        repo = current_domain.repository_for(Category)

        if command.parent_id:
            try:
                repo.get(command.parent_id)
            except ObjectNotFoundError:
                raise ValidationError({"parent_id": ["Parent category does not exist"]}) from None

        category = Category.create(
            name=command.name,
            slug=unique_slug(command.name, lambda s: repo.find_by_slug(s) is not None),
            description=command.description,
            parent_id=command.parent_id,
        )
        repo.add(category)
        return str(category.id)
