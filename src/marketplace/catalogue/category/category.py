"""Category aggregate for grouping products."""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, String, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="Category")
class CategoryCreated:
    __version__ = 1

    category_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    parent_id: Identifier()


@marketplace.aggregate
class Category:
    name: String(required=True, max_length=100)
    slug: String(required=True, max_length=120, unique=True)
    description: Text()
    parent_id: Identifier()
    created_at: DateTime()

    @classmethod
    def create(cls, name, slug, description=None, parent_id=None):
        category = cls(
            name=name,
            slug=slug,
            description=description,
            parent_id=parent_id,
            created_at=datetime.now(UTC),
        )
        category.raise_(
            CategoryCreated(
                category_id=category.id,
                name=name,
                slug=slug,
                parent_id=parent_id,
            )
        )
        return category
