"""Product listing, moderation, pricing and stock — commands and handlers."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from marketplace.catalogue.product.product import Product
from marketplace.catalogue.store.store import Store
from marketplace.domain import marketplace
from marketplace.errors import PermissionDenied, ProductNotFound, StoreNotFound
from marketplace.shared.slug import unique_slug
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


@marketplace.command(part_of="Product")
class ListProduct:
    store_id: Identifier(required=True)
    seller_id: Identifier(required=True)
    name: String(required=True, max_length=255)
    base_price: String(required=True, max_length=20)
    compare_at_price: String(max_length=20)
    sku: String(max_length=64)
    inventory: Integer(default=0)
    track_inventory: Boolean(default=True)
    description: Text()
    category_id: Identifier()


@marketplace.command(part_of="Product")
class SubmitProductForReview:
    product_id: Identifier(required=True)


@marketplace.command(part_of="Product")
class ApproveProduct:
    product_id: Identifier(required=True)


@marketplace.command(part_of="Product")
class RejectProduct:
    product_id: Identifier(required=True)
    reason: String(max_length=500)


@marketplace.command(part_of="Product")
class DeactivateProduct:
    product_id: Identifier(required=True)


@marketplace.command(part_of="Product")
class ReactivateProduct:
    product_id: Identifier(required=True)


@marketplace.command(part_of="Product")
class RepriceProduct:
    product_id: Identifier(required=True)
    base_price: String(required=True, max_length=20)
    compare_at_price: String(max_length=20)


@marketplace.command(part_of="Product")
class RestockProduct:
    product_id: Identifier(required=True)
    quantity: Integer(required=True)


@marketplace.command(part_of="Product")
class RemoveProduct:
    product_id: Identifier(required=True)


@marketplace.repository(part_of=Product)
class ProductRepository:
    def find(self, product_id) -> Product | None:
        """Like ``get`` but answers ``None`` for unknown ids."""
        try:
            return self.get(product_id)
        except ObjectNotFoundError:
            return None

    def find_by_slug(self, store_id, slug: str) -> Product | None:
        results = self._dao.query.filter(store_id=str(store_id), slug=slug).all()
        return results.first if results and results.items else None

    def for_store(self, store_id) -> list[Product]:
        return self._dao.query.filter(store_id=str(store_id)).all().items

    def delete_product(self, product: Product):
        self._dao.delete(product)


def load_product(product_id) -> Product:
    product = current_domain.repository_for(Product).find(product_id)
    if product is None:
        raise ProductNotFound(product_id)
    return product


@marketplace.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(ListProduct)
    def list_product(self, command):
        try:
            store = current_domain.repository_for(Store).get(command.store_id)
        except ObjectNotFoundError:
            raise StoreNotFound() from None
        if not store.is_owned_by(command.seller_id):
            raise PermissionDenied("Only the store owner can list products")

        repo = current_domain.repository_for(Product)
        product = Product.create(
            store_id=store.id,
            name=command.name,
            slug=unique_slug(command.name, lambda s: repo.find_by_slug(store.id, s) is not None),
            base_price=command.base_price,
            compare_at_price=command.compare_at_price,
            sku=command.sku,
            inventory=command.inventory,
            track_inventory=command.track_inventory,
            description=command.description,
            category_id=command.category_id,
        )
        repo.add(product)
        return str(product.id)

    @handle(SubmitProductForReview)
    def submit_for_review(self, command):
        product = load_product(command.product_id)
        product.submit_for_review()
        current_domain.repository_for(Product).add(product)

    @handle(ApproveProduct)
    def approve(self, command):
        product = load_product(command.product_id)
        product.approve()
        current_domain.repository_for(Product).add(product)

    @handle(RejectProduct)
    def reject(self, command):
        product = load_product(command.product_id)
        product.reject(command.reason)
        current_domain.repository_for(Product).add(product)

    @handle(DeactivateProduct)
    def deactivate(self, command):
        product = load_product(command.product_id)
        product.deactivate()
        current_domain.repository_for(Product).add(product)

    @handle(ReactivateProduct)
    def reactivate(self, command):
        product = load_product(command.product_id)
        product.reactivate()
        current_domain.repository_for(Product).add(product)

    @handle(RepriceProduct)
    def reprice(self, command):
        product = load_product(command.product_id)
        product.reprice(command.base_price, command.compare_at_price)
        current_domain.repository_for(Product).add(product)

    @handle(RestockProduct)
    def restock(self, command):
        product = load_product(command.product_id)
        product.restock(command.quantity)
        current_domain.repository_for(Product).add(product)

    @handle(RemoveProduct)
    def remove(self, command):
        product = load_product(command.product_id)
        current_domain.repository_for(Product).delete_product(product)
        logger.info("product_removed", product_id=str(product.id), store_id=str(product.store_id))
