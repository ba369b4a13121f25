"""Returning an order's reserved stock to the catalogue."""

from protean.utils.globals import current_domain

from marketplace.catalogue.product.product import Product
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


def restore_inventory(order):
    """Release every item's quantity back to its product.

    Products deleted since the sale are skipped; the order keeps its snapshot.
    """
    repo = current_domain.repository_for(Product)
    for item in order.items:
        product = repo.find(item.product_id)
        if product is None:
            logger.warning(
                "inventory_restore_skipped",
                order_id=str(order.id),
                product_id=str(item.product_id),
                reason="product_removed",
            )
            continue
        product.release(item.quantity)
        repo.add(product)
