"""Splitting checkout lines by the store that sells each product.

Repeated lines for the same product are merged (first position kept, quantities
summed) before availability is checked.
"""

from dataclasses import dataclass

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.catalogue.product.product import Product
from marketplace.catalogue.store.store import Store
from marketplace.errors import EmptyCart, InvalidQuantity, ProductNotFound, ProductUnavailable


@dataclass(frozen=True)
class ResolvedLine:
    product: Product
    quantity: int


def coerce_quantity(product_id, raw) -> int:
    """Accept ints and whole-number strings; reject everything else."""
    if isinstance(raw, bool):
        raise InvalidQuantity(product_id, raw)
    if isinstance(raw, int):
        quantity = raw
    elif isinstance(raw, str) and raw.strip().isdigit():
        quantity = int(raw.strip())
    elif isinstance(raw, float) and raw.is_integer():
        quantity = int(raw)
    else:
        raise InvalidQuantity(product_id, raw)

    if quantity <= 0:
        raise InvalidQuantity(product_id, raw)
    return quantity


def merge_lines(lines) -> list[tuple[str, int]]:
    merged: dict[str, int] = {}
    for product_id, raw_quantity in lines:
        quantity = coerce_quantity(product_id, raw_quantity)
        key = str(product_id)
        merged[key] = merged.get(key, 0) + quantity
    return list(merged.items())


def partition_cart(lines) -> dict[str, list[ResolvedLine]]:
    """Resolve ``(product_id, quantity)`` pairs and group them by store.

    Stores appear in the order their first product appears in ``lines``.
    """
    merged = merge_lines(lines)
    if not merged:
        raise EmptyCart()

    product_repo = current_domain.repository_for(Product)
    store_repo = current_domain.repository_for(Store)
    stores: dict[str, Store | None] = {}
    groups: dict[str, list[ResolvedLine]] = {}

    for product_id, quantity in merged:
        product = product_repo.find(product_id)
        if product is None:
            raise ProductNotFound(product_id)
        if not product.is_active:
            raise ProductUnavailable(product.id, "product is not active")

        store_id = str(product.store_id)
        if store_id not in stores:
            try:
                stores[store_id] = store_repo.get(store_id)
            except ObjectNotFoundError:
                stores[store_id] = None
        store = stores[store_id]
        if store is None or not store.is_orderable:
            raise ProductUnavailable(product.id, "store is not accepting orders")

        if not product.in_stock(quantity):
            raise ProductUnavailable(
                product.id,
                "insufficient inventory",
                requested=quantity,
                available=product.inventory or 0,
            )

        groups.setdefault(store_id, []).append(ResolvedLine(product=product, quantity=quantity))

    return groups
