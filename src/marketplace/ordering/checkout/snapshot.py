"""Order lines priced from the catalogue and frozen as snapshots."""

from marketplace.ordering.order.order import OrderItem, ProductSnapshot
from marketplace.shared.money import format_money, multiply, to_money


def snapshot_product(product, store_name=None) -> ProductSnapshot:
    return ProductSnapshot(
        product_id=str(product.id),
        name=product.name,
        sku=product.sku,
        image=product.display_image,
        unit_price=format_money(product.base_price),
        store_name=store_name,
    )


def build_order_item(product, quantity: int, store_name=None) -> OrderItem:
    """Price one line at the product's base price.

    The compare-at price is display-only and is never charged.
    """
    unit_price = to_money(product.base_price)
    return OrderItem(
        product_id=str(product.id),
        quantity=quantity,
        unit_price=format_money(unit_price),
        total_price=format_money(multiply(unit_price, quantity)),
        product_snapshot=snapshot_product(product, store_name=store_name),
    )
