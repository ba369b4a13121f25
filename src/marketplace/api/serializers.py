"""JSON representations of aggregates returned by the API."""


def _iso(value):
    return value.isoformat() if value else None


def _address(address):
    return address.to_dict() if address else None


def serialize_order_item(item) -> dict:
    snapshot = item.product_snapshot
    return {
        "id": str(item.id),
        "product_id": str(item.product_id),
        "quantity": item.quantity,
        "unit_price": item.unit_price,
        "total_price": item.total_price,
        "product_name": item.product_name,
        "product_sku": item.product_sku,
        "product_image": item.product_image,
        "product_snapshot": snapshot.to_dict() if snapshot else None,
    }


def serialize_order(order) -> dict:
    return {
        "id": str(order.id),
        "order_number": order.order_number,
        "user_id": str(order.user_id),
        "store_id": str(order.store_id),
        "status": order.status,
        "payment_status": order.payment_status,
        "subtotal": order.subtotal,
        "shipping_cost": order.shipping_cost,
        "tax_amount": order.tax_amount,
        "total_amount": order.total_amount,
        "item_count": order.item_count,
        "can_cancel": order.can_cancel,
        "shipping_address": _address(order.shipping_address),
        "billing_address": _address(order.billing_address),
        "payment_method": order.payment_method,
        "payment_reference": order.payment_reference,
        "tracking_number": order.tracking_number,
        "notes": order.notes,
        "refund_amount": order.refund_amount,
        "refund_reason": order.refund_reason,
        "items": [serialize_order_item(item) for item in order.items],
        "created_at": _iso(order.created_at),
        "updated_at": _iso(order.updated_at),
        "fulfilled_at": _iso(order.fulfilled_at),
        "cancelled_at": _iso(order.cancelled_at),
        "refunded_at": _iso(order.refunded_at),
    }


def serialize_cart(cart) -> dict:
    if cart is None:
        return {"id": None, "items": [], "item_count": 0, "expires_at": None, "is_expired": False}
    return {
        "id": str(cart.id),
        "items": [
            {"product_id": str(item.product_id), "quantity": item.quantity, "added_at": _iso(item.added_at)}
            for item in cart.items
        ],
        "item_count": cart.item_count,
        "expires_at": _iso(cart.expires_at),
        "is_expired": cart.is_expired,
    }
