"""Domain events for the Order aggregate.

Every status change raises ``OrderStatusChanged``; shipping, cancellation,
refund and payment confirmation additionally raise their own event with the
fields specific to that step.
"""

from protean.fields import DateTime, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Order")
class OrderPlaced:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    user_id = Identifier(required=True)
    store_id = Identifier(required=True)
    subtotal = String(required=True)
    shipping_cost = String(required=True)
    tax_amount = String(required=True)
    total_amount = String(required=True)
    item_count = Integer(required=True)
    placed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class PaymentConfirmed:
    __version__ = 1

    order_id = Identifier(required=True)
    payment_reference = String()
    confirmed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderShipped:
    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    tracking_number = String()
    fulfilled_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    cancelled_by = String(required=True)  # "customer" / "store"
    cancelled_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderRefunded:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    refund_amount = String(required=True)
    refund_reason = String()
    refunded_at = DateTime(required=True)
