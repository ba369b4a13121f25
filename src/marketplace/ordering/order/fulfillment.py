"""Order fulfillment by the store owner — commands and handler.

Store owners move their orders forward one step at a time
(confirmed → processing → shipped → delivered) and may cancel an order
until it ships. Asking for the status an order already has changes nothing.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.catalogue.store.store import Store
from marketplace.domain import marketplace
from marketplace.errors import PermissionDenied
from marketplace.ordering.order.cancellation import load_order
from marketplace.ordering.order.inventory import restore_inventory
from marketplace.ordering.order.order import Order, OrderStatus
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


@marketplace.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)
    tracking_number = String(max_length=255)


@marketplace.command(part_of="Order")
class FulfillOrder:
    """Mark an order shipped, optionally with the carrier's tracking number."""

    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    tracking_number = String(max_length=255)


def _owned_order(order_id, actor_id) -> Order:
    order = load_order(order_id)
    store = current_domain.repository_for(Store).get(order.store_id)
    if not store.is_owned_by(actor_id):
        raise PermissionDenied("Only the store owner can update this order")
    return order


def _advance(order: Order, target, tracking_number=None):
    previous = order.status
    if not order.advance_to(target, tracking_number=tracking_number):
        return

    if order.status == OrderStatus.CANCELLED.value:
        restore_inventory(order)
    current_domain.repository_for(Order).add(order)
    logger.info("order_status_updated", order_id=str(order.id), previous_status=previous, new_status=order.status)


@marketplace.command_handler(part_of=Order)
class FulfillmentHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        order = _owned_order(command.order_id, command.actor_id)
        _advance(order, command.status, tracking_number=command.tracking_number)
        return order.status

    @handle(FulfillOrder)
    def fulfill(self, command):
        order = _owned_order(command.order_id, command.actor_id)
        _advance(order, OrderStatus.SHIPPED, tracking_number=command.tracking_number)
        return order.status
