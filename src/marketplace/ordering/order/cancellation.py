"""Order cancellation by the customer who placed it — command and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.errors import OrderNotFound, PermissionDenied
from marketplace.ordering.order.inventory import restore_inventory
from marketplace.ordering.order.order import CancellationActor, Order
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


@marketplace.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)


def load_order(order_id) -> Order:
    try:
        return current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        raise OrderNotFound() from None


@marketplace.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        order = load_order(command.order_id)
        if not order.belongs_to(command.user_id):
            raise PermissionDenied("Only the customer who placed an order can cancel it")

        if order.cancel(CancellationActor.CUSTOMER):
            restore_inventory(order)
            current_domain.repository_for(Order).add(order)
            logger.info("order_cancelled", order_id=str(order.id), cancelled_by="customer")
        return str(order.id)
