"""Order payment — confirmation from the payment provider and refunds.

The payment gateway itself lives outside this service. It reports captured
payments through ``ConfirmOrderPayment`` using a system administrator
account; refunds are issued by system administrators.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.errors import PermissionDenied
from marketplace.identity.user import User
from marketplace.ordering.order.cancellation import load_order
from marketplace.ordering.order.inventory import restore_inventory
from marketplace.ordering.order.order import Order
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)


@marketplace.command(part_of="Order")
class ConfirmOrderPayment:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    payment_reference = String(max_length=255)


@marketplace.command(part_of="Order")
class RefundOrder:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    amount = String(max_length=20)  # defaults to the order total
    reason = String(max_length=500)


def require_system_admin(actor_id) -> User:
    try:
        actor = current_domain.repository_for(User).get(actor_id)
    except ObjectNotFoundError:
        raise PermissionDenied("Only system administrators can do this") from None
    if not (actor.is_active and actor.is_system_admin):
        raise PermissionDenied("Only system administrators can do this")
    return actor


@marketplace.command_handler(part_of=Order)
class PaymentHandler:
    @handle(ConfirmOrderPayment)
    def confirm_payment(self, command):
        require_system_admin(command.actor_id)
        order = load_order(command.order_id)
        if order.confirm_payment(command.payment_reference):
            current_domain.repository_for(Order).add(order)
            logger.info("order_payment_confirmed", order_id=str(order.id))
        return order.status

    @handle(RefundOrder)
    def refund(self, command):
        admin = require_system_admin(command.actor_id)
        order = load_order(command.order_id)
        previous = order.status
        if not order.refund(amount=command.amount, reason=command.reason):
            return order.status

        if Order.restocks_on_refund(previous):
            restore_inventory(order)
        current_domain.repository_for(Order).add(order)
        logger.info(
            "order_refunded",
            order_id=str(order.id),
            refund_amount=order.refund_amount,
            refunded_by=str(admin.id),
        )
        return order.status
