"""Order notifier — composes order emails and hands them to the email channel."""

import structlog
from protean.utils.globals import current_domain

from marketplace.config import get_settings
from marketplace.identity.user import User
from marketplace.notifications.channel import get_email_channel
from marketplace.notifications.templates import (
    OrderConfirmationTemplate,
    OrderStatusUpdateTemplate,
    ShippingConfirmationTemplate,
)

logger = structlog.get_logger(__name__)


class OrderNotifier:
    def __init__(self, channel=None, sender: str | None = None):
        self.channel = channel or get_email_channel()
        self.sender = sender or get_settings().notifications.sender

    def _recipient(self, order) -> User:
        return current_domain.repository_for(User).get(order.user_id)

    def _send(self, order, user: User, message: dict, kind: str) -> dict:
        result = self.channel.send(user.email, message["subject"], message["body"], sender=self.sender)
        logger.info(
            "order_email_sent",
            kind=kind,
            order_id=str(order.id),
            order_number=order.order_number,
            message_id=result.get("message_id"),
        )
        return result

    def notify_order_created(self, order) -> dict:
        user = self._recipient(order)
        return self._send(order, user, OrderConfirmationTemplate.render(order, user.full_name), "order_confirmation")

    def notify_order_status_changed(self, order, previous_status: str | None) -> dict:
        user = self._recipient(order)
        message = OrderStatusUpdateTemplate.render(order, user.full_name, previous_status)
        return self._send(order, user, message, "order_status_update")

    def notify_shipped(self, order, tracking_number: str | None) -> dict:
        user = self._recipient(order)
        message = ShippingConfirmationTemplate.render(order, user.full_name, tracking_number)
        return self._send(order, user, message, "shipping_confirmation")
