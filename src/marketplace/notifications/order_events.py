"""Order emails, sent after the order change has been committed.

Delivery is best effort: any failure is logged and dropped so that it can
never undo or fail the checkout or status change that triggered it.
"""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from marketplace.domain import marketplace
from marketplace.notifications.notifier import OrderNotifier
from marketplace.ordering.order.events import OrderPlaced, OrderShipped, OrderStatusChanged
from marketplace.ordering.order.order import Order, OrderStatus

logger = structlog.get_logger(__name__)


@marketplace.event_handler(part_of=Order, stream_category="marketplace::order")
class OrderNotificationsHandler:
    def _deliver(self, event, send):
        try:
            order = current_domain.repository_for(Order).get(event.order_id)
            send(OrderNotifier(), order)
        except Exception as exc:
            logger.warning(
                "order_notification_failed",
                event_type=event.__class__.__name__,
                order_id=str(event.order_id),
                error=str(exc),
            )

    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        self._deliver(event, lambda notifier, order: notifier.notify_order_created(order))

    @handle(OrderStatusChanged)
    def on_status_changed(self, event: OrderStatusChanged) -> None:
        # Shipping has its own email
        if event.new_status == OrderStatus.SHIPPED.value:
            return
        self._deliver(
            event,
            lambda notifier, order: notifier.notify_order_status_changed(order, event.previous_status),
        )

    @handle(OrderShipped)
    def on_order_shipped(self, event: OrderShipped) -> None:
        self._deliver(event, lambda notifier, order: notifier.notify_shipped(order, event.tracking_number))
