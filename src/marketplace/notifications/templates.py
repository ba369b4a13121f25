"""Customer-facing order emails."""

from marketplace.shared.money import format_money

STATUS_MESSAGES = {
    "pending": "We've received your order and it's being prepared.",
    "confirmed": "Your order has been confirmed and is being processed.",
    "processing": "Your order is currently being prepared for shipment.",
    "shipped": "Great news! Your order has been shipped and is on its way to you.",
    "delivered": "Your order has been delivered. We hope you love it!",
    "cancelled": "Your order has been cancelled. If you have any questions, please contact us.",
    "refunded": "Your order has been refunded. Please allow 3-5 business days for the refund to appear.",
}


def status_message(status: str) -> str:
    return STATUS_MESSAGES.get(status, "Your order status has been updated.")


def _item_lines(order) -> str:
    return "\n".join(
        f"  {item.quantity} x {item.product_name} @ {format_money(item.unit_price)} = {format_money(item.total_price)}"
        for item in order.items
    )


class OrderConfirmationTemplate:
    @staticmethod
    def render(order, customer_name: str) -> dict:
        address = order.shipping_address.formatted() if order.shipping_address else ""
        return {
            "subject": f"Order Confirmation - {order.order_number}",
            "body": (
                f"Hi {customer_name},\n\n"
                f"Thanks for your order {order.order_number}.\n\n"
                f"{_item_lines(order)}\n\n"
                f"Subtotal: {order.subtotal}\n"
                f"Shipping: {order.shipping_cost}\n"
                f"Tax: {order.tax_amount}\n"
                f"Total: {order.total_amount}\n\n"
                f"Shipping to:\n{address}\n"
            ),
        }


class OrderStatusUpdateTemplate:
    @staticmethod
    def render(order, customer_name: str, previous_status: str | None) -> dict:
        change = f"{previous_status} → {order.status}" if previous_status else order.status
        return {
            "subject": f"Order Update - {order.order_number}",
            "body": (
                f"Hi {customer_name},\n\n"
                f"{status_message(order.status)}\n\n"
                f"Order {order.order_number}: {change}\n"
            ),
        }


class ShippingConfirmationTemplate:
    @staticmethod
    def render(order, customer_name: str, tracking_number: str | None) -> dict:
        tracking = f"Tracking number: {tracking_number}\n" if tracking_number else ""
        return {
            "subject": f"Your order has shipped - {order.order_number}",
            "body": (
                f"Hi {customer_name},\n\n"
                f"{status_message('shipped')}\n\n"
                f"{tracking}"
                f"{_item_lines(order)}\n"
            ),
        }
