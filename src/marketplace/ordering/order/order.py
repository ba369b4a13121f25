"""Order aggregate — one store's share of a checkout.

State Machine::

    pending → confirmed → processing → shipped → delivered
    pending / confirmed → cancelled            (the customer)
    pending / confirmed / processing → cancelled  (the store owner)
    any paid state → refunded

Amounts are decimal strings fixed at checkout. Items carry a snapshot of the
product as it was sold, so later catalogue edits or deletions never change
what an order shows.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text, ValueObject

from marketplace.domain import marketplace
from marketplace.errors import InvalidTransition
from marketplace.ordering.order.events import (
    OrderCancelled,
    OrderPlaced,
    OrderRefunded,
    OrderShipped,
    OrderStatusChanged,
    PaymentConfirmed,
)
from marketplace.shared.money import ZERO, format_money, to_money, total


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class PaymentStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class CancellationActor(Enum):
    CUSTOMER = "customer"
    STORE = "store"


# Fulfillment chain, one step at a time
_NEXT_STATUS = {
    OrderStatus.PENDING: OrderStatus.CONFIRMED,
    OrderStatus.CONFIRMED: OrderStatus.PROCESSING,
    OrderStatus.PROCESSING: OrderStatus.SHIPPED,
    OrderStatus.SHIPPED: OrderStatus.DELIVERED,
}

_CUSTOMER_CANCELLABLE = {OrderStatus.PENDING, OrderStatus.CONFIRMED}
_STORE_CANCELLABLE = _CUSTOMER_CANCELLABLE | {OrderStatus.PROCESSING}

# Statuses in which a captured payment can still be recorded
_PAYABLE = set(_NEXT_STATUS) | {OrderStatus.DELIVERED}

# Goods were reserved but never left the store
_RESTOCK_ON_REFUND = {OrderStatus.CONFIRMED, OrderStatus.PROCESSING}

ADDRESS_REQUIRED_FIELDS = ("street", "city", "state", "postal_code", "country")


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@marketplace.value_object(part_of="Order")
class PostalAddress:
    """A shipping or billing address exactly as entered at checkout."""

    first_name = String(max_length=50)
    last_name = String(max_length=50)
    email = String(max_length=254)
    phone = String(max_length=30)
    street = String(required=True, max_length=255)
    street2 = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)

    def formatted(self) -> str:
        lines = [self.street, self.street2, f"{self.city}, {self.state} {self.postal_code}", self.country]
        return "\n".join(line for line in lines if line)


@marketplace.value_object(part_of="Order")
class ProductSnapshot:
    """What the product looked like when it was sold."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=255)
    sku = String(max_length=64)
    image = String(max_length=500)
    unit_price = String(required=True, max_length=20)
    store_name = String(max_length=100)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@marketplace.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    unit_price = String(required=True, max_length=20)
    total_price = String(required=True, max_length=20)
    product_snapshot = ValueObject(ProductSnapshot, required=True)

    @property
    def product_name(self) -> str:
        return self.product_snapshot.name

    @property
    def product_sku(self) -> str | None:
        return self.product_snapshot.sku

    @property
    def product_image(self) -> str | None:
        return self.product_snapshot.image


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@marketplace.aggregate
class Order:
    order_number = String(required=True, max_length=30, unique=True)
    user_id = Identifier(required=True)
    store_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    items = HasMany(OrderItem)
    subtotal = String(required=True, max_length=20)
    shipping_cost = String(required=True, max_length=20)
    tax_amount = String(required=True, max_length=20)
    total_amount = String(required=True, max_length=20)
    shipping_address = ValueObject(PostalAddress, required=True)
    billing_address = ValueObject(PostalAddress)
    payment_method = String(max_length=50)
    payment_reference = String(max_length=255)
    tracking_number = String(max_length=255)
    notes = Text()
    fulfilled_at = DateTime()
    cancelled_at = DateTime()
    refunded_at = DateTime()
    refund_amount = String(max_length=20)
    refund_reason = String(max_length=500)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def order_must_have_items(self):
        if not self.items:
            raise ValidationError({"items": ["An order must contain at least one item"]})

    @invariant.post
    def totals_must_add_up(self):
        if to_money(self.subtotal) != total(item.total_price for item in self.items):
            raise ValidationError({"subtotal": ["Subtotal must equal the sum of item totals"]})
        expected = total([self.subtotal, self.shipping_cost, self.tax_amount])
        if to_money(self.total_amount) != expected:
            raise ValidationError({"total_amount": ["Total must equal subtotal + shipping + tax"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        order_number,
        user_id,
        store_id,
        items,
        shipping_cost,
        tax_amount,
        shipping_address,
        billing_address=None,
        payment_method=None,
        notes=None,
    ):
        """Create a pending order from already priced items."""
        now = datetime.now(UTC)
        subtotal = total(item.total_price for item in items)
        grand_total = subtotal + to_money(shipping_cost) + to_money(tax_amount)

        order = cls(
            order_number=order_number,
            user_id=user_id,
            store_id=store_id,
            items=list(items),
            subtotal=format_money(subtotal),
            shipping_cost=format_money(shipping_cost),
            tax_amount=format_money(tax_amount),
            total_amount=format_money(grand_total),
            shipping_address=shipping_address,
            billing_address=billing_address or shipping_address,
            payment_method=payment_method,
            notes=notes,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                order_number=order_number,
                user_id=str(user_id),
                store_id=str(store_id),
                subtotal=order.subtotal,
                shipping_cost=order.shipping_cost,
                tax_amount=order.tax_amount,
                total_amount=order.total_amount,
                item_count=order.item_count,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def can_cancel(self) -> bool:
        return OrderStatus(self.status) in _CUSTOMER_CANCELLABLE

    @property
    def can_fulfill(self) -> bool:
        return self.status == OrderStatus.CONFIRMED.value and self.payment_status == PaymentStatus.PAID.value

    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID.value

    def belongs_to(self, user_id) -> bool:
        return user_id is not None and str(self.user_id) == str(user_id)

    # -------------------------------------------------------------------
    # Transitions
    #
    # Each returns True when the order changed and False when the request
    # was a repeat of the current state.
    # -------------------------------------------------------------------
    def _change_status(self, target: OrderStatus, now):
        previous = self.status
        self.status = target.value
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                order_number=self.order_number,
                previous_status=previous,
                new_status=target.value,
                changed_at=now,
            )
        )
        return previous

    def confirm_payment(self, payment_reference=None) -> bool:
        """Payment captured: payment paid, and a pending order becomes confirmed.

        A store owner may already have moved an unpaid order along the
        fulfillment chain; such an order is marked paid where it stands.
        """
        current = OrderStatus(self.status)
        if self.is_paid:
            return False
        if current not in _PAYABLE:
            raise InvalidTransition(current.value, OrderStatus.CONFIRMED.value)

        now = datetime.now(UTC)
        self.payment_status = PaymentStatus.PAID.value
        if payment_reference:
            self.payment_reference = payment_reference
        if current == OrderStatus.PENDING:
            self._change_status(OrderStatus.CONFIRMED, now)
        else:
            self.updated_at = now
        self.raise_(PaymentConfirmed(order_id=str(self.id), payment_reference=payment_reference, confirmed_at=now))
        return True

    def cancel(self, actor: CancellationActor = CancellationActor.CUSTOMER) -> bool:
        current = OrderStatus(self.status)
        if current == OrderStatus.CANCELLED:
            return False

        allowed = _CUSTOMER_CANCELLABLE if actor == CancellationActor.CUSTOMER else _STORE_CANCELLABLE
        if current not in allowed:
            raise InvalidTransition(
                current.value,
                OrderStatus.CANCELLED.value,
                message=f"Order cannot be cancelled once it is {current.value}",
            )

        now = datetime.now(UTC)
        self.cancelled_at = now
        self._change_status(OrderStatus.CANCELLED, now)
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                previous_status=current.value,
                cancelled_by=actor.value,
                cancelled_at=now,
            )
        )
        return True

    def advance_to(self, target, tracking_number=None) -> bool:
        """Move one step along the fulfillment chain (store owner action)."""
        target = OrderStatus(target)
        current = OrderStatus(self.status)
        if target == current:
            return False
        if target == OrderStatus.CANCELLED:
            return self.cancel(CancellationActor.STORE)
        if _NEXT_STATUS.get(current) != target:
            raise InvalidTransition(current.value, target.value)

        now = datetime.now(UTC)
        if target == OrderStatus.SHIPPED:
            self.fulfilled_at = now
            if tracking_number:
                self.tracking_number = tracking_number
        self._change_status(target, now)

        if target == OrderStatus.SHIPPED:
            self.raise_(
                OrderShipped(
                    order_id=str(self.id),
                    order_number=self.order_number,
                    tracking_number=self.tracking_number,
                    fulfilled_at=now,
                )
            )
        return True

    def refund(self, amount=None, reason=None) -> bool:
        current = OrderStatus(self.status)
        if current == OrderStatus.REFUNDED:
            return False
        if not self.is_paid:
            raise InvalidTransition(
                current.value,
                OrderStatus.REFUNDED.value,
                message="Only paid orders can be refunded",
            )

        refund_amount = to_money(amount) if amount is not None else to_money(self.total_amount)
        if refund_amount <= ZERO or refund_amount > to_money(self.total_amount):
            raise ValidationError({"refund_amount": ["Refund must be positive and no more than the order total"]})

        now = datetime.now(UTC)
        self.refunded_at = now
        self.refund_amount = format_money(refund_amount)
        self.refund_reason = reason
        self.payment_status = PaymentStatus.REFUNDED.value
        self._change_status(OrderStatus.REFUNDED, now)
        self.raise_(
            OrderRefunded(
                order_id=str(self.id),
                previous_status=current.value,
                refund_amount=self.refund_amount,
                refund_reason=reason,
                refunded_at=now,
            )
        )
        return True

    @staticmethod
    def restocks_on_refund(previous_status) -> bool:
        return OrderStatus(previous_status) in _RESTOCK_ON_REFUND
