"""Cart aggregate — one per user, holding product references and quantities.

Prices are never stored on the cart; they are read from the catalogue at
checkout. A cart lives for a fixed window (``cart_ttl_days``) from its last
renewal and an expired cart cannot be checked out.
"""

from datetime import UTC, datetime, timedelta

from protean.fields import DateTime, HasMany, Identifier, Integer

from marketplace.config import get_settings
from marketplace.domain import marketplace
from marketplace.errors import InvalidQuantity
from marketplace.ordering.cart.events import (
    CartCleared,
    CartItemAdded,
    CartItemQuantityChanged,
    CartItemRemoved,
)


def _expiry_from(now):
    return now + timedelta(days=get_settings().checkout.cart_ttl_days)


def _as_aware(value):
    # Some providers hand back naive datetimes
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


@marketplace.entity(part_of="Cart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@marketplace.aggregate
class Cart:
    user_id = Identifier(required=True)
    items = HasMany(CartItem)
    expires_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, user_id):
        now = datetime.now(UTC)
        return cls(user_id=user_id, expires_at=_expiry_from(now), created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_expired(self) -> bool:
        return self.expires_at is not None and _as_aware(self.expires_at) <= datetime.now(UTC)

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def item_for(self, product_id) -> CartItem | None:
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def lines(self) -> list[tuple[str, int]]:
        """``(product_id, quantity)`` pairs in the order items were added."""
        ordered = sorted(self.items, key=lambda i: _as_aware(i.added_at) or datetime.min.replace(tzinfo=UTC))
        return [(str(item.product_id), item.quantity) for item in ordered]

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_product(self, product_id, quantity: int = 1):
        """Add ``quantity`` of a product, merging with an existing line."""
        if not isinstance(quantity, int) or quantity <= 0:
            raise InvalidQuantity(product_id, quantity)

        now = datetime.now(UTC)
        existing = self.item_for(product_id)
        if existing:
            existing.quantity += quantity
            line_quantity = existing.quantity
        else:
            self.add_items(CartItem(product_id=product_id, quantity=quantity, added_at=now))
            line_quantity = quantity

        self.updated_at = now
        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                product_id=str(product_id),
                quantity=quantity,
                line_quantity=line_quantity,
            )
        )

    def update_quantity(self, product_id, quantity: int):
        """Set a line's quantity. Zero or less removes the line."""
        item = self.item_for(product_id)
        if item is None:
            return
        if quantity <= 0:
            self.remove_product(product_id)
            return

        previous = item.quantity
        if previous == quantity:
            return
        item.quantity = quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            CartItemQuantityChanged(
                cart_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous,
                new_quantity=quantity,
            )
        )

    def remove_product(self, product_id):
        item = self.item_for(product_id)
        if item is None:
            return

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        self.raise_(CartItemRemoved(cart_id=str(self.id), product_id=str(product_id)))

    def clear(self):
        if not self.items:
            return

        for item in list(self.items):
            self.remove_items(item)
        now = datetime.now(UTC)
        self.updated_at = now
        self.raise_(CartCleared(cart_id=str(self.id), cleared_at=now))

    def extend_expiration(self):
        self.expires_at = _expiry_from(datetime.now(UTC))

    def renew_if_expired(self):
        """Start an expired cart over: empty it and open a fresh window."""
        if self.is_expired:
            self.clear()
            self.extend_expiration()
