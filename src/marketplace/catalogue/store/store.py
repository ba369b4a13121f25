"""Store aggregate — a seller's storefront.

A store takes orders only while it is both verified by an administrator and
active. ``total_sales`` / ``total_orders`` are reporting aggregates that the
checkout updates in the same Unit of Work as the order it creates.
"""

from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from marketplace.catalogue.store.events import (
    StoreOpened,
    StoreSaleRecorded,
    StoreStatusChanged,
    StoreVerified,
)
from marketplace.domain import marketplace
from marketplace.shared.money import format_money, to_money


@marketplace.aggregate
class Store:
    owner_id = Identifier(required=True)
    name = String(required=True, min_length=2, max_length=100)
    slug = String(required=True, max_length=120, unique=True)
    description = Text()
    commission_rate = Float(default=0.10, min_value=0.0, max_value=1.0)
    is_verified = Boolean(default=False)
    is_active = Boolean(default=True)
    total_sales = String(max_length=20, default="0.00")
    total_orders = Integer(default=0, min_value=0)
    created_at = DateTime()
    verified_at = DateTime()

    @classmethod
    def open(cls, owner_id, name, slug, description=None, commission_rate=0.10):
        now = datetime.now(UTC)
        store = cls(
            owner_id=owner_id,
            name=name,
            slug=slug,
            description=description,
            commission_rate=commission_rate,
            created_at=now,
        )
        store.raise_(
            StoreOpened(
                store_id=str(store.id),
                owner_id=str(owner_id),
                name=name,
                slug=slug,
                opened_at=now,
            )
        )
        return store

    @property
    def is_orderable(self) -> bool:
        return bool(self.is_verified and self.is_active)

    def is_owned_by(self, user_id) -> bool:
        return user_id is not None and str(self.owner_id) == str(user_id)

    def verify(self):
        if self.is_verified:
            return

        now = datetime.now(UTC)
        self.is_verified = True
        self.verified_at = now
        self.raise_(StoreVerified(store_id=str(self.id), verified_at=now))

    def set_active(self, active: bool):
        if bool(self.is_active) == bool(active):
            return

        self.is_active = bool(active)
        self.raise_(
            StoreStatusChanged(
                store_id=str(self.id),
                is_active=str(bool(active)),
                changed_at=datetime.now(UTC),
            )
        )

    def record_sale(self, order_id, amount):
        """Fold a newly placed order into the store's running totals."""
        value = to_money(amount)
        if value < 0:
            raise ValidationError({"amount": ["Sale amount cannot be negative"]})

        self.total_sales = format_money(to_money(self.total_sales) + value)
        self.total_orders = (self.total_orders or 0) + 1
        self.raise_(
            StoreSaleRecorded(
                store_id=str(self.id),
                order_id=str(order_id),
                amount=format_money(value),
                total_sales=self.total_sales,
                total_orders=self.total_orders,
            )
        )
