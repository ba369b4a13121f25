"""Product aggregate root with its ordered images.

Lifecycle::

    draft ──submit──▶ pending ──approve──▶ active ◀──reactivate── inactive
      ▲                  │                    │                       ▲
      └──────────────────┴──reject──▶ rejected └──────deactivate──────┘

A rejected product can be resubmitted. Only ``active`` products of an
orderable store can be bought; ``reserve``/``release`` move tracked stock.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, Identifier, Integer, String, Text

from marketplace.catalogue.product.events import (
    ProductApproved,
    ProductDeactivated,
    ProductImageAdded,
    ProductInventoryReleased,
    ProductInventoryReserved,
    ProductListed,
    ProductReactivated,
    ProductRejected,
    ProductRepriced,
    ProductRestocked,
    ProductSubmittedForReview,
)
from marketplace.domain import marketplace
from marketplace.errors import ProductUnavailable
from marketplace.shared.money import format_money, to_money


class ProductStatus(Enum):
    DRAFT = "draft"
    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"
    REJECTED = "rejected"


@marketplace.entity(part_of="Product")
class ProductImage:
    url: String(required=True, max_length=500)
    alt_text: String(max_length=255)
    position: Integer(default=0, min_value=0)


@marketplace.aggregate
class Product:
    store_id: Identifier(required=True)
    category_id: Identifier()
    name: String(required=True, max_length=255)
    slug: String(required=True, max_length=255)
    description: Text()
    base_price: String(required=True, max_length=20)
    compare_at_price: String(max_length=20)
    sku: String(max_length=64)
    inventory: Integer(default=0, min_value=0)
    track_inventory: Boolean(default=True)
    status: String(choices=ProductStatus, default=ProductStatus.DRAFT.value)
    rejection_reason: String(max_length=500)
    images: HasMany(ProductImage)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def prices_must_be_valid(self):
        try:
            base = to_money(self.base_price)
            compare_at = to_money(self.compare_at_price) if self.compare_at_price else None
        except ValueError:
            raise ValidationError({"base_price": ["Prices must be decimal amounts"]}) from None

        if base <= 0:
            raise ValidationError({"base_price": ["Base price must be greater than zero"]})
        if compare_at is not None and compare_at <= base:
            raise ValidationError({"compare_at_price": ["Compare-at price must be greater than the base price"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        store_id,
        name,
        slug,
        base_price,
        compare_at_price=None,
        sku=None,
        inventory=0,
        track_inventory=True,
        description=None,
        category_id=None,
    ):
        now = datetime.now(UTC)
        product = cls(
            store_id=store_id,
            category_id=category_id,
            name=name,
            slug=slug,
            description=description,
            base_price=format_money(base_price),
            compare_at_price=format_money(compare_at_price) if compare_at_price else None,
            sku=sku,
            inventory=inventory or 0,
            track_inventory=track_inventory,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductListed(
                product_id=product.id,
                store_id=str(store_id),
                name=name,
                slug=slug,
                sku=sku,
                base_price=product.base_price,
                listed_at=now,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_active(self) -> bool:
        return self.status == ProductStatus.ACTIVE.value

    def in_stock(self, quantity: int = 1) -> bool:
        return not self.track_inventory or (self.inventory or 0) >= quantity

    def is_purchasable(self, quantity: int = 1) -> bool:
        return self.is_active and self.in_stock(quantity)

    @property
    def display_image(self) -> str | None:
        """URL of the first image by position, if any."""
        if not self.images:
            return None
        return sorted(self.images, key=lambda image: image.position or 0)[0].url

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def _move_to(self, target: ProductStatus, allowed: set[ProductStatus]):
        current = ProductStatus(self.status)
        if current not in allowed:
            raise ValidationError({"status": [f"Cannot move product from {current.value} to {target.value}"]})
        self.status = target.value
        now = datetime.now(UTC)
        self.updated_at = now
        return now

    def submit_for_review(self):
        now = self._move_to(ProductStatus.PENDING, {ProductStatus.DRAFT, ProductStatus.REJECTED})
        self.rejection_reason = None
        self.raise_(ProductSubmittedForReview(product_id=self.id, submitted_at=now))

    def approve(self):
        now = self._move_to(ProductStatus.ACTIVE, {ProductStatus.PENDING})
        self.raise_(ProductApproved(product_id=self.id, approved_at=now))

    def reject(self, reason=None):
        now = self._move_to(ProductStatus.REJECTED, {ProductStatus.PENDING})
        self.rejection_reason = reason
        self.raise_(ProductRejected(product_id=self.id, reason=reason, rejected_at=now))

    def deactivate(self):
        now = self._move_to(ProductStatus.INACTIVE, {ProductStatus.ACTIVE})
        self.raise_(ProductDeactivated(product_id=self.id, deactivated_at=now))

    def reactivate(self):
        now = self._move_to(ProductStatus.ACTIVE, {ProductStatus.INACTIVE})
        self.raise_(ProductReactivated(product_id=self.id, reactivated_at=now))

    # -------------------------------------------------------------------
    # Pricing and stock
    # -------------------------------------------------------------------
    def reprice(self, base_price, compare_at_price=None):
        previous = self.base_price
        with atomic_change(self):
            self.base_price = format_money(base_price)
            self.compare_at_price = format_money(compare_at_price) if compare_at_price else None
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductRepriced(
                product_id=self.id,
                previous_price=previous,
                new_price=self.base_price,
                compare_at_price=self.compare_at_price,
            )
        )

    def restock(self, quantity: int):
        if quantity is None or quantity <= 0:
            raise ValidationError({"quantity": ["Restock quantity must be positive"]})

        self.inventory = (self.inventory or 0) + quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(ProductRestocked(product_id=self.id, quantity=quantity, inventory=self.inventory))

    def reserve(self, quantity: int):
        """Take ``quantity`` units for a checkout.

        Raises ``ProductUnavailable`` when the product is not on sale or does
        not have enough tracked stock. Untracked products are never decremented.
        """
        if not self.is_active:
            raise ProductUnavailable(self.id, "product is not active")
        if not self.in_stock(quantity):
            raise ProductUnavailable(
                self.id,
                "insufficient inventory",
                requested=quantity,
                available=self.inventory or 0,
            )
        if not self.track_inventory:
            return

        self.inventory = self.inventory - quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(ProductInventoryReserved(product_id=self.id, quantity=quantity, inventory=self.inventory))

    def release(self, quantity: int):
        """Return previously reserved units to stock."""
        if not self.track_inventory:
            return

        self.inventory = (self.inventory or 0) + quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(ProductInventoryReleased(product_id=self.id, quantity=quantity, inventory=self.inventory))

    # -------------------------------------------------------------------
    # Images
    # -------------------------------------------------------------------
    def add_image(self, url, alt_text=None, position=None):
        if position is None:
            position = max((image.position or 0 for image in self.images), default=-1) + 1

        image = ProductImage(url=url, alt_text=alt_text, position=position)
        self.add_images(image)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductImageAdded(
                product_id=self.id,
                image_id=image.id,
                url=url,
                position=position,
            )
        )
        return image
