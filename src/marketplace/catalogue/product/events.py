"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Product")
class ProductListed:
    """A seller added a product to their store (as a draft)."""

    __version__ = 1

    product_id: Identifier(required=True)
    store_id: Identifier(required=True)
    name: String(required=True)
    slug: String(required=True)
    sku: String()
    base_price: String(required=True)
    listed_at: DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductSubmittedForReview:
    __version__ = 1

    product_id: Identifier(required=True)
    submitted_at: DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductApproved:
    __version__ = 1

    product_id: Identifier(required=True)
    approved_at: DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductRejected:
    __version__ = 1

    product_id: Identifier(required=True)
    reason: String()
    rejected_at: DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductDeactivated:
    __version__ = 1

    product_id: Identifier(required=True)
    deactivated_at: DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductReactivated:
    __version__ = 1

    product_id: Identifier(required=True)
    reactivated_at: DateTime(required=True)


@marketplace.event(part_of="Product")
class ProductRepriced:
    __version__ = 1

    product_id: Identifier(required=True)
    previous_price: String(required=True)
    new_price: String(required=True)
    compare_at_price: String()


@marketplace.event(part_of="Product")
class ProductRestocked:
    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    inventory: Integer(required=True)


@marketplace.event(part_of="Product")
class ProductInventoryReserved:
    """Stock was taken by a checkout."""

    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    inventory: Integer(required=True)


@marketplace.event(part_of="Product")
class ProductInventoryReleased:
    """Stock came back from a cancelled or refunded order."""

    __version__ = 1

    product_id: Identifier(required=True)
    quantity: Integer(required=True)
    inventory: Integer(required=True)


@marketplace.event(part_of="Product")
class ProductImageAdded:
    __version__ = 1

    product_id: Identifier(required=True)
    image_id: Identifier(required=True)
    url: String(required=True)
    position: Integer(required=True)
