"""Domain events for the Store aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from marketplace.domain import marketplace


@marketplace.event(part_of="Store")
class StoreOpened:
    __version__ = 1

    store_id = Identifier(required=True)
    owner_id = Identifier(required=True)
    name = String(required=True)
    slug = String(required=True)
    opened_at = DateTime(required=True)


@marketplace.event(part_of="Store")
class StoreVerified:
    __version__ = 1

    store_id = Identifier(required=True)
    verified_at = DateTime(required=True)


@marketplace.event(part_of="Store")
class StoreStatusChanged:
    __version__ = 1

    store_id = Identifier(required=True)
    is_active = String(required=True)  # "True" / "False"
    changed_at = DateTime(required=True)


@marketplace.event(part_of="Store")
class StoreSaleRecorded:
    """A checkout produced an order for this store."""

    __version__ = 1

    store_id = Identifier(required=True)
    order_id = Identifier(required=True)
    amount = String(required=True)  # decimal string
    total_sales = String(required=True)
    total_orders = Integer(required=True)
