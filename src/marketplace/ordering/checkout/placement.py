"""Checkout — turning a cart into one order per store.

``PlaceOrder`` covers both checkouts:

* **Guest** (no ``requester_id``): the payload must carry an email and the
  cart lines inline. The email is matched to an existing user or a guest
  user is provisioned for it.
* **Registered**: lines come from the payload, else from the named cart,
  else from the requester's current cart.

Everything the handler touches (guest user, product stock, orders, store
totals, the cart) is written in the single unit of work around the handler,
so a checkout either creates all of its orders or none of them.
"""

import json

from protean import handle
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from marketplace.catalogue.product.product import Product
from marketplace.catalogue.store.store import Store
from marketplace.domain import marketplace
from marketplace.errors import (
    CartItemsRequired,
    EmailRequired,
    EmptyCart,
    InvalidAddress,
    PermissionDenied,
    ProductUnavailable,
    UserNotFound,
    ValidationError,
)
from marketplace.identity.user import User
from marketplace.ordering.cart.cart import Cart
from marketplace.ordering.checkout.guest import resolve_guest_user
from marketplace.ordering.checkout.numbering import allocate_order_number
from marketplace.ordering.checkout.partitioner import partition_cart
from marketplace.ordering.checkout.pricing import PricingPolicy
from marketplace.ordering.checkout.snapshot import build_order_item
from marketplace.ordering.order.order import ADDRESS_REQUIRED_FIELDS, Order, PostalAddress
from marketplace.ordering.order.queries import OrderRepository
from marketplace.shared.money import total
from marketplace.utils.logging import get_logger

logger = get_logger(__name__)

# Checkout forms send camelCase keys
_ADDRESS_ALIASES = {
    "firstName": "first_name",
    "lastName": "last_name",
    "address1": "street",
    "address2": "street2",
    "zipCode": "postal_code",
    "zip": "postal_code",
}
_ADDRESS_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "phone",
    "street",
    "street2",
    "city",
    "state",
    "postal_code",
    "country",
)


@marketplace.command(part_of="Order")
class PlaceOrder:
    requester_id = Identifier()
    email = String(max_length=254)
    first_name = String(max_length=50)
    last_name = String(max_length=50)
    cart_id = Identifier()
    cart_items = Text()  # JSON: [{"product_id": ..., "quantity": ...}]
    shipping_address = Text()  # JSON object
    billing_address = Text()  # JSON object, defaults to shipping
    payment_method = String(max_length=50)
    notes = Text()


# ---------------------------------------------------------------------------
# Payload parsing
# ---------------------------------------------------------------------------
def _decode(raw):
    if raw is None or raw == "":
        return None
    if isinstance(raw, str):
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            return raw
    return raw


def parse_address(raw, kind: str) -> PostalAddress:
    """Build a ``PostalAddress`` or raise ``InvalidAddress`` naming ``kind``."""
    data = _decode(raw)
    if not isinstance(data, dict):
        raise InvalidAddress(kind, list(ADDRESS_REQUIRED_FIELDS))

    values = {}
    for key, value in data.items():
        name = _ADDRESS_ALIASES.get(key, key)
        if name in _ADDRESS_FIELDS and value is not None:
            values[name] = str(value).strip()

    missing = [name for name in ADDRESS_REQUIRED_FIELDS if not values.get(name)]
    if missing:
        raise InvalidAddress(kind, missing)

    return PostalAddress(**{name: value for name, value in values.items() if value})


def parse_cart_items(raw) -> list[tuple[str, object]] | None:
    data = _decode(raw)
    if data is None:
        return None
    if not isinstance(data, list):
        raise ValidationError("Cart items must be a list", field="cart_items")

    lines = []
    for entry in data:
        if not isinstance(entry, dict) or not entry.get("product_id"):
            raise ValidationError("Each cart item needs a product_id", field="cart_items")
        lines.append((str(entry["product_id"]), entry.get("quantity", 1)))
    return lines


# ---------------------------------------------------------------------------
# Handler
# ---------------------------------------------------------------------------
@marketplace.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        cart = None
        inline_lines = parse_cart_items(command.cart_items)

        if command.requester_id:
            user = self._active_user(command.requester_id)
            if inline_lines:
                lines = inline_lines
            else:
                cart = self._checkout_cart(user, command.cart_id)
                lines = cart.lines()
        else:
            if not (command.email or "").strip():
                raise EmailRequired()
            if not inline_lines:
                raise CartItemsRequired()
            lines = inline_lines
            user = None

        shipping_address = parse_address(command.shipping_address, "shipping")
        billing_raw = command.billing_address if _decode(command.billing_address) else command.shipping_address
        billing_address = parse_address(billing_raw, "billing")

        if user is None:
            user = resolve_guest_user(
                command.email,
                first_name=command.first_name or shipping_address.first_name,
                last_name=command.last_name or shipping_address.last_name,
            )

        groups = partition_cart(lines)
        orders = self._create_orders(user, groups, shipping_address, billing_address, command)

        if cart is not None:
            cart.clear()
            current_domain.repository_for(Cart).add(cart)

        logger.info(
            "orders_placed",
            user_id=str(user.id),
            guest=not command.requester_id,
            order_count=len(orders),
            order_numbers=[order.order_number for order in orders],
        )
        return [str(order.id) for order in orders]

    def _active_user(self, user_id) -> User:
        try:
            user = current_domain.repository_for(User).get(user_id)
        except ObjectNotFoundError:
            raise UserNotFound() from None
        if not user.is_active:
            raise UserNotFound()
        return user

    def _checkout_cart(self, user, cart_id) -> Cart:
        repo = current_domain.repository_for(Cart)
        if cart_id:
            try:
                cart = repo.get(cart_id)
            except ObjectNotFoundError:
                raise EmptyCart("Cart not found") from None
            if str(cart.user_id) != str(user.id):
                raise PermissionDenied("Cart belongs to another user")
        else:
            cart = repo.for_user(user.id)

        if cart is None or cart.is_empty:
            raise EmptyCart()
        if cart.is_expired:
            raise EmptyCart("Cart has expired")
        return cart

    def _create_orders(self, user, groups, shipping_address, billing_address, command) -> list[Order]:
        policy = PricingPolicy.from_settings()
        order_repo: OrderRepository = current_domain.repository_for(Order)
        product_repo = current_domain.repository_for(Product)
        store_repo = current_domain.repository_for(Store)
        issued: set[str] = set()
        orders = []

        for store_id, lines in groups.items():
            store = store_repo.get(store_id)
            items = [build_order_item(line.product, line.quantity, store_name=store.name) for line in lines]

            for line in lines:
                line.product.reserve(line.quantity)
                product_repo.add(line.product)

            quote = policy.quote(total(item.total_price for item in items))
            order_number = allocate_order_number(lambda n: n in issued or order_repo.order_number_taken(n))
            issued.add(order_number)

            order = Order.place(
                order_number=order_number,
                user_id=user.id,
                store_id=store.id,
                items=items,
                shipping_cost=quote.shipping_cost,
                tax_amount=quote.tax_amount,
                shipping_address=shipping_address,
                billing_address=billing_address,
                payment_method=command.payment_method,
                notes=command.notes,
            )
            order_repo.add(order)

            store.record_sale(order.id, order.total_amount)
            store_repo.add(store)
            orders.append(order)

        return orders


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def place_order(requester_id=None, **payload) -> list[Order]:
    """Run a checkout and return the created orders in store order.

    Addresses and cart items may be given as dicts/lists; they are encoded
    for the command here.
    """
    for key in ("cart_items", "shipping_address", "billing_address"):
        if payload.get(key) is not None and not isinstance(payload[key], str):
            payload[key] = json.dumps(payload[key])

    try:
        order_ids = current_domain.process(
            PlaceOrder(requester_id=requester_id, **payload),
            asynchronous=False,
        )
    except ExpectedVersionError as exc:
        # Another checkout changed a product's stock first
        logger.warning("checkout_version_conflict", error=str(exc))
        raise ProductUnavailable("unknown", "inventory changed during checkout") from None

    repo = current_domain.repository_for(Order)
    return [repo.get(order_id) for order_id in order_ids]
