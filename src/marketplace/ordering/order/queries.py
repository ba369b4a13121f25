"""Read-side lookups over orders and carts, and the Order repository."""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from marketplace.catalogue.store.store import Store
from marketplace.domain import marketplace
from marketplace.errors import OrderNotFound, PermissionDenied, StoreNotFound
from marketplace.identity.user import User
from marketplace.ordering.cart.cart import Cart
from marketplace.ordering.order.order import Order
from marketplace.shared.email import normalize_email


def _newest_first(orders):
    oldest = datetime.min.replace(tzinfo=UTC)

    def created(order):
        value = order.created_at
        if value is None:
            return oldest
        return value if value.tzinfo else value.replace(tzinfo=UTC)

    return sorted(orders, key=created, reverse=True)


@marketplace.repository(part_of=Order)
class OrderRepository:
    def find_by_order_number(self, order_number: str) -> Order | None:
        results = self._dao.query.filter(order_number=order_number).all()
        return results.first if results and results.items else None

    def order_number_taken(self, order_number: str) -> bool:
        return self.find_by_order_number(order_number) is not None

    def for_user(self, user_id, status: str | None = None) -> list[Order]:
        criteria = {"user_id": str(user_id)}
        if status:
            criteria["status"] = status
        return _newest_first(self._dao.query.filter(**criteria).all().items)

    def for_store(self, store_id, status: str | None = None) -> list[Order]:
        criteria = {"store_id": str(store_id)}
        if status:
            criteria["status"] = status
        return _newest_first(self._dao.query.filter(**criteria).all().items)


def track_guest_order(order_number: str, email: str) -> Order:
    """Find an order by number for someone who can prove the buyer's email."""
    order = current_domain.repository_for(Order).find_by_order_number((order_number or "").strip())
    if order is None:
        raise OrderNotFound()

    try:
        owner = current_domain.repository_for(User).get(order.user_id)
    except ObjectNotFoundError:
        raise OrderNotFound() from None

    if owner.email != normalize_email(email):
        raise PermissionDenied("Email does not match the order")
    return order


def orders_for_user(user_id, status: str | None = None) -> list[Order]:
    return current_domain.repository_for(Order).for_user(user_id, status=status)


def orders_for_store(store_id, requester_id, status: str | None = None) -> list[Order]:
    try:
        store = current_domain.repository_for(Store).get(store_id)
    except ObjectNotFoundError:
        raise StoreNotFound() from None
    if not store.is_owned_by(requester_id):
        raise PermissionDenied("Only the store owner can view store orders")
    return current_domain.repository_for(Order).for_store(store.id, status=status)


def order_for_user(order_id, user_id) -> Order:
    try:
        order = current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        raise OrderNotFound() from None
    if not order.belongs_to(user_id):
        # Do not reveal other customers' orders
        raise OrderNotFound()
    return order


def cart_for_user(user_id) -> Cart | None:
    return current_domain.repository_for(Cart).for_user(user_id)
