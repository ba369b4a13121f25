"""Cart management — commands, repository and handler."""

from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from marketplace.catalogue.product.management import load_product
from marketplace.domain import marketplace
from marketplace.errors import InvalidQuantity, ProductUnavailable
from marketplace.ordering.cart.cart import Cart


@marketplace.command(part_of="Cart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(default=1)


@marketplace.command(part_of="Cart")
class UpdateCartItem:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@marketplace.command(part_of="Cart")
class RemoveFromCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@marketplace.command(part_of="Cart")
class ClearCart:
    user_id = Identifier(required=True)


@marketplace.repository(part_of=Cart)
class CartRepository:
    def for_user(self, user_id) -> Cart | None:
        results = self._dao.query.filter(user_id=str(user_id)).all()
        return results.first if results and results.items else None


def current_cart(user_id) -> Cart:
    """The user's cart, created on first use and renewed once expired."""
    cart = current_domain.repository_for(Cart).for_user(user_id)
    if cart is None:
        return Cart.create(user_id=user_id)
    cart.renew_if_expired()
    return cart


@marketplace.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        quantity = command.quantity if command.quantity is not None else 1
        if quantity <= 0:
            raise InvalidQuantity(command.product_id, quantity)
        product = load_product(command.product_id)

        cart = current_cart(command.user_id)
        existing = cart.item_for(product.id)
        wanted = quantity + (existing.quantity if existing else 0)
        if not product.is_active:
            raise ProductUnavailable(product.id, "product is not active")
        if not product.in_stock(wanted):
            raise ProductUnavailable(
                product.id,
                "insufficient inventory",
                requested=wanted,
                available=product.inventory or 0,
            )

        cart.add_product(product.id, quantity)
        current_domain.repository_for(Cart).add(cart)
        return str(cart.id)

    @handle(UpdateCartItem)
    def update_item(self, command):
        cart = current_cart(command.user_id)
        if command.quantity > 0 and cart.item_for(command.product_id) is not None:
            product = load_product(command.product_id)
            if not product.in_stock(command.quantity):
                raise ProductUnavailable(
                    product.id,
                    "insufficient inventory",
                    requested=command.quantity,
                    available=product.inventory or 0,
                )

        cart.update_quantity(command.product_id, command.quantity)
        current_domain.repository_for(Cart).add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        cart = current_cart(command.user_id)
        cart.remove_product(command.product_id)
        current_domain.repository_for(Cart).add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = current_cart(command.user_id)
        cart.clear()
        current_domain.repository_for(Cart).add(cart)
