"""FastAPI routes for carts, checkout and orders."""

from typing import Annotated

from fastapi import APIRouter, Header, Query
from protean.utils.globals import current_domain

from marketplace.api.schemas import (
    AddToCartRequest,
    ConfirmPaymentRequest,
    CreateOrderRequest,
    GuestOrderRequest,
    RefundOrderRequest,
    StatusResponse,
    UpdateCartItemRequest,
    UpdateOrderStatusRequest,
)
from marketplace.api.serializers import serialize_cart, serialize_order
from marketplace.ordering.cart.management import AddToCart, ClearCart, RemoveFromCart, UpdateCartItem
from marketplace.ordering.checkout.placement import place_order
from marketplace.ordering.order.cancellation import CancelOrder
from marketplace.ordering.order.fulfillment import UpdateOrderStatus
from marketplace.ordering.order.payment import ConfirmOrderPayment, RefundOrder
from marketplace.ordering.order.queries import (
    cart_for_user,
    order_for_user,
    orders_for_store,
    orders_for_user,
    track_guest_order,
)

UserId = Annotated[str, Header(alias="X-User-Id")]

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("")
async def get_cart(user_id: UserId) -> dict:
    return serialize_cart(cart_for_user(user_id))


@cart_router.post("/items", status_code=201)
async def add_to_cart(body: AddToCartRequest, user_id: UserId) -> dict:
    command = AddToCart(user_id=user_id, product_id=body.product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return serialize_cart(cart_for_user(user_id))


@cart_router.put("/items/{product_id}")
async def update_cart_item(product_id: str, body: UpdateCartItemRequest, user_id: UserId) -> dict:
    command = UpdateCartItem(user_id=user_id, product_id=product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return serialize_cart(cart_for_user(user_id))


@cart_router.delete("/items/{product_id}")
async def remove_from_cart(product_id: str, user_id: UserId) -> dict:
    current_domain.process(RemoveFromCart(user_id=user_id, product_id=product_id), asynchronous=False)
    return serialize_cart(cart_for_user(user_id))


@cart_router.delete("", response_model=StatusResponse)
async def clear_cart(user_id: UserId) -> StatusResponse:
    current_domain.process(ClearCart(user_id=user_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201)
async def create_order(body: CreateOrderRequest, user_id: UserId) -> dict:
    orders = place_order(requester_id=user_id, **body.model_dump())
    return {"orders": [serialize_order(order) for order in orders]}


@order_router.get("")
async def list_orders(user_id: UserId, status: str | None = None) -> dict:
    return {"orders": [serialize_order(order) for order in orders_for_user(user_id, status=status)]}


@order_router.get("/{order_id}")
async def get_order(order_id: str, user_id: UserId) -> dict:
    return serialize_order(order_for_user(order_id, user_id))


@order_router.post("/{order_id}/cancel")
async def cancel_order(order_id: str, user_id: UserId) -> dict:
    current_domain.process(CancelOrder(order_id=order_id, user_id=user_id), asynchronous=False)
    return serialize_order(order_for_user(order_id, user_id))


@order_router.put("/{order_id}/status")
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest, user_id: UserId) -> dict:
    command = UpdateOrderStatus(
        order_id=order_id,
        actor_id=user_id,
        status=body.status,
        tracking_number=body.tracking_number,
    )
    status = current_domain.process(command, asynchronous=False)
    return {"order_id": order_id, "status": status}


@order_router.post("/{order_id}/payment")
async def confirm_payment(order_id: str, body: ConfirmPaymentRequest, user_id: UserId) -> dict:
    command = ConfirmOrderPayment(order_id=order_id, actor_id=user_id, payment_reference=body.payment_reference)
    status = current_domain.process(command, asynchronous=False)
    return {"order_id": order_id, "status": status}


@order_router.post("/{order_id}/refund")
async def refund_order(order_id: str, body: RefundOrderRequest, user_id: UserId) -> dict:
    command = RefundOrder(order_id=order_id, actor_id=user_id, amount=body.amount, reason=body.reason)
    status = current_domain.process(command, asynchronous=False)
    return {"order_id": order_id, "status": status}


# ---------------------------------------------------------------------------
# Store orders
# ---------------------------------------------------------------------------
store_orders_router = APIRouter(prefix="/stores", tags=["orders"])


@store_orders_router.get("/{store_id}/orders")
async def list_store_orders(store_id: str, user_id: UserId, status: str | None = None) -> dict:
    orders = orders_for_store(store_id, user_id, status=status)
    return {"orders": [serialize_order(order) for order in orders]}


# ---------------------------------------------------------------------------
# Guest checkout
# ---------------------------------------------------------------------------
guest_router = APIRouter(prefix="/guest", tags=["guest"])


@guest_router.post("/orders", status_code=201)
async def create_guest_order(body: GuestOrderRequest) -> dict:
    orders = place_order(requester_id=None, **body.model_dump())
    return {"orders": [serialize_order(order) for order in orders]}


@guest_router.get("/orders/{order_number}")
async def track_order(order_number: str, email: Annotated[str, Query()]) -> dict:
    return serialize_order(track_guest_order(order_number, email))
