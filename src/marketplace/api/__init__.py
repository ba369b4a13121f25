"""Marketplace API package."""

from marketplace.api.catalogue import category_router, product_router, store_router, user_router
from marketplace.api.context import REQUEST_ID_HEADER, request_log_context
from marketplace.api.errors import register_error_handlers
from marketplace.api.ordering import cart_router, guest_router, order_router, store_orders_router

routers = [
    user_router,
    store_router,
    category_router,
    product_router,
    cart_router,
    order_router,
    store_orders_router,
    guest_router,
]

__all__ = ["routers", "register_error_handlers", "request_log_context", "REQUEST_ID_HEADER"]
