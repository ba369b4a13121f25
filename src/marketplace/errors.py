"""Checkout and order error taxonomy.

Every error carries user-safe ``messages`` keyed by field (the same shape as
``protean.exceptions.ValidationError``), a stable ``code`` for clients and the
HTTP status the API layer answers with.
"""


class MarketplaceError(Exception):
    status_code = 400
    code = "error"
    default_message = "Request could not be processed"

    def __init__(self, message: str | None = None, field: str = "_entity", **details):
        self.message = message or self.default_message
        self.messages = {field: [self.message]}
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        payload = {"error": self.message, "code": self.code, "details": self.messages}
        payload.update(self.details)
        return payload


# ---------------------------------------------------------------------------
# Validation (malformed or missing input)
# ---------------------------------------------------------------------------
class ValidationError(MarketplaceError):
    status_code = 422
    code = "validation_error"


class EmailRequired(ValidationError):
    code = "email_required"
    default_message = "Email is required for guest checkout"

    def __init__(self, message=None):
        super().__init__(message, field="email")


class CartItemsRequired(ValidationError):
    code = "cart_items_required"
    default_message = "Cart items are required for guest checkout"

    def __init__(self, message=None):
        super().__init__(message, field="cart_items")


class InvalidAddress(ValidationError):
    code = "invalid_address"

    def __init__(self, kind: str, missing: list[str] | None = None):
        self.kind = kind
        self.missing = list(missing or [])
        message = f"Invalid {kind} address"
        if self.missing:
            message = f"{message}: missing {', '.join(self.missing)}"
        super().__init__(message, field=f"{kind}_address", missing_fields=self.missing)


class InvalidEmail(ValidationError):
    code = "invalid_email"

    def __init__(self, email: str):
        super().__init__(f"Invalid email address: {email!r}", field="email")


class InvalidQuantity(ValidationError):
    code = "invalid_quantity"

    def __init__(self, product_id, quantity):
        super().__init__(
            f"Quantity for product {product_id} must be a positive whole number",
            field="quantity",
            product_id=str(product_id),
            requested=str(quantity),
        )


# ---------------------------------------------------------------------------
# Not found
# ---------------------------------------------------------------------------
class NotFoundError(MarketplaceError):
    status_code = 404
    code = "not_found"
    default_message = "Not found"


class ProductNotFound(NotFoundError):
    code = "product_not_found"

    def __init__(self, product_id):
        super().__init__(f"Product {product_id} not found", field="product_id", product_id=str(product_id))


class OrderNotFound(NotFoundError):
    code = "order_not_found"
    default_message = "Order not found"

    def __init__(self, message=None):
        super().__init__(message, field="order")


class UserNotFound(NotFoundError):
    code = "user_not_found"
    default_message = "User not found"

    def __init__(self, message=None):
        super().__init__(message, field="user")


class StoreNotFound(NotFoundError):
    code = "store_not_found"
    default_message = "Store not found"

    def __init__(self, message=None):
        super().__init__(message, field="store")


# ---------------------------------------------------------------------------
# Conflicts (state of the world disagrees with the request)
# ---------------------------------------------------------------------------
class ConflictError(MarketplaceError):
    status_code = 409
    code = "conflict"


class ProductUnavailable(ConflictError):
    code = "product_unavailable"

    def __init__(self, product_id, reason: str, requested: int | None = None, available: int | None = None):
        details = {"product_id": str(product_id)}
        if requested is not None:
            details["requested"] = requested
        if available is not None:
            details["available"] = available
        super().__init__(f"Product {product_id} is unavailable: {reason}", field="product_id", **details)


class InvalidTransition(ConflictError):
    code = "invalid_transition"

    def __init__(self, current: str, target: str, message: str | None = None):
        self.current = current
        self.target = target
        super().__init__(message or f"Cannot transition order from {current} to {target}", field="status")


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------
class StateError(MarketplaceError):
    status_code = 422
    code = "state_error"


class EmptyCart(StateError):
    code = "empty_cart"
    default_message = "Cart is empty"

    def __init__(self, message=None):
        super().__init__(message, field="cart")


# ---------------------------------------------------------------------------
# Authorization
# ---------------------------------------------------------------------------
class PermissionDenied(MarketplaceError):
    status_code = 403
    code = "permission_denied"
    default_message = "You are not allowed to perform this action"
