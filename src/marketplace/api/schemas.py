"""Pydantic request/response schemas for the marketplace API.

These are external contracts, kept separate from the Protean commands.
Checkout addresses and lines are accepted loosely here and validated by the
checkout itself so that clients get its specific error codes.
"""

from typing import Any

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------
class RegisterUserRequest(BaseModel):
    email: str
    first_name: str
    last_name: str
    password: str = Field(min_length=8)


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
class OpenStoreRequest(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    description: str | None = None
    commission_rate: float = Field(default=0.10, ge=0, le=1)


class StoreStatusRequest(BaseModel):
    is_active: bool


class CreateCategoryRequest(BaseModel):
    name: str
    description: str | None = None
    parent_id: str | None = None


class ListProductRequest(BaseModel):
    store_id: str
    name: str
    base_price: str
    compare_at_price: str | None = None
    sku: str | None = None
    inventory: int = Field(default=0, ge=0)
    track_inventory: bool = True
    description: str | None = None
    category_id: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "store_id": "store-001",
                    "name": "Trail Running Shoe",
                    "base_price": "89.99",
                    "compare_at_price": "119.99",
                    "sku": "SHOE-TRL-42",
                    "inventory": 25,
                }
            ]
        }
    }


class RejectProductRequest(BaseModel):
    reason: str | None = None


class RepriceProductRequest(BaseModel):
    base_price: str
    compare_at_price: str | None = None


class RestockProductRequest(BaseModel):
    quantity: int = Field(ge=1)


class UploadImageRequest(BaseModel):
    filename: str
    content_type: str
    content: str  # base64
    alt_text: str | None = None
    position: int | None = Field(default=None, ge=0)


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = 1


class UpdateCartItemRequest(BaseModel):
    quantity: int


# ---------------------------------------------------------------------------
# Checkout and orders
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    cart_id: str | None = None
    cart_items: list[dict[str, Any]] | None = None
    shipping_address: dict[str, Any] | None = None
    billing_address: dict[str, Any] | None = None
    payment_method: str | None = None
    notes: str | None = None


class GuestOrderRequest(BaseModel):
    email: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    cart_items: list[dict[str, Any]] | None = None
    shipping_address: dict[str, Any] | None = None
    billing_address: dict[str, Any] | None = None
    payment_method: str | None = None
    notes: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "email": "shopper@example.com",
                    "cart_items": [{"product_id": "prod-001", "quantity": 2}],
                    "shipping_address": {
                        "first_name": "Ada",
                        "last_name": "Lovelace",
                        "street": "1 Main St",
                        "city": "Springfield",
                        "state": "IL",
                        "postal_code": "62701",
                        "country": "US",
                    },
                    "payment_method": "card",
                }
            ]
        }
    }


class UpdateOrderStatusRequest(BaseModel):
    status: str
    tracking_number: str | None = None


class ConfirmPaymentRequest(BaseModel):
    payment_reference: str | None = None


class RefundOrderRequest(BaseModel):
    amount: str | None = None
    reason: str | None = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class IdResponse(BaseModel):
    id: str


class StatusResponse(BaseModel):
    status: str = "ok"
