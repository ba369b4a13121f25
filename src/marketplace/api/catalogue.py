"""FastAPI routes for users, stores, categories and products.

``X-User-Id`` identifies the caller; token authentication happens in front
of this service.
"""

from typing import Annotated

from fastapi import APIRouter, Header
from protean.utils.globals import current_domain

from marketplace.api.schemas import (
    CreateCategoryRequest,
    IdResponse,
    ListProductRequest,
    OpenStoreRequest,
    RegisterUserRequest,
    RejectProductRequest,
    RepriceProductRequest,
    RestockProductRequest,
    StatusResponse,
    StoreStatusRequest,
    UploadImageRequest,
)
from marketplace.catalogue.category.management import CreateCategory
from marketplace.catalogue.product.images import UploadProductImage
from marketplace.catalogue.product.management import (
    ApproveProduct,
    DeactivateProduct,
    ListProduct,
    ReactivateProduct,
    RejectProduct,
    RemoveProduct,
    RepriceProduct,
    RestockProduct,
    SubmitProductForReview,
)
from marketplace.catalogue.store.management import ChangeStoreStatus, OpenStore, VerifyStore
from marketplace.identity.account import DeactivateUser, VerifyUserEmail
from marketplace.identity.registration import RegisterUser

UserId = Annotated[str, Header(alias="X-User-Id")]

# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
user_router = APIRouter(prefix="/users", tags=["users"])


@user_router.post("", status_code=201, response_model=IdResponse)
async def register_user(body: RegisterUserRequest) -> IdResponse:
    result = current_domain.process(RegisterUser(**body.model_dump()), asynchronous=False)
    return IdResponse(id=result)


@user_router.post("/{user_id}/verify-email", response_model=StatusResponse)
async def verify_user_email(user_id: str) -> StatusResponse:
    current_domain.process(VerifyUserEmail(user_id=user_id), asynchronous=False)
    return StatusResponse()


@user_router.post("/{user_id}/deactivate", response_model=StatusResponse)
async def deactivate_user(user_id: str) -> StatusResponse:
    current_domain.process(DeactivateUser(user_id=user_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------
store_router = APIRouter(prefix="/stores", tags=["stores"])


@store_router.post("", status_code=201, response_model=IdResponse)
async def open_store(body: OpenStoreRequest, user_id: UserId) -> IdResponse:
    result = current_domain.process(OpenStore(owner_id=user_id, **body.model_dump()), asynchronous=False)
    return IdResponse(id=result)


@store_router.post("/{store_id}/verify", response_model=StatusResponse)
async def verify_store(store_id: str) -> StatusResponse:
    current_domain.process(VerifyStore(store_id=store_id), asynchronous=False)
    return StatusResponse()


@store_router.put("/{store_id}/status", response_model=StatusResponse)
async def change_store_status(store_id: str, body: StoreStatusRequest) -> StatusResponse:
    current_domain.process(ChangeStoreStatus(store_id=store_id, is_active=body.is_active), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------
category_router = APIRouter(prefix="/categories", tags=["categories"])


@category_router.post("", status_code=201, response_model=IdResponse)
async def create_category(body: CreateCategoryRequest) -> IdResponse:
    result = current_domain.process(CreateCategory(**body.model_dump()), asynchronous=False)
    return IdResponse(id=result)


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.post("", status_code=201, response_model=IdResponse)
async def list_product(body: ListProductRequest, user_id: UserId) -> IdResponse:
    result = current_domain.process(ListProduct(seller_id=user_id, **body.model_dump()), asynchronous=False)
    return IdResponse(id=result)


@product_router.post("/{product_id}/submit", response_model=StatusResponse)
async def submit_product(product_id: str) -> StatusResponse:
    current_domain.process(SubmitProductForReview(product_id=product_id), asynchronous=False)
    return StatusResponse()


@product_router.post("/{product_id}/approve", response_model=StatusResponse)
async def approve_product(product_id: str) -> StatusResponse:
    current_domain.process(ApproveProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


@product_router.post("/{product_id}/reject", response_model=StatusResponse)
async def reject_product(product_id: str, body: RejectProductRequest) -> StatusResponse:
    current_domain.process(RejectProduct(product_id=product_id, reason=body.reason), asynchronous=False)
    return StatusResponse()


@product_router.post("/{product_id}/deactivate", response_model=StatusResponse)
async def deactivate_product(product_id: str) -> StatusResponse:
    current_domain.process(DeactivateProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


@product_router.post("/{product_id}/reactivate", response_model=StatusResponse)
async def reactivate_product(product_id: str) -> StatusResponse:
    current_domain.process(ReactivateProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()


@product_router.put("/{product_id}/price", response_model=StatusResponse)
async def reprice_product(product_id: str, body: RepriceProductRequest) -> StatusResponse:
    current_domain.process(RepriceProduct(product_id=product_id, **body.model_dump()), asynchronous=False)
    return StatusResponse()


@product_router.post("/{product_id}/restock", response_model=StatusResponse)
async def restock_product(product_id: str, body: RestockProductRequest) -> StatusResponse:
    current_domain.process(RestockProduct(product_id=product_id, quantity=body.quantity), asynchronous=False)
    return StatusResponse()


@product_router.post("/{product_id}/images", status_code=201, response_model=IdResponse)
async def upload_product_image(product_id: str, body: UploadImageRequest, user_id: UserId) -> IdResponse:
    command = UploadProductImage(product_id=product_id, seller_id=user_id, **body.model_dump())
    result = current_domain.process(command, asynchronous=False)
    return IdResponse(id=result)


@product_router.delete("/{product_id}", response_model=StatusResponse)
async def remove_product(product_id: str) -> StatusResponse:
    current_domain.process(RemoveProduct(product_id=product_id), asynchronous=False)
    return StatusResponse()
