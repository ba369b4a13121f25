"""Integration tests for user, store and product endpoints via TestClient."""

import base64

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean import current_domain
from protean.integrations.fastapi import register_exception_handlers

from marketplace.api import register_error_handlers, routers
from marketplace.catalogue.product.product import Product
from marketplace.identity.user import User


@pytest.fixture()
def client():
    app = FastAPI()
    for router in routers:
        app.include_router(router)
    register_exception_handlers(app)
    register_error_handlers(app)
    return TestClient(app)


def _register(client, email="seller@example.com"):
    response = client.post(
        "/users",
        json={"email": email, "first_name": "Sam", "last_name": "Seller", "password": "correct-horse"},
    )
    assert response.status_code == 201
    return response.json()["id"]


def _open_store(client, owner_id, name="Acme Goods"):
    response = client.post("/stores", json={"name": name}, headers={"X-User-Id": owner_id})
    assert response.status_code == 201
    store_id = response.json()["id"]
    assert client.post(f"/stores/{store_id}/verify").status_code == 200
    return store_id


def _list_product(client, owner_id, store_id, **overrides):
    body = {"store_id": store_id, "name": "Trail Shoe", "base_price": "89.99", "inventory": 5}
    body.update(overrides)
    response = client.post("/products", json=body, headers={"X-User-Id": owner_id})
    assert response.status_code == 201
    return response.json()["id"]


class TestUserAPI:
    def test_register(self, client):
        user_id = _register(client)
        assert client.post(f"/users/{user_id}/verify-email").json() == {"status": "ok"}

    def test_duplicate_email_is_400(self, client):
        _register(client)
        response = client.post(
            "/users",
            json={"email": "SELLER@example.com", "first_name": "Sam", "last_name": "Seller", "password": "correct-horse"},
        )
        assert response.status_code == 400

    def test_registration_cannot_choose_a_role(self, client):
        response = client.post(
            "/users",
            json={
                "email": "mallory@example.com",
                "first_name": "Mal",
                "last_name": "Lory",
                "password": "correct-horse",
                "role": "system_admin",
            },
        )
        assert response.status_code == 201
        user = current_domain.repository_for(User).get(response.json()["id"])
        assert user.role == "consumer"
        assert not user.is_system_admin

    def test_short_password_is_422(self, client):
        response = client.post(
            "/users",
            json={"email": "a@example.com", "first_name": "A", "last_name": "B", "password": "short"},
        )
        assert response.status_code == 422


class TestStoreAPI:
    def test_open_store_for_unknown_user_is_404(self, client):
        response = client.post("/stores", json={"name": "Acme Goods"}, headers={"X-User-Id": "missing"})
        assert response.status_code == 404
        assert response.json()["code"] == "user_not_found"

    def test_deactivate_store(self, client):
        owner_id = _register(client)
        store_id = _open_store(client, owner_id)
        response = client.put(f"/stores/{store_id}/status", json={"is_active": False})
        assert response.status_code == 200

    def test_missing_user_header_is_422(self, client):
        assert client.post("/stores", json={"name": "Acme Goods"}).status_code == 422


class TestProductAPI:
    def test_listing_moderation_flow(self, client):
        owner_id = _register(client)
        store_id = _open_store(client, owner_id)
        product_id = _list_product(client, owner_id, store_id)

        assert client.post(f"/products/{product_id}/submit").status_code == 200
        assert client.post(f"/products/{product_id}/approve").status_code == 200

        product = current_domain.repository_for(Product).get(product_id)
        assert product.is_active

    def test_listing_in_someone_elses_store_is_403(self, client):
        owner_id = _register(client)
        store_id = _open_store(client, owner_id)
        stranger_id = _register(client, email="stranger@example.com")

        response = client.post(
            "/products",
            json={"store_id": store_id, "name": "Fake", "base_price": "1.00"},
            headers={"X-User-Id": stranger_id},
        )

        assert response.status_code == 403
        assert response.json()["code"] == "permission_denied"

    def test_reprice_and_restock(self, client):
        owner_id = _register(client)
        store_id = _open_store(client, owner_id)
        product_id = _list_product(client, owner_id, store_id)

        assert client.put(f"/products/{product_id}/price", json={"base_price": "79.99"}).status_code == 200
        assert client.post(f"/products/{product_id}/restock", json={"quantity": 5}).status_code == 200

        product = current_domain.repository_for(Product).get(product_id)
        assert product.base_price == "79.99"
        assert product.inventory == 10

    def test_upload_image(self, client):
        owner_id = _register(client)
        store_id = _open_store(client, owner_id)
        product_id = _list_product(client, owner_id, store_id)

        response = client.post(
            f"/products/{product_id}/images",
            json={
                "filename": "front.jpg",
                "content_type": "image/jpeg",
                "content": base64.b64encode(b"\xff\xd8\xff\xe0jpeg").decode(),
            },
            headers={"X-User-Id": owner_id},
        )

        assert response.status_code == 201
        product = current_domain.repository_for(Product).get(product_id)
        assert product.images[0].url.endswith(".jpg")

    def test_unknown_product_is_404(self, client):
        response = client.post("/products/missing/submit")
        assert response.status_code == 404
        assert response.json()["code"] == "product_not_found"
