"""Integration tests for cart, checkout and order endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean import current_domain
from protean.integrations.fastapi import register_exception_handlers

from marketplace.api import register_error_handlers, routers
from marketplace.identity.user import User
from marketplace.ordering.order.order import Order


@pytest.fixture()
def client():
    app = FastAPI()
    for router in routers:
        app.include_router(router)
    register_exception_handlers(app)
    register_error_handlers(app)
    return TestClient(app)


def _headers(user):
    return {"X-User-Id": str(user.id)}


class TestCartAPI:
    def test_empty_cart(self, client, make_user):
        response = client.get("/cart", headers=_headers(make_user()))
        assert response.status_code == 200
        assert response.json()["items"] == []

    def test_add_update_remove(self, client, make_user, make_product):
        user = make_user()
        product = make_product()

        response = client.post("/cart/items", json={"product_id": str(product.id), "quantity": 2}, headers=_headers(user))
        assert response.status_code == 201
        assert response.json()["item_count"] == 2

        response = client.put(f"/cart/items/{product.id}", json={"quantity": 3}, headers=_headers(user))
        assert response.json()["item_count"] == 3

        response = client.delete(f"/cart/items/{product.id}", headers=_headers(user))
        assert response.json()["items"] == []

    def test_out_of_stock_is_409(self, client, make_user, make_product):
        product = make_product(inventory=1)
        response = client.post(
            "/cart/items",
            json={"product_id": str(product.id), "quantity": 2},
            headers=_headers(make_user()),
        )
        assert response.status_code == 409
        body = response.json()
        assert body["code"] == "product_unavailable"
        assert body["requested"] == 2
        assert body["available"] == 1


class TestCheckoutAPI:
    def test_checkout_from_cart(self, client, make_user, make_store, make_product, address):
        user = make_user()
        first = make_product(store=make_store(name="First"), base_price="10.00")
        second = make_product(store=make_store(name="Second"), base_price="120.00")
        for product in (first, second):
            client.post("/cart/items", json={"product_id": str(product.id)}, headers=_headers(user))

        response = client.post("/orders", json={"shipping_address": address}, headers=_headers(user))

        assert response.status_code == 201
        orders = response.json()["orders"]
        assert len(orders) == 2
        assert orders[0]["items"][0]["product_snapshot"]["name"] == first.name
        assert orders[0]["shipping_cost"] == "9.99"
        assert orders[1]["shipping_cost"] == "0.00"
        assert client.get("/cart", headers=_headers(user)).json()["items"] == []

    def test_empty_cart_is_422(self, client, make_user, address):
        response = client.post("/orders", json={"shipping_address": address}, headers=_headers(make_user()))
        assert response.status_code == 422
        assert response.json()["code"] == "empty_cart"

    def test_list_and_get_orders(self, client, make_user, make_product, address):
        user = make_user()
        product = make_product()
        created = client.post(
            "/orders",
            json={"cart_items": [{"product_id": str(product.id), "quantity": 1}], "shipping_address": address},
            headers=_headers(user),
        ).json()["orders"][0]

        listed = client.get("/orders", headers=_headers(user)).json()["orders"]
        assert [o["id"] for o in listed] == [created["id"]]

        fetched = client.get(f"/orders/{created['id']}", headers=_headers(user)).json()
        assert fetched["order_number"] == created["order_number"]

        other = client.get(f"/orders/{created['id']}", headers=_headers(make_user()))
        assert other.status_code == 404

    def test_cancel(self, client, make_user, make_product, address):
        user = make_user()
        product = make_product()
        order = client.post(
            "/orders",
            json={"cart_items": [{"product_id": str(product.id)}], "shipping_address": address},
            headers=_headers(user),
        ).json()["orders"][0]

        response = client.post(f"/orders/{order['id']}/cancel", headers=_headers(user))

        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"


class TestGuestAPI:
    def test_guest_checkout_and_tracking(self, client, make_product, address):
        product = make_product()

        response = client.post(
            "/guest/orders",
            json={
                "email": "guest@example.com",
                "cart_items": [{"product_id": str(product.id), "quantity": 1}],
                "shipping_address": address,
            },
        )

        assert response.status_code == 201
        order = response.json()["orders"][0]

        tracked = client.get(f"/guest/orders/{order['order_number']}", params={"email": "GUEST@example.com"})
        assert tracked.status_code == 200
        assert tracked.json()["id"] == order["id"]

        refused = client.get(f"/guest/orders/{order['order_number']}", params={"email": "other@example.com"})
        assert refused.status_code == 403

    def test_missing_city_is_422_and_creates_nothing(self, client, make_product, address):
        product = make_product()
        users_before = len(current_domain.repository_for(User)._dao.query.all().items)
        del address["city"]

        response = client.post(
            "/guest/orders",
            json={
                "email": "guest@example.com",
                "cart_items": [{"product_id": str(product.id), "quantity": 1}],
                "shipping_address": address,
            },
        )

        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "invalid_address"
        assert body["missing_fields"] == ["city"]
        assert len(current_domain.repository_for(User)._dao.query.all().items) == users_before
        assert current_domain.repository_for(Order)._dao.query.all().items == []

    def test_missing_email_is_422(self, client, make_product, address):
        response = client.post(
            "/guest/orders",
            json={"cart_items": [{"product_id": str(make_product().id)}], "shipping_address": address},
        )
        assert response.status_code == 422
        assert response.json()["code"] == "email_required"


class TestStoreOrdersAPI:
    def test_owner_moves_order_forward(self, client, make_user, make_admin, make_store, make_product, address):
        store = make_store()
        product = make_product(store=store)
        order = client.post(
            "/orders",
            json={"cart_items": [{"product_id": str(product.id)}], "shipping_address": address},
            headers=_headers(make_user()),
        ).json()["orders"][0]
        owner = {"X-User-Id": str(store.owner_id)}

        paid = client.post(
            f"/orders/{order['id']}/payment",
            json={"payment_reference": "pay-1"},
            headers=_headers(make_admin()),
        )
        assert paid.json()["status"] == "confirmed"
        response = client.put(f"/orders/{order['id']}/status", json={"status": "processing"}, headers=owner)
        assert response.json() == {"order_id": order["id"], "status": "processing"}

        repeat = client.put(f"/orders/{order['id']}/status", json={"status": "processing"}, headers=owner)
        assert repeat.status_code == 200
        assert repeat.json()["status"] == "processing"

        skip = client.put(f"/orders/{order['id']}/status", json={"status": "delivered"}, headers=owner)
        assert skip.status_code == 409
        assert skip.json()["code"] == "invalid_transition"

        listed = client.get(f"/stores/{store.id}/orders", headers=owner).json()["orders"]
        assert [o["status"] for o in listed] == ["processing"]

    def test_store_orders_are_private(self, client, make_user, make_store):
        store = make_store()
        response = client.get(f"/stores/{store.id}/orders", headers=_headers(make_user()))
        assert response.status_code == 403


class TestPaymentAPI:
    def _order(self, client, make_user, make_product, address):
        return client.post(
            "/orders",
            json={"cart_items": [{"product_id": str(make_product().id)}], "shipping_address": address},
            headers=_headers(make_user()),
        ).json()["orders"][0]

    def test_payment_needs_a_user(self, client, make_user, make_product, address):
        order = self._order(client, make_user, make_product, address)
        response = client.post(f"/orders/{order['id']}/payment", json={"payment_reference": "pay-1"})
        assert response.status_code == 422

    def test_customer_cannot_mark_paid_or_refund(self, client, make_user, make_product, address):
        customer = make_user()
        order = client.post(
            "/orders",
            json={"cart_items": [{"product_id": str(make_product().id)}], "shipping_address": address},
            headers=_headers(customer),
        ).json()["orders"][0]

        paid = client.post(f"/orders/{order['id']}/payment", json={}, headers=_headers(customer))
        assert paid.status_code == 403
        assert paid.json()["code"] == "permission_denied"

        refund = client.post(f"/orders/{order['id']}/refund", json={}, headers=_headers(customer))
        assert refund.status_code == 403

        fetched = client.get(f"/orders/{order['id']}", headers=_headers(customer)).json()
        assert fetched["status"] == "pending"
        assert fetched["payment_status"] == "pending"

    def test_admin_confirms_and_refunds(self, client, make_user, make_admin, make_product, address):
        order = self._order(client, make_user, make_product, address)
        admin = _headers(make_admin())

        assert client.post(f"/orders/{order['id']}/payment", json={}, headers=admin).json()["status"] == "confirmed"
        refund = client.post(f"/orders/{order['id']}/refund", json={"reason": "damaged"}, headers=admin)
        assert refund.status_code == 200
        assert refund.json()["status"] == "refunded"
