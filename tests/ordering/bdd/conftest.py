"""Shared BDD fixtures and step definitions for checkout and orders."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then, when

from marketplace.catalogue.product.product import Product
from marketplace.errors import InvalidTransition
from marketplace.ordering.order.order import Order
from marketplace.ordering.order.payment import ConfirmOrderPayment


@pytest.fixture()
def world():
    """Named stores, products and the outcome of the last action."""
    return {"stores": {}, "products": {}, "orders": [], "error": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a verified store "{name}"'))
def _(world, make_store, name):
    world["stores"][name] = make_store(name=name)


@given(parsers.cfparse('"{store}" sells "{product}" at "{price}" with {inventory:d} in stock'))
def _(world, make_product, store, product, price, inventory):
    world["products"][product] = make_product(
        store=world["stores"][store],
        name=product,
        base_price=price,
        inventory=inventory,
    )


@given("the payment is confirmed")
@when("the payment is confirmed")
def _(world, make_admin):
    current_domain.process(
        ConfirmOrderPayment(order_id=world["orders"][0].id, actor_id=make_admin().id, payment_reference="pay-001"),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('"{product}" has {inventory:d} in stock'))
def _(world, product, inventory):
    stored = current_domain.repository_for(Product).get(world["products"][product].id)
    assert stored.inventory == inventory


@then(parsers.cfparse("{count:d} order exists"))
@then(parsers.cfparse("{count:d} orders exist"))
def _(count):
    assert len(current_domain.repository_for(Order)._dao.query.all().items) == count


@then("the transition is rejected")
def _(world):
    assert isinstance(world["error"], InvalidTransition)
