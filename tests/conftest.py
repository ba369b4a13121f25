import os
from pathlib import Path
from uuid import uuid4

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Installs test settings before the domain module is first imported: uploads
    go to memory and emails to the fake adapter.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env

    from marketplace.config import MarketplaceSettings, NotificationSettings, StorageSettings, configure

    configure(
        MarketplaceSettings(
            environment="test",
            storage=StorageSettings(backend="memory"),
            notifications=NotificationSettings(email_channel="fake"),
        )
    )


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def marketplace_bed():
    from marketplace.domain import marketplace

    bed = DomainFixture(marketplace)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(marketplace_bed):
    with marketplace_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def run_around_tests(_ctx):
    """Fixture to automatically cleanup infrastructure after every test"""
    yield

    from protean import current_domain

    from marketplace.notifications.channel import reset_channels
    from marketplace.storage import reset_blob_store

    # Clear all databases
    for _, provider in current_domain.providers.items():
        provider._data_reset()

    # Drain event stores
    current_domain.event_store.store._data_reset()

    reset_channels()
    reset_blob_store()


# ---------------------------------------------------------------------------
# Factories shared across areas
# ---------------------------------------------------------------------------
ADDRESS = {
    "first_name": "Ada",
    "last_name": "Lovelace",
    "street": "1 Main St",
    "city": "Springfield",
    "state": "IL",
    "postal_code": "62701",
    "country": "US",
}


@pytest.fixture()
def address():
    return dict(ADDRESS)


@pytest.fixture()
def make_user():
    from protean import current_domain

    from marketplace.identity.account import VerifyUserEmail
    from marketplace.identity.registration import RegisterUser
    from marketplace.identity.user import User

    def _make(email=None, first_name="Ada", last_name="Lovelace", password="correct-horse", verified=True):
        email = email or f"user-{uuid4().hex[:8]}@example.com"
        user_id = current_domain.process(
            RegisterUser(email=email, first_name=first_name, last_name=last_name, password=password),
            asynchronous=False,
        )
        if verified:
            current_domain.process(VerifyUserEmail(user_id=user_id), asynchronous=False)
        return current_domain.repository_for(User).get(user_id)

    return _make


@pytest.fixture()
def make_admin():
    from protean import current_domain

    from marketplace.identity.registration import RegisterUser
    from marketplace.identity.user import User, UserRole

    def _make(email=None):
        email = email or f"admin-{uuid4().hex[:8]}@example.com"
        user_id = current_domain.process(
            RegisterUser(
                email=email,
                first_name="System",
                last_name="Admin",
                password="correct-horse",
                role=UserRole.SYSTEM_ADMIN.value,
            ),
            asynchronous=False,
        )
        return current_domain.repository_for(User).get(user_id)

    return _make


@pytest.fixture()
def make_store(make_user):
    from protean import current_domain

    from marketplace.catalogue.store.management import ChangeStoreStatus, OpenStore, VerifyStore
    from marketplace.catalogue.store.store import Store

    def _make(name="Acme Goods", owner=None, verified=True, active=True):
        owner = owner or make_user(first_name="Store", last_name="Owner")
        store_id = current_domain.process(OpenStore(owner_id=owner.id, name=name), asynchronous=False)
        if verified:
            current_domain.process(VerifyStore(store_id=store_id), asynchronous=False)
        if not active:
            current_domain.process(ChangeStoreStatus(store_id=store_id, is_active=False), asynchronous=False)
        return current_domain.repository_for(Store).get(store_id)

    return _make


@pytest.fixture()
def make_product(make_store):
    from protean import current_domain

    from marketplace.catalogue.product.management import ApproveProduct, ListProduct, SubmitProductForReview
    from marketplace.catalogue.product.product import Product

    def _make(store=None, name="Widget", base_price="25.00", inventory=10, track_inventory=True, active=True, sku=None):
        store = store or make_store()
        product_id = current_domain.process(
            ListProduct(
                store_id=store.id,
                seller_id=store.owner_id,
                name=name,
                base_price=base_price,
                inventory=inventory,
                track_inventory=track_inventory,
                sku=sku,
            ),
            asynchronous=False,
        )
        if active:
            current_domain.process(SubmitProductForReview(product_id=product_id), asynchronous=False)
            current_domain.process(ApproveProduct(product_id=product_id), asynchronous=False)
        return current_domain.repository_for(Product).get(product_id)

    return _make


@pytest.fixture()
def email_channel():
    from marketplace.notifications.channel import get_email_channel

    return get_email_channel()
