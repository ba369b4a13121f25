"""Tests for the Store aggregate."""

import pytest
from protean.exceptions import ValidationError

from marketplace.catalogue.store.events import StoreOpened, StoreSaleRecorded, StoreStatusChanged, StoreVerified
from marketplace.catalogue.store.store import Store


def _open_store():
    return Store.open(owner_id="user-001", name="Acme Goods", slug="acme-goods")


class TestStore:
    def test_new_store_is_not_orderable(self):
        store = _open_store()
        assert isinstance(store._events[0], StoreOpened)
        assert store.is_active is True
        assert store.is_verified is False
        assert store.is_orderable is False

    def test_verified_active_store_is_orderable(self):
        store = _open_store()
        store.verify()
        assert store.is_orderable is True
        assert isinstance(store._events[-1], StoreVerified)

    def test_inactive_store_is_not_orderable(self):
        store = _open_store()
        store.verify()
        store.set_active(False)
        assert store.is_orderable is False
        assert isinstance(store._events[-1], StoreStatusChanged)

    def test_set_active_to_current_value_is_quiet(self):
        store = _open_store()
        store._events.clear()
        store.set_active(True)
        assert store._events == []

    def test_ownership(self):
        store = _open_store()
        assert store.is_owned_by("user-001")
        assert not store.is_owned_by("user-002")
        assert not store.is_owned_by(None)

    def test_record_sale_updates_totals(self):
        store = _open_store()
        store.record_sale("ord-1", "10.50")
        store.record_sale("ord-2", "4.25")
        assert store.total_sales == "14.75"
        assert store.total_orders == 2
        assert isinstance(store._events[-1], StoreSaleRecorded)

    def test_negative_sale_rejected(self):
        store = _open_store()
        with pytest.raises(ValidationError):
            store.record_sale("ord-1", "-1.00")
