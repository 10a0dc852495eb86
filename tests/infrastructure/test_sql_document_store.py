"""Tests for the SQLAlchemy document store, using in-memory SQLite."""

import threading

import pytest
from sqlalchemy.exc import OperationalError

from shop.application.cart_service import CartService
from shop.domain.exceptions import NotFoundError, PersistenceError, ValidationError
from shop.infrastructure.persistence.session import (
    create_db_engine,
    create_session_factory,
)
from shop.infrastructure.persistence.sql_document_store import SqlDocumentStore


@pytest.fixture
def factory():
    return create_session_factory(create_db_engine("sqlite://"))


@pytest.fixture
def store(factory):
    return SqlDocumentStore(factory, "products")


class TestCrud:

    def test_create_assigns_id(self, store):
        record = store.create({"name": "A"})
        assert record["id"]
        assert store.read(record["id"]) == record

    def test_read_missing(self, store):
        with pytest.raises(NotFoundError):
            store.read("nope")

    def test_update_merges_and_keeps_id(self, store):
        store.create({"id": "p1", "name": "A", "stock": 1})
        updated = store.update("p1", {"stock": 2, "id": "changed"})
        assert updated == {"id": "p1", "name": "A", "stock": 2}
        assert store.read("p1") == updated

    def test_update_missing(self, store):
        with pytest.raises(NotFoundError):
            store.update("nope", {"stock": 2})

    def test_delete(self, store):
        store.create({"id": "p1"})
        store.create({"id": "p2"})
        store.delete("p1")
        assert [r["id"] for r in store.read_all()] == ["p2"]

    def test_delete_missing(self, store):
        with pytest.raises(NotFoundError):
            store.delete("nope")

    def test_read_all_in_insertion_order(self, store):
        for pid in ["b", "a", "c"]:
            store.create({"id": pid})
        assert [r["id"] for r in store.read_all()] == ["b", "a", "c"]

    def test_write_all_replaces_collection(self, store):
        store.create({"id": "p1"})
        store.write_all([{"id": "p8"}, {"id": "p9"}])
        assert [r["id"] for r in store.read_all()] == ["p8", "p9"]

    def test_modify_replaces_record_and_keeps_id(self, store):
        store.create({"id": "p1", "name": "A", "stock": 1})
        changed = store.modify("p1", lambda r: {"id": "other", "name": r["name"], "stock": 9})
        assert changed == {"id": "p1", "name": "A", "stock": 9}
        assert store.read("p1") == changed

    def test_modify_rolls_back_when_change_fails(self, store):
        store.create({"id": "p1", "stock": 1})

        def reject(record):
            raise ValidationError("no")

        with pytest.raises(ValidationError):
            store.modify("p1", reject)
        assert store.read("p1") == {"id": "p1", "stock": 1}

    def test_modify_missing(self, store):
        with pytest.raises(NotFoundError):
            store.modify("nope", dict)


class TestCollections:

    def test_collections_are_isolated(self, factory):
        products = SqlDocumentStore(factory, "products")
        carts = SqlDocumentStore(factory, "carts")
        products.create({"id": "x", "name": "product"})
        carts.create({"id": "x", "products": []})
        assert products.read("x") == {"id": "x", "name": "product"}
        assert carts.read("x") == {"id": "x", "products": []}
        carts.delete("x")
        assert products.read_all() == [{"id": "x", "name": "product"}]


def test_database_errors_become_persistence_errors(store):
    def broken(session):
        raise OperationalError("SELECT 1", {}, Exception("disk I/O error"))

    with pytest.raises(PersistenceError, match="Database error"):
        store._run(broken)


def test_concurrent_cart_adds_are_not_lost(factory):
    service = CartService(SqlDocumentStore(factory, "carts"))
    cart = service.add_cart()

    def worker():
        for _ in range(10):
            service.add_product_to_cart(cart.id, "p1", 1)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    [item] = service.get_cart(cart.id).items
    assert item.quantity.value == 40
