"""Integration tests for ProductService.

Uses the in-memory fake store, no file I/O.
"""

import pytest

from shop.application.product_service import ProductService
from shop.application.queries import ProductQuery, handle_product_queries
from shop.domain.exceptions import NotFoundError, ValidationError
from tests.fakes import FakeRecordStore, product_record


def _setup(records=None):
    store = FakeRecordStore(records)
    return ProductService(store), store


def _catalog(count):
    return [product_record(f"p{i}", price=float(i)) for i in range(1, count + 1)]


class TestAddAndGet:

    def test_add_then_get_returns_same_fields(self):
        service, _ = _setup()
        fields = {
            "name": "Widget",
            "description": "A widget",
            "price": 12.5,
            "stock": 4,
            "category": "tools",
            "thumbnails": ["w.png"],
        }
        created = service.add_product(fields)
        fetched = service.get_product(created.id)
        assert fetched == created
        assert {k: v for k, v in fetched.to_record().items() if k != "id"} == fields

    def test_generated_ids_are_unique(self):
        service, _ = _setup()
        a = service.add_product({"name": "A", "price": 1, "stock": 1})
        b = service.add_product({"name": "B", "price": 1, "stock": 1})
        assert a.id != b.id

    def test_supplied_id_is_ignored(self):
        service, _ = _setup()
        created = service.add_product({"id": "mine", "name": "A", "price": 1, "stock": 1})
        assert created.id != "mine"

    def test_invalid_product_not_persisted(self):
        service, store = _setup()
        with pytest.raises(ValidationError):
            service.add_product({"name": "A", "price": -1, "stock": 1})
        assert store.read_all() == []

    def test_get_missing_product(self):
        service, _ = _setup()
        with pytest.raises(NotFoundError):
            service.get_product("nope")


class TestUpdateAndDelete:

    def test_partial_update(self):
        service, _ = _setup([product_record("p1", 10.0)])
        updated = service.update_product("p1", {"stock": 0})
        assert updated.stock == 0
        assert service.get_product("p1").stock == 0
        assert service.get_product("p1").price == 10.0

    def test_update_missing_product(self):
        service, _ = _setup()
        with pytest.raises(NotFoundError):
            service.update_product("nope", {"stock": 1})

    def test_invalid_update_leaves_product_unchanged(self):
        service, _ = _setup([product_record("p1", 10.0)])
        with pytest.raises(ValidationError):
            service.update_product("p1", {"price": "free"})
        assert service.get_product("p1").price == 10.0

    def test_delete(self):
        service, _ = _setup([product_record("p1", 10.0)])
        service.delete_product("p1")
        with pytest.raises(NotFoundError):
            service.get_product("p1")

    def test_delete_missing_product(self):
        service, _ = _setup()
        with pytest.raises(NotFoundError):
            service.delete_product("nope")


class TestPagination:

    def test_first_page_of_five_by_two(self):
        service, _ = _setup(_catalog(5))
        page = service.get_products(ProductQuery(limit=2, page=1))
        assert [p.id for p in page.payload] == ["p1", "p2"]
        assert page.total_pages == 3
        assert page.has_next_page is True
        assert page.has_prev_page is False
        assert page.prev_link is None
        assert page.next_link == "?limit=2&page=2"

    def test_last_page_of_five_by_two(self):
        service, _ = _setup(_catalog(5))
        page = service.get_products(ProductQuery(limit=2, page=3))
        assert [p.id for p in page.payload] == ["p5"]
        assert page.has_next_page is False
        assert page.has_prev_page is True
        assert page.prev_page == 2
        assert page.next_link is None

    def test_page_past_the_end_is_empty(self):
        service, _ = _setup(_catalog(3))
        page = service.get_products(ProductQuery(limit=2, page=9))
        assert page.payload == []
        assert page.has_next_page is False

    def test_empty_catalog_has_one_page(self):
        service, _ = _setup()
        page = service.get_products()
        assert page.payload == []
        assert page.total_pages == 1

    def test_default_query(self):
        service, _ = _setup(_catalog(12))
        page = service.get_products(None)
        assert len(page.payload) == 10
        assert page.has_next_page is True


class TestFilterAndSort:

    def test_sort_price_desc(self):
        service, _ = _setup([product_record("p1", 10), product_record("p2", 20)])
        page = service.get_products(handle_product_queries({"sort": "price-desc"}))
        assert [p.id for p in page.payload] == ["p2", "p1"]

    def test_sort_price_asc(self):
        service, _ = _setup([product_record("p1", 30), product_record("p2", 20)])
        page = service.get_products(handle_product_queries({"sort": "asc"}))
        assert [p.id for p in page.payload] == ["p2", "p1"]

    def test_no_sort_keeps_store_order(self):
        service, _ = _setup([product_record("p1", 30), product_record("p2", 20)])
        assert [p.id for p in service.get_products().payload] == ["p1", "p2"]

    def test_category_filter(self):
        service, _ = _setup([
            product_record("p1", 1, category="books"),
            product_record("p2", 1, category="tools"),
        ])
        page = service.get_products(handle_product_queries({"query": "books"}))
        assert [p.id for p in page.payload] == ["p1"]

    def test_availability_filters(self):
        service, _ = _setup([
            product_record("p1", 1, stock=0),
            product_record("p2", 1, stock=3),
        ])
        available = service.get_products(handle_product_queries({"query": "available"}))
        unavailable = service.get_products(handle_product_queries({"query": "unavailable"}))
        assert [p.id for p in available.payload] == ["p2"]
        assert [p.id for p in unavailable.payload] == ["p1"]

    def test_pagination_counts_filtered_set(self):
        records = [product_record(f"b{i}", i, category="books") for i in range(3)]
        records += [product_record(f"t{i}", i, category="tools") for i in range(7)]
        service, _ = _setup(records)
        page = service.get_products(
            handle_product_queries({"query": "books", "limit": "2"})
        )
        assert page.total_pages == 2
        assert page.next_link == "?limit=2&page=2&query=books"
