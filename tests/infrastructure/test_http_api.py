"""End-to-end tests for the HTTP API over the filesystem store."""

import pytest
from fastapi.testclient import TestClient

from shop.infrastructure.bootstrap import build_container
from shop.infrastructure.config import Settings
from shop.infrastructure.http.app import create_app
from shop.infrastructure.realtime.hub import RealtimeHub


@pytest.fixture
def client(tmp_path):
    settings = Settings(persist_mode="filesystem", data_dir=tmp_path)
    container = build_container(settings, RealtimeHub())
    return TestClient(create_app(container))


def _create_product(client, **overrides):
    body = {"name": "Widget", "price": 10, "stock": 3, "category": "tools"}
    body.update(overrides)
    r = client.post("/api/products", json=body)
    assert r.status_code == 201
    return r.json()["payload"]


class TestProducts:

    def test_create_and_get(self, client):
        product = _create_product(client)
        r = client.get(f"/api/products/{product['id']}")
        assert r.status_code == 200
        assert r.json() == product

    def test_create_invalid_returns_400(self, client):
        r = client.post("/api/products", json={"name": "Widget", "price": -5, "stock": 1})
        assert r.status_code == 400
        assert "negative" in r.json()["message"]

    @pytest.mark.parametrize("price", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_price_returns_400(self, client, price):
        r = client.post(
            "/api/products",
            content='{"name": "X", "price": %s, "stock": 1}' % price,
            headers={"Content-Type": "application/json"},
        )
        assert r.status_code == 400
        assert "finite" in r.json()["message"]
        assert client.get("/api/products").json()["payload"] == []

    def test_malformed_json_returns_400_with_message(self, client):
        r = client.post(
            "/api/products",
            content="{bad",
            headers={"Content-Type": "application/json"},
        )
        assert r.status_code == 400
        assert "message" in r.json()
        assert "detail" not in r.json()

    def test_next_link_keeps_category_with_reserved_characters(self, client):
        for i in range(3):
            _create_product(client, name=f"P{i}", category="Home & Garden")
        _create_product(client, name="Other", category="Home")
        first = client.get(
            "/api/products", params={"limit": 2, "query": "Home & Garden"}
        ).json()
        assert first["totalPages"] == 2
        second = client.get("/api/products" + first["nextLink"]).json()
        assert second["page"] == 2
        assert [p["category"] for p in second["payload"]] == ["Home & Garden"]

    def test_get_missing_returns_404(self, client):
        r = client.get("/api/products/nope")
        assert r.status_code == 404
        assert "not found" in r.json()["message"]

    def test_list_paginates(self, client):
        for i in range(5):
            _create_product(client, name=f"P{i}", price=i)
        r = client.get("/api/products", params={"limit": 2, "page": 3})
        body = r.json()
        assert len(body["payload"]) == 1
        assert body["hasNextPage"] is False
        assert body["prevLink"] == "?limit=2&page=2"

    def test_list_clamps_invalid_paging(self, client):
        _create_product(client)
        body = client.get("/api/products", params={"limit": "-1", "page": "0"}).json()
        assert body["page"] == 1
        assert len(body["payload"]) == 1

    def test_update(self, client):
        product = _create_product(client)
        r = client.put(f"/api/products/{product['id']}", json={"stock": 0})
        assert r.status_code == 200
        assert r.json()["payload"]["stock"] == 0

    def test_delete(self, client):
        product = _create_product(client)
        assert client.delete(f"/api/products/{product['id']}").status_code == 204
        assert client.get(f"/api/products/{product['id']}").status_code == 404


class TestCarts:

    def test_cart_flow(self, client):
        cart = client.post("/api/carts").json()["payload"]
        cid = cart["id"]
        assert cart["products"] == []

        client.post(f"/api/carts/{cid}/product/p1", json={"quantity": 2})
        r = client.post(f"/api/carts/{cid}/product/p1")
        assert r.json()["payload"]["products"] == [{"product": "p1", "quantity": 3}]

        r = client.put(f"/api/carts/{cid}/product/p1", json={"quantity": 5})
        assert r.json()["payload"]["products"] == [{"product": "p1", "quantity": 5}]

        assert client.delete(f"/api/carts/{cid}").status_code == 204
        assert client.get(f"/api/carts/{cid}").json()["products"] == []

    def test_replace_items(self, client):
        cid = client.post("/api/carts").json()["payload"]["id"]
        r = client.put(f"/api/carts/{cid}", json={"products": [{"product": "p2", "quantity": 1}]})
        assert r.status_code == 200
        assert r.json()["payload"]["products"] == [{"product": "p2", "quantity": 1}]

    def test_missing_cart_returns_404(self, client):
        assert client.get("/api/carts/nope").status_code == 404
        r = client.post("/api/carts/nope/product/p1", json={"quantity": 1})
        assert r.status_code == 404

    def test_invalid_quantity_returns_400(self, client):
        cid = client.post("/api/carts").json()["payload"]["id"]
        client.post(f"/api/carts/{cid}/product/p1")
        r = client.put(f"/api/carts/{cid}/product/p1", json={"quantity": 0})
        assert r.status_code == 400

    def test_set_quantity_for_absent_item_returns_404(self, client):
        cid = client.post("/api/carts").json()["payload"]["id"]
        r = client.put(f"/api/carts/{cid}/product/p1", json={"quantity": 2})
        assert r.status_code == 404


class TestRealtime:

    def test_listener_receives_catalog_on_connect_and_after_mutation(self, client):
        with client.websocket_connect("/ws") as ws:
            assert ws.receive_json() == {"event": "products", "payload": []}
            product = _create_product(client)
            message = ws.receive_json()
            assert message["event"] == "products"
            assert [p["id"] for p in message["payload"]] == [product["id"]]

    def test_closing_the_socket_releases_the_listener(self, client):
        hub = client.app.state.container.publisher
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            assert hub.listener_count == 1
        assert hub.listener_count == 0
        _create_product(client)


class TestSystem:

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok", "persist_mode": "filesystem"}

    def test_logger_test(self, client):
        r = client.get("/loggerTest")
        assert r.status_code == 200
        assert "Logs generated" in r.text


def test_database_mode_serves_the_same_contract():
    settings = Settings(persist_mode="database", database_url="sqlite://")
    client = TestClient(create_app(build_container(settings, RealtimeHub())))
    product = _create_product(client)
    assert client.get(f"/api/products/{product['id']}").json() == product
    assert client.get("/health").json()["persist_mode"] == "database"
