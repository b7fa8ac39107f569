"""API 테스트 (의존성 override, 외부 호출 없음)"""

from __future__ import annotations

import json
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from src.api.routes import get_cart_optimizer, get_orchestrator
from src.app import create_app
from src.engine import SearchOrchestrator
from src.schemas.product_schema import Product
from src.services.cart_optimizer import CartOptimizer
from src.services.pricing import PricingConfig


class FakeAdapter:
    def __init__(self, store_key: str, products: Optional[List[Product]] = None, error: Optional[Exception] = None):
        self.store_key = store_key
        self.products = products or []
        self.error = error

    async def search(self, term: str) -> List[Product]:
        if self.error:
            raise self.error
        return list(self.products)


class FakeSelectionClient:
    def __init__(self, response: str = '{"carts": []}'):
        self.response = response
        self.calls = 0

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        self.calls += 1
        return self.response


class BrokenOrchestrator:
    stores = ()

    async def search_all(self, term: str):
        raise RuntimeError("unexpected")


@pytest.fixture
def orchestrator(search_config, make_product) -> SearchOrchestrator:
    adapters = {
        "disco": FakeAdapter("disco", [make_product("Galletitas Maria", price=89.5, link="https://d/maria")]),
        "tienda-inglesa": FakeAdapter("tienda-inglesa", error=RuntimeError("down")),
        "tata": FakeAdapter("tata", [make_product("Galletitas Tata", price=95)]),
    }
    return SearchOrchestrator(adapters, search_config)


@pytest.fixture
def selection_client() -> FakeSelectionClient:
    return FakeSelectionClient()


@pytest.fixture
def client(orchestrator, selection_client, store_configs):
    app = create_app()
    optimizer = CartOptimizer(selection_client, store_configs, PricingConfig())
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    app.dependency_overrides[get_cart_optimizer] = lambda: optimizer
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["stores"] == ["disco", "tienda-inglesa", "tata"]

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "version" in response.json()


class TestProductSearch:
    def test_success(self, client):
        response = client.get("/api/products/search", params={"q": "galletitas"})

        assert response.status_code == 200
        assert response.headers["cache-control"] == "public, s-maxage=300, stale-while-revalidate=600"
        data = response.json()
        assert data["success"] is True
        assert data["searchTerm"] == "galletitas"
        assert data["count"] == 2
        assert data["stores"]["tiendaInglesa"] == {"count": 0, "success": False}
        assert data["stores"]["disco"] == {"count": 1, "success": True}
        assert data["products"][0]["priceNumeric"] == 89.5
        assert data["products"][0]["storeName"] == "Disco"
        assert data["products"][0]["imageUrl"] is None
        assert "timestamp" in data

    def test_missing_term(self, client):
        response = client.get("/api/products/search")
        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "Missing search term"
        assert data["example"] == "/api/products/search?q=galletitas"

    def test_blank_term(self, client):
        response = client.get("/api/products/search", params={"q": "   "})
        assert response.status_code == 400
        assert response.json()["error"] == "Empty search term"

    def test_unexpected_error(self, client):
        client.app.dependency_overrides[get_orchestrator] = lambda: BrokenOrchestrator()
        response = client.get("/api/products/search", params={"q": "galletitas"})

        assert response.status_code == 500
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "Internal server error"
        assert data["details"] == "unexpected"

    def test_compare(self, client):
        response = client.get("/api/products/compare", params={"q": "galletitas"})
        assert response.status_code == 200
        data = response.json()
        assert data["cheapestStore"] == "disco"
        assert [s["store"] for s in data["stores"]] == ["disco", "tienda-inglesa", "tata"]


def _candidates_body():
    return [
        {
            "ingredient": "galletitas",
            "quantity": 1,
            "unit": "paquete",
            "products": [
                {"name": "Galletitas Maria", "price": "$ 89,50", "priceNumeric": 89.5, "store": "disco"},
                {"name": "Galletitas Tata", "price": "$ 95", "priceNumeric": 95, "store": "tata"},
            ],
        }
    ]


class TestOptimize:
    def test_success(self, client, selection_client):
        selection_client.response = json.dumps({"carts": [
            {"store": "tata", "items": [{"ingredient": "galletitas", "product": {"name": "Galletitas Tata", "store": "tata"}}]},
            {"store": "disco", "items": [{"ingredient": "galletitas", "product": {"name": "Galletitas Maria", "store": "disco"}}]},
        ]})

        response = client.post("/api/shopping-list/optimize", json=_candidates_body())

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert [c["store"] for c in data["carts"]] == ["disco", "tata"]
        assert data["carts"][0]["total"] == 89.5
        assert data["carts"][0]["storeName"] == "Disco"
        assert data["carts"][0]["items"][0]["priceEstimated"] is False

    def test_wrapped_body(self, client, selection_client):
        response = client.post("/api/shopping-list/optimize", json={"ingredientsWithProducts": _candidates_body()})
        assert response.status_code == 200
        assert response.json()["carts"] == []
        assert selection_client.calls == 1

    @pytest.mark.parametrize("body", [[], {}, {"ingredientsWithProducts": []}, "leche", [{"products": []}]])
    def test_invalid_request(self, client, selection_client, body):
        response = client.post("/api/shopping-list/optimize", json=body)

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["error"] == "Invalid request"
        assert selection_client.calls == 0

    def test_non_json_body(self, client):
        response = client.post(
            "/api/shopping-list/optimize",
            content=b"not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.status_code == 400

    def test_parse_error(self, client, selection_client):
        selection_client.response = "No tengo una respuesta en JSON."
        response = client.post("/api/shopping-list/optimize", json=_candidates_body())

        assert response.status_code == 500
        data = response.json()
        assert data["error"] == "Parse error"
        assert data["success"] is False


class TestBuild:
    def test_build(self, client, selection_client):
        selection_client.response = json.dumps({"carts": [
            {"store": "disco", "items": [{"ingredient": "galletitas", "product": {"name": "Galletitas Maria", "store": "disco"}}]},
        ]})
        response = client.post("/api/shopping-list/build", json=[{"ingredient": "galletitas", "quantity": 1}])

        assert response.status_code == 200
        cart = response.json()["carts"][0]
        assert cart["items"][0]["product"]["link"] == "https://d/maria"
        assert cart["total"] == 89.5

    def test_build_invalid(self, client, selection_client):
        response = client.post("/api/shopping-list/build", json=[{"ingredient": "  "}])
        assert response.status_code == 400
        assert selection_client.calls == 0
