"""CartOptimizer 테스트 (Fake LLM 클라이언트)"""

from __future__ import annotations

import json
from typing import Dict, List, Optional

import pytest

from src.core.exceptions import InvalidInputException, SelectionParseException, SelectionRequestException
from src.schemas.product_schema import IngredientCandidates
from src.services.cart_optimizer import CartOptimizer, build_system_prompt, reduce_candidates
from src.services.pricing import PricingConfig, finalize_cart


class FakeSelectionClient:
    def __init__(self, response: str = '{"carts": []}', error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.calls: List[Dict[str, str]] = []

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        self.calls.append({"system": system_prompt, "user": user_prompt})
        if self.error:
            raise self.error
        return self.response


class FixedRng:
    def uniform(self, a, b):
        return (a + b) / 2


def _item(ingredient, name, store, quantity=None, unit=None):
    item = {"ingredient": ingredient, "product": {"name": name, "store": store}}
    if quantity is not None:
        item["quantity"] = quantity
    if unit is not None:
        item["unit"] = unit
    return item


@pytest.fixture
def candidate_sets(make_product):
    return [
        IngredientCandidates(
            ingredient="leche",
            quantity=2,
            unit="l",
            products=[
                make_product("Leche Disco", store="disco", price=50, link="https://d/leche", brand="Conaprole"),
                make_product("Leche TI", store="tienda-inglesa"),
                make_product("Leche Tata", store="tata", price=49),
            ],
        ),
        IngredientCandidates(
            ingredient="arroz",
            quantity=1,
            unit="kg",
            products=[
                make_product("Arroz Disco", store="disco", price=70),
                make_product("Arroz TI", store="tienda-inglesa", price=75),
                make_product("Arroz Tata", store="tata"),
            ],
        ),
    ]


def _selection_response() -> str:
    payload = {
        "carts": [
            {"store": "tienda-inglesa", "storeName": "Tienda Inglesa", "items": [
                _item("leche", "Leche TI", "tienda-inglesa", 2, "l"),
                _item("arroz", "Arroz TI", "tienda-inglesa", 1, "kg"),
            ], "total": 0},
            {"store": "tata", "items": [
                _item("leche", "Leche Tata", "tata"),
                _item("arroz", "Arroz Tata", "tata"),
            ]},
            {"store": "disco", "storeName": "Disco", "items": [
                _item("leche", "Leche Disco", "disco"),
                _item("arroz", "Arroz Disco", "disco"),
            ], "total": 1},
        ]
    }
    return "Listo:\n```json\n" + json.dumps(payload) + "\n```"


@pytest.fixture
def optimizer_factory(store_configs):
    def _make(client: FakeSelectionClient) -> CartOptimizer:
        return CartOptimizer(client, store_configs, PricingConfig(20.0, 40.0), rng=FixedRng())

    return _make


@pytest.mark.asyncio
async def test_two_ingredient_scenario(candidate_sets, optimizer_factory):
    client = FakeSelectionClient(_selection_response())
    carts = await optimizer_factory(client).optimize(candidate_sets)

    assert len(client.calls) == 1
    # 합계 오름차순: disco 120, tata 49 + (70 + 30), tienda-inglesa (49 + 30) + 75
    assert [c.store for c in carts] == ["disco", "tata", "tienda-inglesa"]
    assert [c.total for c in carts] == [120.0, 149.0, 154.0]

    disco, tata, ti = carts
    assert disco.items[0].product.link == "https://d/leche"
    assert disco.items[0].product.brand == "Conaprole"
    assert not any(i.price_estimated for i in disco.items)

    assert tata.store_name == "Tata"
    assert tata.items[1].price_estimated is True
    assert tata.items[1].product.price_numeric == 100.0
    # 선택 응답에 없으면 후보 목록의 수량/단위 사용
    assert tata.items[0].quantity == 2
    assert tata.items[0].unit == "l"

    assert ti.items[0].price_estimated is True
    assert ti.items[0].product.price_numeric == 79.0
    assert ti.items[0].product.price == "$ 79"


@pytest.mark.asyncio
async def test_totals_are_recomputed_and_stable(candidate_sets, optimizer_factory):
    carts = await optimizer_factory(FakeSelectionClient(_selection_response())).optimize(candidate_sets)

    for cart in carts:
        priced = [i.product.price_numeric for i in cart.items if i.product.price_numeric]
        assert cart.total == round(sum(priced), 2)
        assert finalize_cart(cart) == cart


@pytest.mark.asyncio
async def test_enrichment_miss_keeps_stub(candidate_sets, optimizer_factory):
    response = json.dumps({"carts": [{"store": "disco", "items": [
        {"ingredient": "leche", "product": {"name": "Leche Inventada", "store": "disco", "priceNumeric": 60}},
    ]}]})
    carts = await optimizer_factory(FakeSelectionClient(response)).optimize(candidate_sets)

    item = carts[0].items[0]
    assert item.product.name == "Leche Inventada"
    assert item.product.store == "disco"
    assert item.product.link is None
    assert item.product.price_numeric == 60
    assert carts[0].total == 60.0


@pytest.mark.asyncio
async def test_enrichment_requires_same_store(candidate_sets, optimizer_factory):
    """같은 이름이어도 매장이 다르면 복원하지 않음"""
    response = json.dumps({"carts": [{"store": "tata", "items": [_item("leche", "Leche Disco", "tata")]}]})
    carts = await optimizer_factory(FakeSelectionClient(response)).optimize(candidate_sets)

    product = carts[0].items[0].product
    assert product.link is None
    # 가격이 없으므로 다른 매장(disco) 최저가 50 + 30으로 추정
    assert product.price_numeric == 80.0


@pytest.mark.asyncio
async def test_unpriced_item_without_reference(make_product, optimizer_factory):
    sets = [IngredientCandidates(ingredient="sal", products=[make_product("Sal", store="disco")])]
    response = json.dumps({"carts": [{"store": "disco", "items": [_item("sal", "Sal", "disco")]}]})

    carts = await optimizer_factory(FakeSelectionClient(response)).optimize(sets)

    assert carts[0].items[0].price_estimated is False
    assert carts[0].items[0].product.price_numeric is None
    assert carts[0].total == 0.0


@pytest.mark.asyncio
async def test_empty_carts_are_dropped(candidate_sets, optimizer_factory):
    response = json.dumps({"carts": [
        {"store": "disco", "items": []},
        {"store": "tata", "items": [_item("leche", "Leche Tata", "tata")]},
    ]})
    carts = await optimizer_factory(FakeSelectionClient(response)).optimize(candidate_sets)
    assert [c.store for c in carts] == ["tata"]


@pytest.mark.asyncio
async def test_equal_totals_follow_configured_order(make_product, optimizer_factory):
    sets = [IngredientCandidates(ingredient="pan", products=[
        make_product("Pan T", store="tata", price=30),
        make_product("Pan D", store="disco", price=30),
    ])]
    response = json.dumps({"carts": [
        {"store": "tata", "items": [_item("pan", "Pan T", "tata")]},
        {"store": "disco", "items": [_item("pan", "Pan D", "disco")]},
    ]})
    carts = await optimizer_factory(FakeSelectionClient(response)).optimize(sets)
    assert [c.store for c in carts] == ["disco", "tata"]


@pytest.mark.asyncio
async def test_empty_input_skips_llm(optimizer_factory):
    client = FakeSelectionClient()
    with pytest.raises(InvalidInputException):
        await optimizer_factory(client).optimize([])
    assert client.calls == []


@pytest.mark.asyncio
async def test_parse_error_propagates(candidate_sets, optimizer_factory):
    with pytest.raises(SelectionParseException):
        await optimizer_factory(FakeSelectionClient("Lo siento, no puedo ayudar.")).optimize(candidate_sets)


@pytest.mark.asyncio
async def test_request_error_propagates(candidate_sets, optimizer_factory):
    client = FakeSelectionClient(error=SelectionRequestException("HTTP 429"))
    with pytest.raises(SelectionRequestException):
        await optimizer_factory(client).optimize(candidate_sets)


@pytest.mark.asyncio
async def test_prompt_contains_reduced_products_only(candidate_sets, optimizer_factory):
    client = FakeSelectionClient()
    await optimizer_factory(client).optimize(candidate_sets)

    user_prompt = client.calls[0]["user"]
    assert "Leche Disco" in user_prompt
    assert "https://d/leche" not in user_prompt
    assert "Disco, Tienda Inglesa, Tata" in client.calls[0]["system"]


def test_reduce_candidates(candidate_sets):
    reduced = reduce_candidates(candidate_sets)
    dumped = reduced[0].products[0].model_dump()
    assert set(dumped) == {"name", "brand", "price", "store"}
    assert reduced[0].quantity == 2


def test_system_prompt_lists_configured_stores(store_configs):
    prompt = build_system_prompt(store_configs[:2])
    assert "Disco, Tienda Inglesa" in prompt
    assert "Tata" not in prompt


@pytest.mark.asyncio
async def test_enriched_products_round_trip(candidate_sets, optimizer_factory):
    """보강된 상품을 다시 후보로 넣어도 고정 필드는 그대로"""
    first = await optimizer_factory(FakeSelectionClient(_selection_response())).optimize(candidate_sets)

    enriched_sets = [
        IngredientCandidates(
            ingredient=c.ingredient,
            quantity=c.quantity,
            unit=c.unit,
            products=[i.product for cart in first for i in cart.items if i.ingredient == c.ingredient],
        )
        for c in candidate_sets
    ]
    second = await optimizer_factory(FakeSelectionClient(_selection_response())).optimize(enriched_sets)

    def fixed_fields(carts):
        return [
            (cart.store, cart.store_name, item.ingredient, item.quantity, item.unit,
             item.product.name, item.product.brand, item.product.link, item.product.store)
            for cart in carts
            for item in cart.items
        ]

    assert fixed_fields(second) == fixed_fields(first)
    assert [c.total for c in second] == [c.total for c in first]
    # 이미 가격이 있으므로 다시 추정하지 않음
    assert not any(i.price_estimated for cart in second for i in cart.items)
