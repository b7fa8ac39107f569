"""Cart Optimizer - 재료별 후보 상품 -> 매장별 장바구니

1. 축소(reduction): 프롬프트 크기 제한을 위해 name/brand/price/store만 남김
2. 선택(selection): LLM 호출 1회
3. 파싱(parsing): 펜스/설명문이 섞인 응답에서 JSON 객체 추출
4. 복원(enrichment): (name, store) 정확 일치로 원본 상품 복원
5. 가격 보정(imputation) 및 합계 재계산
"""

import json
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from src.core.exceptions import InvalidInputException
from src.core.logging import logger
from src.core.stores import StoreConfig, default_store_configs
from src.schemas.product_schema import (
    Cart,
    CartItem,
    IngredientCandidates,
    Product,
    ReducedIngredientCandidates,
    ReducedProduct,
)

from .llm_client import SelectionClient
from .pricing import PricingConfig, finalize_cart, has_price, impute_price
from .selection_parser import SelectedCart, SelectedItem, parse_selection


@dataclass
class OptimizationReport:
    """최적화 1회 요약 (로그용)"""
    ingredients: int = 0
    carts: int = 0
    items: int = 0
    enrichment_misses: int = 0
    imputed: int = 0
    unpriced: int = 0

    def summary(self) -> str:
        return (
            f"ingredients={self.ingredients}, carts={self.carts}, items={self.items}, "
            f"enrichment_misses={self.enrichment_misses}, imputed={self.imputed}, unpriced={self.unpriced}"
        )


def reduce_candidates(candidate_sets: Sequence[IngredientCandidates]) -> List[ReducedIngredientCandidates]:
    """프롬프트용 축소 후보 목록"""
    return [
        ReducedIngredientCandidates(
            ingredient=c.ingredient,
            quantity=c.quantity,
            unit=c.unit,
            products=[
                ReducedProduct(name=p.name, brand=p.brand, price=p.price, store=p.store)
                for p in c.products
            ],
        )
        for c in candidate_sets
    ]


def build_system_prompt(stores: Sequence[StoreConfig]) -> str:
    names = ", ".join(s.name for s in stores)
    return (
        "Sos un asistente de compras experto en Uruguay. Tu tarea es seleccionar el mejor "
        f"producto de cada supermercado ({names}) para cada ingrediente.\n\n"
        "Criterios:\n"
        "1. Mejor relación calidad-precio\n"
        "2. Cantidad apropiada\n"
        "3. Disponibilidad\n"
        "4. Preferir opciones frescas cuando corresponda\n\n"
        "Respondé SOLO con JSON válido."
    )


def build_user_prompt(reduced: Sequence[ReducedIngredientCandidates], stores: Sequence[StoreConfig]) -> str:
    payload = json.dumps(
        [r.model_dump(by_alias=True) for r in reduced],
        ensure_ascii=False,
        indent=2,
    )
    first = stores[0] if stores else None
    store_keys = ", ".join(s.key for s in stores)
    skeleton = (
        "{\n"
        '  "carts": [\n'
        "    {\n"
        f'      "store": "{first.key if first else "store"}",\n'
        f'      "storeName": "{first.name if first else "Store"}",\n'
        '      "items": [\n'
        "        {\n"
        '          "ingredient": "nombre del ingrediente original",\n'
        '          "quantity": cantidad_solicitada,\n'
        '          "unit": "unidad",\n'
        '          "product": { "name": "...", "brand": "...", "price": "...", "store": "..." }\n'
        "        }\n"
        "      ]\n"
        "    }\n"
        "  ]\n"
        "}"
    )
    return (
        f"Ingredientes y productos disponibles:\n{payload}\n\n"
        f"Devolvé un JSON con este formato exacto:\n{skeleton}\n\n"
        "IMPORTANTE:\n"
        f"- Creá un carrito por cada tienda ({store_keys})\n"
        "- Para cada ingrediente, seleccioná el MEJOR producto de esa tienda\n"
        "- Si una tienda no tiene productos para un ingrediente, omitilo del carrito de esa tienda\n"
        "- Copiá name y store del producto EXACTAMENTE como aparecen en la lista\n"
        "- Solo incluí carritos que tengan al menos 1 item"
    )


class CartOptimizer:
    """LLM 선택 + 결정적 후처리(복원, 가격 보정, 합계, 정렬)"""

    def __init__(
        self,
        selection_client: SelectionClient,
        store_configs: Optional[Sequence[StoreConfig]] = None,
        pricing: Optional[PricingConfig] = None,
        rng: Optional[random.Random] = None,
    ):
        self.selection_client = selection_client
        self.store_configs = tuple(store_configs or default_store_configs())
        self.pricing = pricing or PricingConfig.from_settings()
        self.rng = rng or random.Random()
        self._order = {s.key: i for i, s in enumerate(self.store_configs)}
        self._names = {s.key: s.name for s in self.store_configs}

    async def optimize(self, candidate_sets: Sequence[IngredientCandidates]) -> List[Cart]:
        """재료별 후보 -> 합계 오름차순 장바구니 목록

        Raises:
            InvalidInputException: 후보 목록이 비어있는 경우 (LLM 호출 전)
            SelectionRequestException: LLM 호출 실패
            SelectionParseException: 응답 해석 실패
        """
        if not candidate_sets:
            raise InvalidInputException("ingredients", "at least one ingredient is required")

        report = OptimizationReport(ingredients=len(candidate_sets))
        logger.info(f"[OPTIMIZER] Optimizing selection for {len(candidate_sets)} ingredients")

        reduced = reduce_candidates(candidate_sets)
        raw = await self.selection_client.complete(
            build_system_prompt(self.store_configs),
            build_user_prompt(reduced, self.store_configs),
        )
        selection = parse_selection(raw)

        by_ingredient = self._index_candidates(candidate_sets)
        carts: List[Cart] = []
        for selected in selection.carts:
            cart = self._build_cart(selected, by_ingredient, report)
            if not cart.items:
                logger.debug(f"[OPTIMIZER] Dropping empty cart: store={selected.store}")
                continue
            carts.append(cart)

        carts = self.order_carts(carts)
        report.carts = len(carts)
        logger.info(f"[OPTIMIZER] Done: {report.summary()}")
        return carts

    def order_carts(self, carts: Sequence[Cart]) -> List[Cart]:
        """설정된 매장 순서로 배치 후 합계 기준 안정 정렬 (첫 번째가 최저가)"""
        placed = sorted(carts, key=lambda c: self._order.get(c.store, len(self._order)))
        return sorted(placed, key=lambda c: c.total)

    @staticmethod
    def _index_candidates(candidate_sets: Sequence[IngredientCandidates]) -> Dict[str, IngredientCandidates]:
        index: Dict[str, IngredientCandidates] = {}
        for c in candidate_sets:
            index.setdefault(c.ingredient, c)
            index.setdefault(c.ingredient.casefold(), c)
        return index

    def _build_cart(
        self,
        selected: SelectedCart,
        by_ingredient: Dict[str, IngredientCandidates],
        report: OptimizationReport,
    ) -> Cart:
        items: List[CartItem] = []
        for sel_item in selected.items:
            candidates = by_ingredient.get(sel_item.ingredient) or by_ingredient.get(
                sel_item.ingredient.strip().casefold()
            )
            item = self._enrich(sel_item, selected.store, candidates, report)

            pool = candidates.products if candidates else []
            was_priced = has_price(item.product)
            item = impute_price(item, pool, self.pricing, self.rng)
            if item.price_estimated:
                report.imputed += 1
            elif not was_priced:
                report.unpriced += 1
            items.append(item)

        report.items += len(items)
        cart = Cart(
            store=selected.store,
            store_name=selected.store_name or self._names.get(selected.store),
            items=items,
        )
        return finalize_cart(cart)

    def _enrich(
        self,
        sel_item: SelectedItem,
        cart_store: str,
        candidates: Optional[IngredientCandidates],
        report: OptimizationReport,
    ) -> CartItem:
        """선택된 축소 상품 -> 원본 상품 (같은 재료 후보 안에서 name+store 정확 일치)"""
        stub = sel_item.product
        store = stub.store or cart_store

        match: Optional[Product] = None
        if candidates is not None:
            match = next(
                (p for p in candidates.products if p.name == stub.name and p.store == store),
                None,
            )

        if match is None:
            report.enrichment_misses += 1
            logger.warning(
                f"[ENRICHMENT_MISS] ingredient='{sel_item.ingredient}', store={store}, name='{stub.name}'"
            )
            product = Product(
                name=stub.name,
                brand=stub.brand,
                price=stub.price,
                price_numeric=stub.price_numeric,
                store=store,
                store_name=self._names.get(store),
            )
        else:
            product = match

        return CartItem(
            ingredient=sel_item.ingredient,
            quantity=sel_item.quantity if sel_item.quantity is not None else (candidates.quantity if candidates else None),
            unit=sel_item.unit or (candidates.unit if candidates else None),
            product=product,
        )
