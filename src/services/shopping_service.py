"""쇼핑 리스트 파이프라인 - 재료 검색 + 장바구니 최적화"""

import asyncio
from typing import List, Sequence

from src.core.exceptions import GroceryCartException, InvalidInputException
from src.core.logging import logger
from src.engine.orchestrator import SearchOrchestrator
from src.schemas.product_schema import Cart, IngredientCandidates, IngredientRequirement

from .cart_optimizer import CartOptimizer


async def collect_candidates(
    orchestrator: SearchOrchestrator,
    requirements: Sequence[IngredientRequirement],
) -> List[IngredientCandidates]:
    """재료마다 통합 검색을 동시에 실행해 후보 목록 생성

    검색이 실패한 재료는 빈 후보 목록으로 남습니다 (순서는 입력 순서 유지).
    """

    async def search_one(req: IngredientRequirement) -> IngredientCandidates:
        try:
            response = await orchestrator.search_all(req.ingredient)
            products = response.products
        except GroceryCartException as e:
            logger.warning(f"[SHOPPING] Search failed for '{req.ingredient}': {e}")
            products = []
        return IngredientCandidates(
            ingredient=req.ingredient,
            quantity=req.quantity,
            unit=req.unit,
            products=products,
        )

    results = await asyncio.gather(*(search_one(r) for r in requirements))
    found = sum(1 for r in results if r.products)
    logger.info(f"[SHOPPING] Collected candidates: {found}/{len(results)} ingredients with products")
    return list(results)


async def build_carts(
    orchestrator: SearchOrchestrator,
    optimizer: CartOptimizer,
    requirements: Sequence[IngredientRequirement],
) -> List[Cart]:
    """재료 목록 -> 매장별 장바구니"""
    if not requirements:
        raise InvalidInputException("ingredients", "at least one ingredient is required")

    candidates = await collect_candidates(orchestrator, requirements)
    return await optimizer.optimize(candidates)
