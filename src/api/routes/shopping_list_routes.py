"""Shopping List Routes - 매장별 장바구니 최적화"""

import json
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import TypeAdapter, ValidationError

from src.api.routes.product_routes import get_orchestrator, get_search_config
from src.core.exceptions import InvalidInputException, SelectionParseException
from src.core.logging import logger
from src.core.stores import SearchConfig
from src.engine import SearchOrchestrator
from src.schemas.product_schema import (
    ErrorResponse,
    IngredientCandidates,
    IngredientRequirement,
    OptimizeResponse,
)
from src.services.cart_optimizer import CartOptimizer
from src.services.llm_client import OpenAISelectionClient
from src.services.pricing import PricingConfig
from src.services.shopping_service import build_carts

router = APIRouter(prefix="/api/shopping-list", tags=["shopping-list"])

# 기존 클라이언트 요청 형태: {"ingredientsWithProducts": [...]}
WRAPPED_KEY = "ingredientsWithProducts"

_candidates_adapter = TypeAdapter(List[IngredientCandidates])
_requirements_adapter = TypeAdapter(List[IngredientRequirement])

# 싱글톤
_cart_optimizer: Optional[CartOptimizer] = None


def get_cart_optimizer(config: SearchConfig = Depends(get_search_config)) -> CartOptimizer:
    """CartOptimizer 싱글톤"""
    global _cart_optimizer
    if _cart_optimizer is None:
        _cart_optimizer = CartOptimizer(
            selection_client=OpenAISelectionClient(),
            store_configs=config.stores,
            pricing=PricingConfig.from_settings(),
        )
    return _cart_optimizer


def invalid_request(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error="Invalid request", message=message).model_dump(exclude_none=True),
    )


def optimize_error(e: Exception) -> JSONResponse:
    """최적화 단계 예외 -> 500 응답 (응답 해석 실패는 Parse error로 구분)"""
    if isinstance(e, SelectionParseException):
        logger.error(f"[API] Selection parse failed: {e}")
        body = ErrorResponse(
            error="Parse error",
            message="Error al procesar la respuesta del LLM",
            details=e.message,
        )
    else:
        logger.error(f"[API] Optimization failed: {type(e).__name__}: {e}", exc_info=True)
        body = ErrorResponse(
            error="Internal server error",
            message="Ocurrió un error al optimizar la selección de productos",
            details=str(e) or type(e).__name__,
        )
    return JSONResponse(status_code=500, content=body.model_dump())


async def read_items(request: Request, adapter: TypeAdapter, wrapped_key: Optional[str] = None) -> Any:
    """요청 본문에서 비어있지 않은 배열을 읽어 검증

    Raises:
        InvalidInputException: JSON이 아니거나 배열이 아니거나 비어있거나 항목이 잘못된 경우
    """
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidInputException("body", "request body must be valid JSON")

    if wrapped_key and isinstance(body, dict):
        body = body.get(wrapped_key)

    if not isinstance(body, list) or not body:
        raise InvalidInputException("body", "expected a non-empty array")

    try:
        return adapter.validate_python(body)
    except ValidationError as e:
        raise InvalidInputException("body", f"invalid item: {e.errors()[0]['msg']}")


@router.post(
    "/optimize",
    response_model=OptimizeResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def optimize_shopping_list(
    request: Request,
    optimizer: CartOptimizer = Depends(get_cart_optimizer),
):
    """재료별 후보 상품 -> 매장별 장바구니 (합계 오름차순)

    본문: IngredientCandidates 배열 또는 {"ingredientsWithProducts": [...]}
    """
    try:
        candidate_sets = await read_items(request, _candidates_adapter, WRAPPED_KEY)
    except InvalidInputException as e:
        logger.warning(f"[API] Invalid optimize request: {e}")
        return invalid_request("Se requiere un array de ingredientes con sus productos")

    logger.info(f"[API] Optimizing selection for {len(candidate_sets)} ingredients")
    try:
        carts = await optimizer.optimize(candidate_sets)
    except InvalidInputException as e:
        return invalid_request(e.message)
    except Exception as e:
        return optimize_error(e)

    response = OptimizeResponse(carts=carts)
    return JSONResponse(content=response.model_dump(mode="json", by_alias=True))


@router.post(
    "/build",
    response_model=OptimizeResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def build_shopping_list(
    request: Request,
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
    optimizer: CartOptimizer = Depends(get_cart_optimizer),
):
    """재료 목록(IngredientRequirement 배열) -> 매장 검색 -> 장바구니 최적화"""
    try:
        requirements = await read_items(request, _requirements_adapter)
    except InvalidInputException as e:
        logger.warning(f"[API] Invalid build request: {e}")
        return invalid_request("Se requiere un array de ingredientes")

    logger.info(f"[API] Building shopping list for {len(requirements)} ingredients")
    try:
        carts = await build_carts(orchestrator, optimizer, requirements)
    except InvalidInputException as e:
        return invalid_request(e.message)
    except Exception as e:
        return optimize_error(e)

    response = OptimizeResponse(carts=carts)
    return JSONResponse(content=response.model_dump(mode="json", by_alias=True))
