"""Product Routes - 매장 통합 검색 / 매장 비교

HTTP Layer는 요청 검증과 응답 변환만 담당하고 검색은 SearchOrchestrator에 위임합니다.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from src.core.config import settings
from src.core.exceptions import InvalidInputException
from src.core.logging import logger, sanitize_for_log
from src.core.stores import SearchConfig, default_search_config
from src.crawlers import build_adapters
from src.crawlers.http_client import get_shared_http_client
from src.engine import SearchOrchestrator
from src.schemas.product_schema import (
    ErrorResponse,
    InputErrorResponse,
    SearchResponse,
    StoreComparison,
)
from src.services.product_comparison import compare_stores

router = APIRouter(prefix="/api/products", tags=["products"])

SEARCH_EXAMPLE = "/api/products/search?q=galletitas"

# 싱글톤
_search_config: Optional[SearchConfig] = None
_orchestrator: Optional[SearchOrchestrator] = None


def get_search_config() -> SearchConfig:
    """SearchConfig 싱글톤 (설정 파일/환경변수 기반)"""
    global _search_config
    if _search_config is None:
        _search_config = default_search_config()
    return _search_config


def get_orchestrator(config: SearchConfig = Depends(get_search_config)) -> SearchOrchestrator:
    """SearchOrchestrator 싱글톤

    매장 어댑터는 공유 HTTP 클라이언트를 함께 사용합니다.
    """
    global _orchestrator
    if _orchestrator is None:
        adapters = build_adapters(config.stores, http_client=get_shared_http_client())
        _orchestrator = SearchOrchestrator(adapters, config)
    return _orchestrator


def cache_control_header() -> str:
    return (
        f"public, s-maxage={settings.search_cache_max_age_s}, "
        f"stale-while-revalidate={settings.search_stale_while_revalidate_s}"
    )


def validate_search_term(q: Optional[str]) -> Optional[JSONResponse]:
    """검색어 검증. 문제가 있으면 400 응답, 없으면 None."""
    if q is None:
        return JSONResponse(
            status_code=400,
            content=InputErrorResponse(
                error="Missing search term",
                message="Por favor proporciona un término de búsqueda usando el parámetro 'q'",
                example=SEARCH_EXAMPLE,
            ).model_dump(),
        )
    if not q.strip():
        return JSONResponse(
            status_code=400,
            content=InputErrorResponse(
                error="Empty search term",
                message="El término de búsqueda no puede estar vacío",
            ).model_dump(exclude_none=True),
        )
    return None


def internal_error(message: str, e: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            message=message,
            details=str(e) or type(e).__name__,
        ).model_dump(),
    )


@router.get(
    "/search",
    response_model=SearchResponse,
    responses={400: {"model": InputErrorResponse}, 500: {"model": ErrorResponse}},
)
async def search_products(
    q: Optional[str] = Query(None, description="검색어"),
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
):
    """매장 통합 상품 검색

    일부(또는 전체) 매장이 실패해도 200이며, 매장별 성공 여부는 stores 메타데이터에 담깁니다.
    """
    invalid = validate_search_term(q)
    if invalid is not None:
        return invalid

    logger.info(f"[API] Product search: q='{sanitize_for_log(q)}'")
    try:
        result = await orchestrator.search_all(q)
    except InvalidInputException as e:
        logger.warning(f"[API] Invalid search term: {e}")
        return JSONResponse(
            status_code=400,
            content=InputErrorResponse(error="Empty search term", message=e.message).model_dump(exclude_none=True),
        )
    except Exception as e:
        logger.error(f"[API] Product search failed: q='{sanitize_for_log(q)}'", exc_info=True)
        return internal_error("Ocurrió un error al buscar productos", e)

    return JSONResponse(
        content=result.model_dump(mode="json", by_alias=True),
        headers={"Cache-Control": cache_control_header()},
    )


@router.get(
    "/compare",
    response_model=StoreComparison,
    responses={400: {"model": InputErrorResponse}, 500: {"model": ErrorResponse}},
)
async def compare_products(
    q: Optional[str] = Query(None, description="검색어"),
    orchestrator: SearchOrchestrator = Depends(get_orchestrator),
):
    """매장별 평균 가격 비교 (가장 저렴한 매장, 비교 불가 시 'equal')"""
    invalid = validate_search_term(q)
    if invalid is not None:
        return invalid

    try:
        result = await orchestrator.search_all(q)
    except Exception as e:
        logger.error(f"[API] Store comparison failed: q='{sanitize_for_log(q)}'", exc_info=True)
        return internal_error("Ocurrió un error al comparar supermercados", e)

    comparison = compare_stores(result.search_term, result.products, orchestrator.stores)
    logger.info(f"[API] Store comparison: q='{sanitize_for_log(q)}', cheapest={comparison.cheapest_store}")
    return JSONResponse(
        content=comparison.model_dump(mode="json", by_alias=True),
        headers={"Cache-Control": cache_control_header()},
    )
