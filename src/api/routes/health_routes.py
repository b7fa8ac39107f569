"""헬스 체크 엔드포인트"""
from datetime import datetime

from fastapi import APIRouter, Depends

from src import __version__
from src.api.routes.product_routes import get_search_config
from src.core.stores import SearchConfig
from src.schemas.product_schema import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(config: SearchConfig = Depends(get_search_config)):
    """
    헬스 체크 엔드포인트

    - 서버 상태
    - 설정된 매장 목록 (외부 매장 접속 여부는 확인하지 않음)
    """
    return HealthResponse(
        status="ok",
        timestamp=datetime.now(),
        version=__version__,
        stores=list(config.keys),
    )


@router.get("/")
async def root():
    """루트 엔드포인트"""
    return {
        "service": "Comparador de supermercados",
        "version": __version__,
        "docs": "/docs"
    }
