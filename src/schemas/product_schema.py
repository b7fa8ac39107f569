"""Pydantic 스키마 정의 - 상품, 장바구니, API 응답

와이어 포맷은 camelCase(priceNumeric, imageUrl, storeName ...)이며,
입력은 snake_case/camelCase 모두 허용합니다.
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, List, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class StoreKey(str, Enum):
    """기본 제공 매장 식별자"""
    DISCO = "disco"
    TIENDA_INGLESA = "tienda-inglesa"
    TATA = "tata"


class CamelModel(BaseModel):
    """camelCase 별칭 공통 베이스"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Product(CamelModel):
    """한 매장의 상품 하나"""
    name: Optional[str] = Field(None, description="상품명")
    brand: Optional[str] = Field(None, description="브랜드")
    price: Optional[str] = Field(None, description="매장 표기 그대로의 가격 문자열")
    price_numeric: Optional[float] = Field(None, description="정규화된 가격")
    description: Optional[str] = Field(None, description="추가 설명")
    image_url: Optional[str] = Field(None, description="이미지 절대 URL")
    link: Optional[str] = Field(None, description="상품 상세 절대 URL")
    availability: Optional[str] = Field(None, description="재고 표기 (Tienda Inglesa, Tata)")
    store: Optional[str] = Field(None, description="매장 키 (disco | tienda-inglesa | tata)")
    store_name: Optional[str] = Field(None, description="매장 표시명")


class ReducedProduct(CamelModel):
    """LLM 프롬프트용 축소 상품 (프롬프트 크기 제한)"""
    name: Optional[str] = None
    brand: Optional[str] = None
    price: Optional[str] = None
    store: Optional[str] = None


class IngredientRequirement(CamelModel):
    """식단에서 넘어온 재료 한 줄"""
    ingredient: str = Field(..., min_length=1, description="재료명")
    quantity: Optional[float] = Field(None, description="필요 수량")
    unit: Optional[str] = Field(None, description="단위 (g, ml, unidad ...)")

    @field_validator("ingredient")
    @classmethod
    def validate_ingredient(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("ingredient must not be blank")
        return v.strip()


class IngredientCandidates(IngredientRequirement):
    """재료 하나에 대해 매장별로 찾은 후보 상품 목록 (Candidate Set)"""
    products: List[Product] = Field(default_factory=list)


class ReducedIngredientCandidates(IngredientRequirement):
    products: List[ReducedProduct] = Field(default_factory=list)


class CartItem(CamelModel):
    """요구 재료와 선택된 상품의 결합"""
    ingredient: str
    quantity: Optional[float] = None
    unit: Optional[str] = None
    product: Product
    price_estimated: bool = Field(False, description="다른 매장 가격으로 추정된 가격인지 여부")


class Cart(CamelModel):
    """매장별 장바구니"""
    store: str
    store_name: Optional[str] = None
    items: List[CartItem] = Field(default_factory=list)
    total: float = Field(0.0, ge=0, description="항목 가격 합계 (소수점 둘째 자리)")


class StoreSearchStatus(CamelModel):
    """매장별 검색 메타데이터"""
    count: int = Field(..., ge=0)
    success: bool


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SearchResponse(CamelModel):
    """통합 검색 응답"""
    success: bool = True
    search_term: str
    count: int = Field(..., ge=0)
    products: List[Product]
    stores: Dict[str, StoreSearchStatus]
    timestamp: str = Field(default_factory=_utcnow_iso)


class OptimizeResponse(CamelModel):
    """장바구니 최적화 응답"""
    success: bool = True
    carts: List[Cart]
    timestamp: str = Field(default_factory=_utcnow_iso)


class StorePriceSummary(CamelModel):
    store: str
    store_name: Optional[str] = None
    count: int = Field(..., ge=0)
    average_price: float = Field(0.0, ge=0)


class StoreComparison(CamelModel):
    """매장별 평균 가격 비교"""
    search_term: str
    cheapest_store: str = Field(..., description="가장 저렴한 매장 키, 비교 불가 시 'equal'")
    stores: List[StorePriceSummary]
    timestamp: str = Field(default_factory=_utcnow_iso)


class ErrorResponse(BaseModel):
    """서버/요청 오류 응답"""
    success: bool = False
    error: str
    message: str
    details: Optional[str] = None


class InputErrorResponse(BaseModel):
    """검색어 누락 등 클라이언트 오류 응답"""
    error: str
    message: str
    example: Optional[str] = None


class HealthResponse(BaseModel):
    """헬스 체크 응답"""
    status: str
    timestamp: datetime
    version: str
    stores: List[str]
