"""Store Outcome - 매장별 검색 결과 표준 포맷

오케스트레이터가 매장 태스크 하나의 결과(성공/실패)를 독립적으로 담는 형식입니다.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from src.schemas.product_schema import Product


@dataclass
class StoreOutcome:
    """매장 하나의 검색 결과

    Attributes:
        store: 매장 키
        products: 태깅/상한 적용이 끝난 상품 목록
        success: 태스크가 예외 없이 끝났는지 여부 (상품 0개여도 True)
        elapsed_ms: 소요 시간 (밀리초)
        error_message: 실패 시 오류 메시지
    """

    store: str
    products: List[Product] = field(default_factory=list)
    success: bool = True
    elapsed_ms: float = 0.0
    error_message: Optional[str] = None

    @property
    def count(self) -> int:
        return len(self.products)

    @classmethod
    def succeeded(cls, store: str, products: List[Product], elapsed_ms: float) -> "StoreOutcome":
        return cls(store=store, products=products, success=True, elapsed_ms=elapsed_ms)

    @classmethod
    def failed(cls, store: str, error: BaseException, elapsed_ms: float = 0.0) -> "StoreOutcome":
        return cls(
            store=store,
            products=[],
            success=False,
            elapsed_ms=elapsed_ms,
            error_message=f"{type(error).__name__}: {error}",
        )
