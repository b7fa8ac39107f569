"""Store Adapter Protocol - 매장 어댑터 인터페이스

모든 매장 어댑터가 구현해야 할 공통 인터페이스를 정의합니다.
"""

from typing import List, Protocol

from src.schemas.product_schema import Product


class StoreAdapter(Protocol):
    """매장 어댑터 프로토콜

    구현 예시:
        class DiscoScraper(BaseStoreScraper):
            async def search(self, term: str) -> List[Product]:
                # 매장별 추출 로직
                ...
    """

    @property
    def store_key(self) -> str:
        ...

    async def search(self, term: str) -> List[Product]:
        """검색어 하나에 대한 정규화된 상품 목록

        네트워크/파싱/구조 오류는 모두 어댑터 안에서 로그 후 빈 목록으로 변환합니다.
        호출자 입장에서 '결과 없음'과 '매장 접속 불가'는 구분되지 않습니다.

        Args:
            term: 검색어 (비어있지 않은 문자열)

        Returns:
            List[Product]: 상품 목록 (실패 시 빈 목록)
        """
        ...
