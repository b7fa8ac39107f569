"""매장 스크레이퍼 공통 베이스 - 네트워크 경계와 실패 흡수

URL 구성/파싱은 매장별 서브클래스가, fetch와 예외 처리는 베이스가 담당합니다.
파싱 로직은 네트워크와 분리된 순수 함수(각 매장의 parsing 모듈)로 둡니다.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from src.core.exceptions import ParsingException, SourceUnavailableException
from src.core.logging import logger, sanitize_for_log
from src.core.stores import StoreConfig
from src.crawlers.http_client import SharedHttpClient, get_shared_http_client
from src.schemas.product_schema import Product


HTML_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8"
JSON_ACCEPT = "application/json, text/plain, */*"


class BaseStoreScraper:
    """매장 어댑터 공통 구현

    search()는 절대 예외를 던지지 않습니다:
    - SourceUnavailableException: HTTP 오류/네트워크 오류/타임아웃
    - ParsingException: 응답 구조/디코딩 오류
    - 그 외 예상 못한 예외
    모두 원인을 로그로 남기고 빈 목록을 반환합니다.
    """

    log_tag = "SCRAPER"
    accept = HTML_ACCEPT

    def __init__(self, config: StoreConfig, http_client: Optional[SharedHttpClient] = None):
        self.config = config
        self.http_client = http_client or get_shared_http_client()

    @property
    def store_key(self) -> str:
        return self.config.key

    @property
    def base_url(self) -> str:
        return self.config.base_url.rstrip("/")

    def build_search_url(self, term: str) -> str:
        raise NotImplementedError

    def parse(self, body: str) -> List[Product]:
        raise NotImplementedError

    def request_headers(self) -> Dict[str, str]:
        return {"Accept": self.accept}

    async def search(self, term: str) -> List[Product]:
        tag = self.log_tag
        if not term or not term.strip():
            logger.warning(f"[{tag}] Empty search term, skipping")
            return []

        try:
            url = self.build_search_url(term.strip())
            logger.info(f"[{tag}] Scraping: {sanitize_for_log(url, max_length=200)}")
            body = await self._fetch(url)
            products = self._finalize(self.parse(body))
            logger.info(f"[{tag}] Found {len(products)} products")
            return products

        except SourceUnavailableException as e:
            logger.error(f"[{tag}] {e}")
            return []
        except ParsingException as e:
            logger.error(f"[{tag}] {e}")
            return []
        except Exception as e:
            logger.error(f"[{tag}] Unexpected error: {type(e).__name__}: {e}", exc_info=True)
            return []

    async def _fetch(self, url: str) -> str:
        res = await self.http_client.get_text(
            url,
            timeout_s=self.config.timeout_s,
            headers=self.request_headers(),
        )
        if res.status is None:
            if res.timed_out:
                reason = f"timeout after {self.config.timeout_s:.0f}s"
            else:
                reason = f"network error ({res.error})"
            raise SourceUnavailableException(self.store_key, reason)
        if not res.ok:
            raise SourceUnavailableException(
                self.store_key,
                f"HTTP {res.status}",
                details={"store": self.store_key, "status": res.status},
            )
        return res.text

    def _finalize(self, products: List[Product]) -> List[Product]:
        """이름 없는 상품 제거, (이름, 링크) 중복 제거, 매장 태깅"""
        seen: set[tuple[Optional[str], Optional[str]]] = set()
        result: List[Product] = []
        for product in products:
            if not product.name:
                continue
            key = (product.name, product.link)
            if key in seen:
                continue
            seen.add(key)
            result.append(
                product.model_copy(update={"store": self.config.key, "store_name": self.config.name})
            )
        return result
