"""Search Orchestrator - 매장 통합 검색 진입점

하나의 검색어에 대해 설정된 모든 매장 어댑터를 동시에 실행하고
(모든 태스크가 끝날 때까지 기다리는 settle-all join),
매장별 태깅/결과 상한 적용 후 설정 순서대로 병합합니다.
"""

import asyncio
from time import monotonic
from typing import Dict, List, Mapping

from src.core.exceptions import InvalidInputException
from src.core.logging import logger, sanitize_for_log
from src.core.stores import SearchConfig, StoreConfig
from src.crawlers.adapter import StoreAdapter
from src.schemas.product_schema import Product, SearchResponse, StoreSearchStatus
from src.utils.text_utils import normalize_search_term

from .result import StoreOutcome


class SearchOrchestrator:
    """매장 통합 검색 오케스트레이터

    - 매장 하나의 실패가 전체 검색을 실패시키지 않습니다.
    - 가장 느린 매장이 응답 시간을 결정합니다 (부분 응답 없음).
    - 병합 순서는 설정 순서 그대로이며 관련도/가격으로 재정렬하지 않습니다.
    """

    def __init__(self, adapters: Mapping[str, StoreAdapter], config: SearchConfig):
        """
        Args:
            adapters: 매장 키 -> 어댑터
            config: 매장 목록(순서, 결과 상한, 메타데이터 키)
        """
        if not config or not config.stores:
            raise ValueError("config must define at least one store")

        missing = [s.key for s in config.stores if s.key not in adapters]
        if missing:
            raise ValueError(f"No adapter configured for stores: {missing}")

        self.adapters = dict(adapters)
        self.config = config

    @property
    def stores(self) -> tuple:
        return self.config.stores

    async def search_all(self, term: str) -> SearchResponse:
        """모든 매장에서 검색

        Args:
            term: 검색어 (응답에는 그대로, 매장에는 공백 정리 후 전달)

        Returns:
            SearchResponse: 병합 결과 (모든 매장이 실패해도 success=True, products=[])

        Raises:
            InvalidInputException: 검색어가 없거나 비어있는 경우
        """
        if not isinstance(term, str) or not term.strip():
            raise InvalidInputException("q", "search term must be a non-empty string")

        normalized = normalize_search_term(term)
        started = monotonic()
        logger.info(f"[SEARCH] Searching '{sanitize_for_log(normalized)}' in {len(self.stores)} stores")

        outcomes = await asyncio.gather(
            *(self._run_store(store, normalized) for store in self.stores),
            return_exceptions=True,
        )

        products: List[Product] = []
        metadata: Dict[str, StoreSearchStatus] = {}
        for store, outcome in zip(self.stores, outcomes):
            if isinstance(outcome, BaseException):
                # _run_store가 잡지 못한 경우 (취소 등)
                logger.error(f"[SEARCH] Store task aborted: store={store.key}, error={type(outcome).__name__}")
                outcome = StoreOutcome.failed(store.key, outcome)
            products.extend(outcome.products)
            metadata[store.metadata_key] = StoreSearchStatus(count=outcome.count, success=outcome.success)

        summary = ", ".join(f"{key}={status.count}" for key, status in metadata.items())
        logger.info(
            f"[SEARCH] Results: {summary}, Total={len(products)} "
            f"(elapsed={(monotonic() - started) * 1000:.0f}ms)"
        )

        return SearchResponse(
            success=True,
            search_term=term,
            count=len(products),
            products=products,
            stores=metadata,
        )

    async def _run_store(self, store: StoreConfig, term: str) -> StoreOutcome:
        """매장 하나 실행. 예외는 이 매장의 실패로만 기록합니다."""
        started = monotonic()
        adapter = self.adapters[store.key]
        try:
            raw = await adapter.search(term)
        except Exception as e:
            elapsed_ms = (monotonic() - started) * 1000
            logger.error(f"[SEARCH] Error in {store.name}: {type(e).__name__}: {e}")
            return StoreOutcome.failed(store.key, e, elapsed_ms)

        elapsed_ms = (monotonic() - started) * 1000
        return StoreOutcome.succeeded(store.key, shape_store_products(store, raw or []), elapsed_ms)


def shape_store_products(store: StoreConfig, products: List[Product]) -> List[Product]:
    """매장 태깅 + 결과 상한 적용"""
    if store.result_cap is not None:
        products = products[: store.result_cap]
    return [p.model_copy(update={"store": store.key, "store_name": store.name}) for p in products]
