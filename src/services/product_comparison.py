"""매장별 상품 비교 유틸리티 (순수 함수)"""

from typing import Dict, List, Optional, Sequence

from src.core.stores import StoreConfig
from src.schemas.product_schema import Product, StoreComparison, StorePriceSummary

EQUAL = "equal"


def filter_by_brand(products: Sequence[Product], brand: str) -> List[Product]:
    needle = brand.casefold()
    return [p for p in products if p.brand and needle in p.brand.casefold()]


def group_by_store(products: Sequence[Product], stores: Sequence[StoreConfig]) -> Dict[str, List[Product]]:
    """매장 키별 그룹 (설정된 모든 매장이 키로 존재, 상품이 없으면 빈 목록)"""
    grouped: Dict[str, List[Product]] = {s.key: [] for s in stores}
    for p in products:
        if p.store in grouped:
            grouped[p.store].append(p)
    return grouped


def average_price(products: Sequence[Product]) -> float:
    """priceNumeric 평균 (가격 있는 상품이 없으면 0)"""
    prices = [p.price_numeric for p in products if p.price_numeric is not None]
    if not prices:
        return 0.0
    return sum(prices) / len(prices)


def sort_by_price(products: Sequence[Product], ascending: bool = True) -> List[Product]:
    """가격순 정렬. 가격 없는 상품은 방향과 무관하게 뒤로."""
    priced = [p for p in products if p.price_numeric is not None]
    unpriced = [p for p in products if p.price_numeric is None]
    return sorted(priced, key=lambda p: p.price_numeric, reverse=not ascending) + unpriced


def cheapest(products: Sequence[Product]) -> Optional[Product]:
    """가장 싼 상품 (가격 있는 상품이 없으면 None)"""
    ordered = sort_by_price(products)
    if not ordered or ordered[0].price_numeric is None:
        return None
    return ordered[0]


def compare_stores(search_term: str, products: Sequence[Product], stores: Sequence[StoreConfig]) -> StoreComparison:
    """매장별 평균 가격 비교. 평균이 양수인 매장 중 최저가 매장, 없으면 'equal'."""
    grouped = group_by_store(products, stores)
    summaries = [
        StorePriceSummary(
            store=s.key,
            store_name=s.name,
            count=len(grouped[s.key]),
            average_price=round(average_price(grouped[s.key]), 2),
        )
        for s in stores
    ]

    priced = [s for s in summaries if s.average_price > 0]
    winner = min(priced, key=lambda s: s.average_price).store if priced else EQUAL

    return StoreComparison(search_term=search_term, cheapest_store=winner, stores=summaries)
