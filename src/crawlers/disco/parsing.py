"""Disco (VTEX) - HTML 파싱 유틸.

네트워크(fetch)와 분리된 순수 파싱 로직입니다.
"""

from __future__ import annotations

from typing import List, Optional

from selectolax.parser import HTMLParser, Node

from src.core.logging import logger
from src.crawlers.extraction import (
    class_pattern_containers,
    attr_pattern_containers,
    css_containers,
    find_containers,
    first_value,
    image_url,
    link_url,
    text_at,
    text_at_class,
)
from src.schemas.product_schema import Product
from src.utils.prices import is_price_text, parse_price


_TAG = "DISCO"

CONTAINER_STRATEGIES = (
    css_containers(".vtex-product-summary-2-x-container"),
    css_containers(".vtex-product-summary-2-x-element"),
    css_containers('[class*="vtex-product-summary"]'),
    class_pattern_containers(r"product", ("article",)),
    class_pattern_containers(r"product-card"),
    class_pattern_containers(r"product-item"),
    class_pattern_containers(r"item-product"),
    attr_pattern_containers("data-testid", r"product"),
    css_containers('[class*="product"][class*="item"]'),
    css_containers('[class*="card"][class*="product"]'),
    # 최후 수단: class에 product/item/card가 들어간 div
    class_pattern_containers(r"product|item|card"),
)

NAME_STRATEGIES = (
    text_at(".vtex-product-summary-2-x-productNameContainer", title_fallback=True),
    text_at('[class*="productName"]', title_fallback=True),
    text_at("h2", title_fallback=True),
    text_at("h3", title_fallback=True),
    text_at("h4", title_fallback=True),
    text_at_class(r"name"),
    text_at_class(r"title"),
    text_at("a[title]", title_fallback=True),
)

BRAND_STRATEGIES = (
    text_at(".vtex-product-summary-2-x-productBrandName"),
    text_at('[class*="productBrandName"]'),
    text_at_class(r"brand"),
    text_at_class(r"marca"),
)

PRICE_STRATEGIES = (
    text_at(".vtex-product-price-1-x-sellingPrice"),
    text_at(".vtex-product-price-1-x-currencyContainer"),
    text_at('[class*="sellingPrice"]'),
    text_at_class(r"price"),
    text_at_class(r"precio"),
)

DESCRIPTION_STRATEGIES = (
    text_at_class(r"description|desc"),
)


def parse_product_node(node: Node, base_url: str) -> Optional[Product]:
    """상품 컨테이너 하나에서 필드 추출 (필드별 독립 폴백)"""
    try:
        price = first_value(node, PRICE_STRATEGIES, accept=is_price_text, tag=_TAG)
        return Product(
            name=first_value(node, NAME_STRATEGIES, tag=_TAG),
            brand=first_value(node, BRAND_STRATEGIES, tag=_TAG),
            price=price,
            price_numeric=parse_price(price),
            description=first_value(node, DESCRIPTION_STRATEGIES, tag=_TAG),
            image_url=image_url(node, base_url),
            link=link_url(node, base_url),
        )
    except Exception as e:
        logger.error(f"[{_TAG}] Error extracting product data: {type(e).__name__}: {e}")
        return None


def parse_search_products(html: str, base_url: str) -> List[Product]:
    """검색 결과 HTML에서 상품 목록 추출 (이름 없는 항목 제외)"""
    if not html:
        return []

    tree = HTMLParser(html)
    containers, _ = find_containers(tree, CONTAINER_STRATEGIES, tag=_TAG)

    products: List[Product] = []
    for node in containers:
        product = parse_product_node(node, base_url)
        if product and product.name:
            products.append(product)
    return products
