"""Tienda Inglesa - HTML 파싱 유틸.

네트워크(fetch)와 분리된 순수 파싱 로직입니다.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from selectolax.parser import HTMLParser, Node

from src.core.logging import logger
from src.crawlers.extraction import (
    FieldStrategy,
    class_pattern_containers,
    css_containers,
    find_containers,
    first_value,
    image_url,
    link_url,
    node_attr,
    node_text,
    text_at,
)
from src.schemas.product_schema import Product
from src.utils.prices import extract_price_token, is_price_text, parse_price


_TAG = "TIENDA_INGLESA"

# 이 길이 이하의 이름은 다른 후보가 없을 때만 사용
MIN_NAME_LENGTH = 4

AVAILABLE_MARKER = "Disponibles"

CONTAINER_STRATEGIES = (
    css_containers(".product-item"),
    css_containers(".producto"),
    css_containers('[class*="product"]'),
    css_containers('article[class*="product"]'),
    css_containers('div[class*="product-card"]'),
    css_containers('li[class*="product"]'),
    css_containers(".item-product"),
    css_containers("[data-product]"),
    # 일반 휴리스틱: class가 product/item/card이고 이미지와 가격 표기를 모두 가진 요소
    class_pattern_containers(
        r"product|item|card",
        ("div", "li", "article"),
        require_image=True,
        require_price=True,
    ),
)

NAME_STRATEGIES = (
    text_at('[class*="product-name"]', title_fallback=True),
    text_at('[class*="productName"]', title_fallback=True),
    text_at(".product-title", title_fallback=True),
    text_at(".title", title_fallback=True),
    text_at("h2", title_fallback=True),
    text_at("h3", title_fallback=True),
    text_at("h4", title_fallback=True),
    text_at('[class*="name"]', title_fallback=True),
    text_at("a[title]", title_fallback=True),
    text_at(".description", title_fallback=True),
)

BRAND_STRATEGIES = (
    text_at('[class*="brand"]'),
    text_at('[class*="marca"]'),
    text_at(".manufacturer"),
    text_at("[data-brand]"),
)

PRICE_STRATEGIES = (
    text_at('[class*="price"]'),
    text_at('[class*="precio"]'),
    text_at(".value"),
    text_at("[data-price]"),
    text_at(".cost"),
    text_at(".amount"),
)

AVAILABILITY_STRATEGIES = (
    text_at('[class*="stock"]'),
    text_at('[class*="availability"]'),
    text_at('[class*="disponib"]'),
    text_at(".status"),
)

DESCRIPTION_STRATEGIES = (
    text_at('[class*="description"]'),
    text_at('[class*="desc"]'),
    text_at(".details"),
    text_at(".info"),
)

IMAGE_ATTRS = ("src", "data-src", "data-lazy-src", "data-original")


def _extract_name(node: Node) -> Optional[str]:
    """이름 추출: 충분히 긴 첫 후보 > 짧은 첫 후보 > 이미지 alt"""
    fallback: Optional[str] = None
    for strategy in NAME_STRATEGIES:
        try:
            value = strategy(node)
        except Exception as e:
            logger.debug(f"[{_TAG}] name strategy {strategy.description} failed: {type(e).__name__}")
            continue
        if not value:
            continue
        if len(value) >= MIN_NAME_LENGTH:
            return value
        fallback = fallback or value

    if fallback:
        return fallback

    alt = node_attr(node.css_first("img"), "alt")
    if alt and len(alt) >= MIN_NAME_LENGTH:
        return alt
    return None


def _extract_price(node: Node) -> Tuple[Optional[str], Optional[float]]:
    """가격 추출: 가격 요소 > 컨테이너 전체 텍스트의 첫 통화 금액"""
    price = first_value(node, PRICE_STRATEGIES, accept=is_price_text, tag=_TAG)
    if not price:
        price = extract_price_token(node_text(node))
    return price, parse_price(price)


def _extract_availability(node: Node) -> Optional[str]:
    availability = first_value(node, AVAILABILITY_STRATEGIES, tag=_TAG)
    if availability:
        return availability
    text = node_text(node) or ""
    if AVAILABLE_MARKER in text:
        return AVAILABLE_MARKER
    return None


def _extract_description(node: Node, name: Optional[str]) -> Optional[str]:
    return first_value(
        node,
        DESCRIPTION_STRATEGIES,
        accept=lambda desc: desc != name,
        tag=_TAG,
    )


def parse_product_node(node: Node, base_url: str) -> Optional[Product]:
    """상품 컨테이너 하나에서 필드 추출 (필드별 독립 폴백)"""
    try:
        name = _extract_name(node)
        price, price_numeric = _extract_price(node)
        return Product(
            name=name,
            brand=first_value(node, BRAND_STRATEGIES, tag=_TAG),
            price=price,
            price_numeric=price_numeric,
            description=_extract_description(node, name),
            image_url=image_url(node, base_url, IMAGE_ATTRS),
            link=link_url(node, base_url),
            availability=_extract_availability(node),
        )
    except Exception as e:
        logger.error(f"[{_TAG}] Error extracting product data: {type(e).__name__}: {e}")
        return None


def parse_search_products(html: str, base_url: str) -> List[Product]:
    """검색 결과 HTML에서 상품 목록 추출 (이름 없는 항목 제외)"""
    if not html:
        return []

    tree = HTMLParser(html)
    containers, used = find_containers(tree, CONTAINER_STRATEGIES, tag=_TAG)
    if used is None:
        logger.info(f"[{_TAG}] Generic search found 0 elements")

    products: List[Product] = []
    for node in containers:
        product = parse_product_node(node, base_url)
        if product and product.name:
            products.append(product)
    return products
