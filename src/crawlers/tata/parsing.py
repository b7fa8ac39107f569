"""Tata - GraphQL 검색 응답(JSON) 파싱 유틸.

응답 구조: data.search.suggestions.products[]
경로가 없거나 배열이 아니면 빈 목록을 반환합니다.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from src.core.exceptions import ParsingException
from src.core.logging import logger
from src.schemas.product_schema import Product
from src.utils.prices import format_price
from src.utils.text_utils import clean_text
from src.utils.url_utils import normalize_href


_TAG = "TATA"

AVAILABLE = "Disponible"
UNAVAILABLE = "No disponible"


def decode_response(body: str) -> Any:
    try:
        return json.loads(body)
    except (TypeError, ValueError) as e:
        raise ParsingException(f"invalid JSON from Tata API: {e}")


def _dig(data: Any, *path: str) -> Any:
    current = data
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def _positive_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value) if value > 0 else None


def _first_offer(api_product: Dict[str, Any]) -> Dict[str, Any]:
    offers = _dig(api_product, "offers", "offers")
    if isinstance(offers, list) and offers and isinstance(offers[0], dict):
        return offers[0]
    return {}


def parse_api_product(api_product: Dict[str, Any], base_url: str) -> Optional[Product]:
    """API 상품 하나 파싱. 형식이 깨진 항목은 None."""
    try:
        brand = api_product.get("brand") or {}
        first_offer = _first_offer(api_product)

        price_numeric = _positive_number(_dig(api_product, "offers", "lowPrice"))
        if price_numeric is None:
            price_numeric = _positive_number(first_offer.get("price"))

        images = api_product.get("image") or []
        image = images[0].get("url") if images and isinstance(images[0], dict) else None

        slug = api_product.get("slug")
        link = f"{base_url.rstrip('/')}/{slug}/p" if slug else None

        availability = None
        availability_url = first_offer.get("availability")
        if availability_url:
            # schema.org URL -> 표시용 텍스트
            availability = AVAILABLE if "InStock" in availability_url else UNAVAILABLE

        return Product(
            name=clean_text(api_product.get("name")),
            brand=clean_text(brand.get("name") or brand.get("brandName")),
            price=format_price(price_numeric) if price_numeric is not None else None,
            price_numeric=round(price_numeric, 2) if price_numeric is not None else None,
            description=None,
            image_url=normalize_href(image, base_url) or None,
            link=link,
            availability=availability,
        )
    except Exception as e:
        logger.error(f"[{_TAG}] Error parsing product: {type(e).__name__}: {e}")
        return None


def parse_search_products(data: Any, base_url: str) -> List[Product]:
    """검색 응답에서 상품 목록 추출"""
    api_products = _dig(data, "data", "search", "suggestions", "products")
    if not isinstance(api_products, list):
        logger.warning(f"[{_TAG}] No products found in API response")
        return []

    products: List[Product] = []
    for api_product in api_products:
        if not isinstance(api_product, dict):
            continue
        product = parse_api_product(api_product, base_url)
        if product:
            products.append(product)
    return products
