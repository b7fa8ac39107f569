"""Disco Uruguay 스크레이퍼 (VTEX 검색 페이지 HTML)"""

from __future__ import annotations

from typing import List
from urllib.parse import quote

from src.crawlers.base_scraper import BaseStoreScraper, HTML_ACCEPT
from src.schemas.product_schema import Product

from .parsing import parse_search_products


class DiscoScraper(BaseStoreScraper):
    """Disco 검색 결과 스크레이퍼

    URL format: {base}/{term}/s?_q={term}

    Usage:
        scraper = DiscoScraper(store_config)
        products = await scraper.search("galletitas")
    """

    log_tag = "DISCO"
    accept = HTML_ACCEPT

    def build_search_url(self, term: str) -> str:
        encoded = quote(term, safe="")
        return f"{self.base_url}/{encoded}/s?_q={encoded}"

    def parse(self, body: str) -> List[Product]:
        return parse_search_products(body, self.base_url)
