"""Tienda Inglesa Uruguay 스크레이퍼 (검색 페이지 HTML)"""

from __future__ import annotations

from typing import List
from urllib.parse import quote

from src.crawlers.base_scraper import BaseStoreScraper, HTML_ACCEPT
from src.schemas.product_schema import Product

from .parsing import parse_search_products


class TiendaInglesaScraper(BaseStoreScraper):
    """Tienda Inglesa 검색 결과 스크레이퍼

    URL format: {base}/supermercado/busqueda?0,0,{단어+단어},0
    """

    log_tag = "TIENDA_INGLESA"
    accept = HTML_ACCEPT

    def build_search_url(self, term: str) -> str:
        formatted = "+".join(quote(word, safe="") for word in term.split())
        return f"{self.base_url}/supermercado/busqueda?0,0,{formatted},0"

    def parse(self, body: str) -> List[Product]:
        return parse_search_products(body, self.base_url)
