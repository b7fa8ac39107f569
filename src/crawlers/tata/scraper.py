"""Tata Uruguay 스크레이퍼 (GraphQL JSON API)"""

from __future__ import annotations

import json
from typing import List, Optional
from urllib.parse import quote

from src.core.config import Settings, settings as default_settings
from src.core.stores import StoreConfig
from src.crawlers.base_scraper import BaseStoreScraper, JSON_ACCEPT
from src.crawlers.http_client import SharedHttpClient
from src.schemas.product_schema import Product

from .parsing import decode_response, parse_search_products


class TataScraper(BaseStoreScraper):
    """Tata 검색 API 어댑터

    URL format:
        /api/graphql?operationName=SearchSuggestionsQuery&variables={encodedJSON}

    Variables JSON:
        {"term": "coca",
         "selectedFacets": [
            {"key": "channel", "value": "{\\"salesChannel\\":\\"4\\",\\"regionId\\":\\"...\\"}"},
            {"key": "locale", "value": "es-UY"}]}
    """

    log_tag = "TATA"
    accept = JSON_ACCEPT

    def __init__(
        self,
        config: StoreConfig,
        http_client: Optional[SharedHttpClient] = None,
        app_settings: Optional[Settings] = None,
    ):
        super().__init__(config, http_client)
        cfg = app_settings or default_settings
        self.sales_channel = cfg.tata_sales_channel
        self.region_id = cfg.tata_region_id
        self.locale = cfg.tata_locale

    def build_search_url(self, term: str) -> str:
        variables = {
            "term": term,
            "selectedFacets": [
                {
                    "key": "channel",
                    "value": json.dumps(
                        {"salesChannel": self.sales_channel, "regionId": self.region_id},
                        separators=(",", ":"),
                    ),
                },
                {"key": "locale", "value": self.locale},
            ],
        }
        encoded = quote(json.dumps(variables, separators=(",", ":")), safe="")
        return f"{self.base_url}/api/graphql?operationName=SearchSuggestionsQuery&variables={encoded}"

    def request_headers(self):
        return {"Accept": self.accept, "Content-Type": "application/json"}

    def parse(self, body: str) -> List[Product]:
        return parse_search_products(decode_response(body), self.base_url)
