"""매장 키 -> 어댑터 클래스 매핑 및 기본 어댑터 구성"""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Type

from src.core.stores import StoreConfig
from src.crawlers.base_scraper import BaseStoreScraper
from src.crawlers.disco import DiscoScraper
from src.crawlers.http_client import SharedHttpClient
from src.crawlers.tata import TataScraper
from src.crawlers.tienda_inglesa import TiendaInglesaScraper
from src.schemas.product_schema import StoreKey


SCRAPER_CLASSES: Dict[str, Type[BaseStoreScraper]] = {
    StoreKey.DISCO.value: DiscoScraper,
    StoreKey.TIENDA_INGLESA.value: TiendaInglesaScraper,
    StoreKey.TATA.value: TataScraper,
}


def build_adapters(
    store_configs: Iterable[StoreConfig],
    http_client: Optional[SharedHttpClient] = None,
) -> Dict[str, BaseStoreScraper]:
    """설정된 매장마다 어댑터 생성

    Raises:
        ValueError: 어댑터 구현이 없는 매장 키
    """
    adapters: Dict[str, BaseStoreScraper] = {}
    for config in store_configs:
        scraper_cls = SCRAPER_CLASSES.get(config.key)
        if scraper_cls is None:
            raise ValueError(f"No adapter registered for store '{config.key}'")
        adapters[config.key] = scraper_cls(config, http_client)
    return adapters
