"""Store adapter modules (HTML scraping + JSON API).

공개 API는 이 파일에서만 export합니다.
"""

from .adapter import StoreAdapter
from .base_scraper import BaseStoreScraper
from .disco import DiscoScraper
from .tienda_inglesa import TiendaInglesaScraper
from .tata import TataScraper
from .registry import SCRAPER_CLASSES, build_adapters

__all__ = [
    "StoreAdapter",
    "BaseStoreScraper",
    "DiscoScraper",
    "TiendaInglesaScraper",
    "TataScraper",
    "SCRAPER_CLASSES",
    "build_adapters",
]
