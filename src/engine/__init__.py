"""Engine Layer - 매장 통합 검색 오케스트레이션

- SearchOrchestrator: 통합 검색 진입점 (settle-all join)
- StoreOutcome: 매장별 결과 표준 포맷
"""

from .orchestrator import SearchOrchestrator, shape_store_products
from .result import StoreOutcome

__all__ = [
    "SearchOrchestrator",
    "StoreOutcome",
    "shape_store_products",
]
