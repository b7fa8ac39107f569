"""매장 구성 - 오케스트레이터/어댑터에 주입되는 명시적 설정 구조"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from src.core.config import Settings, settings as default_settings
from src.schemas.product_schema import StoreKey


@dataclass(frozen=True)
class StoreConfig:
    """매장 하나의 설정

    Attributes:
        key: 매장 키 (Product.store 값)
        name: 표시명 (Product.store_name 값)
        base_url: 상대 URL 보정 기준
        metadata_key: 검색 응답 stores 메타데이터 키 (예: tiendaInglesa)
        result_cap: 검색 결과 최대 개수, None이면 제한 없음
        timeout_s: HTTP 요청 타임아웃 (초)
    """

    key: str
    name: str
    base_url: str
    metadata_key: str
    result_cap: Optional[int] = None
    timeout_s: float = 30.0

    def __post_init__(self):
        if not self.key:
            raise ValueError("store key must not be empty")
        if self.result_cap is not None and self.result_cap <= 0:
            raise ValueError(f"result_cap must be positive for store '{self.key}'")
        if self.timeout_s <= 0:
            raise ValueError(f"timeout_s must be positive for store '{self.key}'")


@dataclass(frozen=True)
class SearchConfig:
    """오케스트레이터 설정. stores 순서가 곧 병합 순서입니다."""

    stores: Tuple[StoreConfig, ...]

    def __post_init__(self):
        keys = [s.key for s in self.stores]
        if len(keys) != len(set(keys)):
            raise ValueError(f"duplicate store keys: {keys}")

    def get(self, key: str) -> Optional[StoreConfig]:
        for store in self.stores:
            if store.key == key:
                return store
        return None

    @property
    def keys(self) -> Tuple[str, ...]:
        return tuple(s.key for s in self.stores)


def default_store_configs(cfg: Optional[Settings] = None) -> Tuple[StoreConfig, ...]:
    """Settings에서 기본 매장 3곳 구성 (Disco, Tienda Inglesa, Tata 순)"""
    cfg = cfg or default_settings
    return (
        StoreConfig(
            key=StoreKey.DISCO.value,
            name="Disco",
            base_url=cfg.disco_base_url,
            metadata_key="disco",
            result_cap=cfg.disco_result_cap,
            timeout_s=cfg.crawler_timeout_s,
        ),
        StoreConfig(
            key=StoreKey.TIENDA_INGLESA.value,
            name="Tienda Inglesa",
            base_url=cfg.tienda_inglesa_base_url,
            metadata_key="tiendaInglesa",
            result_cap=cfg.tienda_inglesa_result_cap,
            timeout_s=cfg.crawler_timeout_s,
        ),
        StoreConfig(
            key=StoreKey.TATA.value,
            name="Tata",
            base_url=cfg.tata_base_url,
            metadata_key="tata",
            result_cap=cfg.tata_result_cap,
            timeout_s=cfg.crawler_timeout_s,
        ),
    )


def default_search_config(cfg: Optional[Settings] = None) -> SearchConfig:
    return SearchConfig(stores=default_store_configs(cfg))
