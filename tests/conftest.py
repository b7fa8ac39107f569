"""전역 테스트 설정

역할:
- 테스트 환경 구성
- 공통 매장 설정/상품 팩토리/픽스처 파일 로더

금지:
- 실제 매장/LLM 네트워크 호출 (Fake는 각 테스트 모듈에 둠)
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional

import pytest


# 프로젝트 루트를 경로에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from src.core.stores import SearchConfig, StoreConfig  # noqa: E402
from src.schemas.product_schema import Product  # noqa: E402


FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session", autouse=True)
def test_env() -> None:
    """테스트 환경 변수 설정 (세션 전역)"""
    os.environ["ENVIRONMENT"] = "test"
    os.environ["LOG_LEVEL"] = "INFO"


@pytest.fixture
def read_fixture():
    """tests/fixtures 아래 파일 내용 로더"""

    def _read(name: str) -> str:
        return (FIXTURES_DIR / name).read_text(encoding="utf-8")

    return _read


@pytest.fixture
def store_configs() -> tuple:
    """기본 매장 3곳 (Disco, Tienda Inglesa, Tata 순)"""
    return (
        StoreConfig(key="disco", name="Disco", base_url="https://www.disco.com.uy", metadata_key="disco"),
        StoreConfig(
            key="tienda-inglesa",
            name="Tienda Inglesa",
            base_url="https://www.tiendainglesa.com.uy",
            metadata_key="tiendaInglesa",
            result_cap=10,
        ),
        StoreConfig(
            key="tata",
            name="Tata",
            base_url="https://www.tata.com.uy",
            metadata_key="tata",
            result_cap=10,
        ),
    )


@pytest.fixture
def search_config(store_configs) -> SearchConfig:
    return SearchConfig(stores=store_configs)


@pytest.fixture
def make_product():
    """Product 팩토리"""

    def _make(name: Optional[str], store: Optional[str] = None, price: Optional[float] = None, **kwargs) -> Product:
        return Product(
            name=name,
            store=store,
            price=f"$ {price:g}" if price is not None else None,
            price_numeric=price,
            **kwargs,
        )

    return _make
