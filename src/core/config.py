"""설정 관리 - 환경 변수 로드 및 검증"""
from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import field_validator, model_validator


class Settings(BaseSettings):
    """애플리케이션 설정"""

    # 크롤러 (어댑터별 HTTP 요청 타임아웃)
    crawler_timeout_s: float = 30.0
    crawler_user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )
    crawler_accept_language: str = "es-ES,es;q=0.9,en;q=0.8"
    crawler_http_impersonate: str = "chrome110"
    crawler_http_max_clients: int = 20

    # 매장 설정
    # NOTE: 결과 개수 상한은 매장마다 다릅니다. None이면 제한 없음.
    disco_base_url: str = "https://www.disco.com.uy"
    disco_result_cap: Optional[int] = None
    tienda_inglesa_base_url: str = "https://www.tiendainglesa.com.uy"
    tienda_inglesa_result_cap: Optional[int] = 10
    tata_base_url: str = "https://www.tata.com.uy"
    tata_result_cap: Optional[int] = 10
    tata_sales_channel: str = "4"
    tata_region_id: str = "U1cjdGF0YXV5bW9udGV2aWRlbw=="
    tata_locale: str = "es-UY"

    # LLM (상품 선택)
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    openai_temperature: float = 0.3
    openai_timeout_s: float = 60.0

    # 가격 추정 가산액 범위
    # TODO: 10~20 / 20~40 중 어느 범위가 맞는지 제품 담당자 확인 필요 (현재 20~40)
    price_imputation_surcharge_min: float = 20.0
    price_imputation_surcharge_max: float = 40.0

    # API
    api_title: str = "Comparador de supermercados"
    api_version: str = "1.0.0"
    api_description: str = "Disco, Tienda Inglesa, Tata 상품 검색 및 매장별 장바구니 최적화"
    search_cache_max_age_s: int = 300
    search_stale_while_revalidate_s: int = 600

    # 로깅
    log_level: str = "INFO"

    @field_validator("crawler_timeout_s", "openai_timeout_s")
    @classmethod
    def validate_timeouts(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeouts must be positive")
        return v

    @field_validator("disco_result_cap", "tienda_inglesa_result_cap", "tata_result_cap")
    @classmethod
    def validate_result_caps(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v <= 0:
            raise ValueError("result caps must be positive (or unset for no cap)")
        return v

    @field_validator("price_imputation_surcharge_min")
    @classmethod
    def validate_surcharge_min(cls, v: float) -> float:
        # 추정 가격은 기준 가격보다 반드시 커야 함 (소수점 둘째 자리 반올림 후에도)
        if v < 0.01:
            raise ValueError("price_imputation_surcharge_min must be >= 0.01")
        return v

    @model_validator(mode="after")
    def validate_surcharge_range(self) -> "Settings":
        if self.price_imputation_surcharge_max < self.price_imputation_surcharge_min:
            raise ValueError("price_imputation_surcharge_max must be >= price_imputation_surcharge_min")
        return self

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
