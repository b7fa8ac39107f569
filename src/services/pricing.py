"""가격 보정(imputation) 및 장바구니 합계

- 선택된 상품에 가격이 없으면(없음/0 이하) 같은 재료의 '다른 매장' 후보 중
  최저 양수 가격에 추정 가산금을 더해 채웁니다.
- 합계는 항상 다시 계산합니다 (LLM이 준 total은 신뢰하지 않음).
"""

import random
from dataclasses import dataclass
from typing import Iterable, Optional

from src.core.config import settings
from src.core.logging import logger
from src.schemas.product_schema import Cart, CartItem, Product
from src.utils.prices import format_price


@dataclass(frozen=True)
class PricingConfig:
    """추정 가산금 범위 (통화 단위, 양 끝 포함)"""
    surcharge_min: float = 20.0
    surcharge_max: float = 40.0

    def __post_init__(self):
        if self.surcharge_min <= 0:
            raise ValueError("surcharge_min must be positive")
        if self.surcharge_max < self.surcharge_min:
            raise ValueError("surcharge_max must be >= surcharge_min")

    @classmethod
    def from_settings(cls, cfg=None) -> "PricingConfig":
        cfg = cfg or settings
        return cls(
            surcharge_min=cfg.price_imputation_surcharge_min,
            surcharge_max=cfg.price_imputation_surcharge_max,
        )


def has_price(product: Optional[Product]) -> bool:
    return product is not None and product.price_numeric is not None and product.price_numeric > 0


def cheapest_other_store_price(candidates: Iterable[Product], store: Optional[str]) -> Optional[float]:
    """다른 매장 후보 중 최저 양수 가격"""
    prices = [p.price_numeric for p in candidates if p.store != store and has_price(p)]
    return min(prices) if prices else None


def impute_price(
    item: CartItem,
    candidates: Iterable[Product],
    pricing: PricingConfig,
    rng: Optional[random.Random] = None,
) -> CartItem:
    """가격 없는 항목 보정

    Returns:
        CartItem: 가격이 있으면 그대로, 보정 가능하면 priceEstimated=True인 새 항목,
        다른 매장 가격도 없으면 가격 없는 항목 그대로
    """
    if has_price(item.product):
        return item

    base = cheapest_other_store_price(candidates, item.product.store)
    if base is None:
        logger.warning(
            f"[PRICE_UNAVAILABLE] No reference price: ingredient='{item.ingredient}', store={item.product.store}"
        )
        return item

    rng = rng or random
    estimated = round(base + rng.uniform(pricing.surcharge_min, pricing.surcharge_max), 2)
    product = item.product.model_copy(update={"price_numeric": estimated, "price": format_price(estimated)})
    logger.info(
        f"[PRICE_IMPUTED] ingredient='{item.ingredient}', store={item.product.store}, "
        f"base={base}, estimated={estimated}"
    )
    return item.model_copy(update={"product": product, "price_estimated": True})


def cart_total(items: Iterable[CartItem]) -> float:
    """가격이 있는 항목의 합계 (소수점 둘째 자리)"""
    return round(sum(i.product.price_numeric for i in items if has_price(i.product)), 2)


def finalize_cart(cart: Cart) -> Cart:
    """합계 재계산. 이미 확정된 장바구니에 다시 적용해도 결과가 같습니다."""
    return cart.model_copy(update={"total": cart_total(cart.items)})
