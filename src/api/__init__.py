"""API 엔드포인트 패키지 - export only."""

from .routes import (
    health_router,
    product_router,
    shopping_list_router,
    get_orchestrator,
    get_search_config,
    get_cart_optimizer,
)

__all__ = [
    "health_router",
    "product_router",
    "shopping_list_router",
    "get_orchestrator",
    "get_search_config",
    "get_cart_optimizer",
]
