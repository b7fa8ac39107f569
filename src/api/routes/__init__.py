"""API routes package."""

from .health_routes import router as health_router
from .product_routes import router as product_router, get_orchestrator, get_search_config
from .shopping_list_routes import router as shopping_list_router, get_cart_optimizer

__all__ = [
    "health_router",
    "product_router",
    "shopping_list_router",
    "get_orchestrator",
    "get_search_config",
    "get_cart_optimizer",
]
