"""비즈니스 로직 서비스 - export only."""

from .cart_optimizer import CartOptimizer, OptimizationReport, reduce_candidates
from .llm_client import OpenAISelectionClient, SelectionClient
from .pricing import PricingConfig, cart_total, finalize_cart, impute_price
from .selection_parser import SelectionPayload, parse_selection
from .shopping_service import build_carts, collect_candidates

__all__ = [
    "CartOptimizer",
    "OptimizationReport",
    "reduce_candidates",
    "OpenAISelectionClient",
    "SelectionClient",
    "PricingConfig",
    "cart_total",
    "finalize_cart",
    "impute_price",
    "SelectionPayload",
    "parse_selection",
    "build_carts",
    "collect_candidates",
]
