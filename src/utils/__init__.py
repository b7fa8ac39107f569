"""Utilities package - Flat structure"""

from .prices import (
    parse_price,
    is_price_text,
    extract_price_token,
    format_price,
    normalize_number_token,
)
from .url_utils import normalize_href, is_placeholder_src
from .text_utils import clean_text, normalize_search_term

__all__ = [
    # prices
    "parse_price",
    "is_price_text",
    "extract_price_token",
    "format_price",
    "normalize_number_token",
    # url
    "normalize_href",
    "is_placeholder_src",
    # text
    "clean_text",
    "normalize_search_term",
]
