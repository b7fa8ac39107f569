"""Disco store adapter."""

from .scraper import DiscoScraper
from .parsing import parse_search_products

__all__ = ["DiscoScraper", "parse_search_products"]
