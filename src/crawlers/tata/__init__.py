"""Tata store adapter."""

from .scraper import TataScraper
from .parsing import parse_search_products

__all__ = ["TataScraper", "parse_search_products"]
