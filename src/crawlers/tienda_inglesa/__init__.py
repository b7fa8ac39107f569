"""Tienda Inglesa store adapter."""

from .scraper import TiendaInglesaScraper
from .parsing import parse_search_products

__all__ = ["TiendaInglesaScraper", "parse_search_products"]
