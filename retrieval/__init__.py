"""Retrieval layer: catalog loading and keyword relevance search."""

from .catalog_loader import CatalogUnavailableError, load_catalog, parse_catalog
from .tool_search import ToolSearchEngine

__all__ = ["CatalogUnavailableError", "load_catalog", "parse_catalog", "ToolSearchEngine"]
