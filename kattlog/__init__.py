"""Kattlog: heuristic product and category extraction from e-commerce HTML."""

from .core.config import EngineConfig
from .core.engine import CatalogEngine
from .extractors.category_extractor import CategoryExtractor
from .extractors.listing_extractor import ListingExtractor

__version__ = "0.1.0"

__all__ = [
    'CatalogEngine',
    'CategoryExtractor',
    'EngineConfig',
    'ListingExtractor',
]
