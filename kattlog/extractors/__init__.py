# kattlog/extractors/__init__.py
"""Data extractors."""

from .card_extractor import CardExtractor
from .category_extractor import CategoryExtractor
from .detail_extractor import ProductDetailExtractor
from .dimension_extractor import DimensionExtractor
from .listing_extractor import ListingExtractor
from .price_extractor import PriceExtractor, parse_price

__all__ = [
    'CardExtractor',
    'CategoryExtractor',
    'ProductDetailExtractor',
    'DimensionExtractor',
    'ListingExtractor',
    'PriceExtractor',
    'parse_price',
]
