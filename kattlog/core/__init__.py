"""Core engine components."""

from .config import EngineConfig, MatchPolicy
from .models import (
    Category,
    CategoryDetection,
    CapturedProduct,
    ExtractionReport,
    FetchResult,
    InteractiveCapture,
    ProductCandidate,
    ProductDetails,
    ScoredElement,
)

__all__ = [
    'EngineConfig',
    'MatchPolicy',
    'Category',
    'CategoryDetection',
    'CapturedProduct',
    'ExtractionReport',
    'FetchResult',
    'InteractiveCapture',
    'ProductCandidate',
    'ProductDetails',
    'ScoredElement',
]
