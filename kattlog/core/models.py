"""Records produced by the classification engine.

Every record is created fresh per extraction or pointer call and carries no
identity beyond it.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional

PLACEHOLDER_TITLE = "Sin título"


@dataclass
class ProductCandidate:
    """Structured record extracted from one product card."""
    title: str
    price: Optional[str] = None
    image_url: Optional[str] = None
    product_url: Optional[str] = None
    description: Optional[str] = None
    dimensions: Optional[str] = None
    html_block: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Category:
    """A category link; ``type`` records the strategy that found it."""
    name: str
    url: Optional[str] = None
    type: str = "text"  # "card" | "text"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class InteractiveCapture:
    """A product selection confirmed by the operator's click."""
    html: str
    url: str
    product_url: str
    tag_name: str
    preview_image: Optional[str]
    text_snippet: str
    timestamp: int  # epoch milliseconds

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation, keyed the way the hosting frame expects."""
        return {
            'html': self.html,
            'url': self.url,
            'productUrl': self.product_url,
            'tagName': self.tag_name,
            'previewImage': self.preview_image,
            'textSnippet': self.text_snippet,
            'timestamp': self.timestamp,
        }


@dataclass
class CapturedProduct:
    """Product record built from an operator's capture."""
    title: str
    brand: str
    product_url: str
    price: Optional[str] = None
    price_value: float = 0.0
    currency: str = "EUR"
    image_url: Optional[str] = None
    images: List[str] = field(default_factory=list)
    dimensions: Optional[str] = None
    captured_at: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ScoredElement:
    """An element reference plus its product score for one pointer cycle."""
    element: Any
    score: float


@dataclass
class FetchResult:
    """Outcome of the HTML acquisition step."""
    success: bool
    html: Optional[str] = None
    error: Optional[str] = None
    method: Optional[str] = None  # "browser" | "static"
    status_code: Optional[int] = None
    duration: float = 0.0


@dataclass
class ProductDetails:
    """Extra data read from a single product page."""
    images: List[str] = field(default_factory=list)
    dimensions: Optional[str] = None
    description: str = ""
    materials: Optional[str] = None
    colors: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ExtractionReport:
    """Winning strategy of a listing extraction and how each one scored."""
    method: str
    candidates: List[ProductCandidate] = field(default_factory=list)
    strategy_counts: Dict[str, int] = field(default_factory=dict)


@dataclass
class CategoryDetection:
    """Result of deciding what a page offers: categories, products or a detail."""
    success: bool
    view: str = "categories"  # "categories" | "products" | "product"
    categories: List[Category] = field(default_factory=list)
    products: List[ProductCandidate] = field(default_factory=list)
    source: str = ""
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'success': self.success,
            'view': self.view,
            'source': self.source,
            'error': self.error,
            'categories': [c.to_dict() for c in self.categories],
            'products': [p.to_dict() for p in self.products],
        }
