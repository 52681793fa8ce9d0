"""Rule-based page classifier.

Separates product detail pages from listings and hubs using markup signals
only, and recognises root URLs where navigation is the best source of
categories.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from .base_classifier import BaseClassifier

logger = logging.getLogger(__name__)


@dataclass
class PageClassification:
    """Complete page classification result."""

    page_type: str  # "product" or "other"
    confidence: float
    reasoning: List[str] = field(default_factory=list)

    def add_reason(self, reason: str):
        """Add reasoning step."""
        self.reasoning.append(reason)


class RuleBasedClassifier(BaseClassifier):
    """
    Product detail page detection.

    Strategy, first signal wins:
    1. An add-to-cart or buy-now control
    2. Exactly one price in the page body
    3. ``og:type`` product metadata
    4. A JSON-LD Product block
    """

    BUY_PHRASES = (
        'añadir al carrito', 'agregar al carrito', 'add to cart',
        'comprar ahora', 'buy now',
    )

    def __init__(self, enable_logging: bool = True):
        """Initialize classifier."""
        self.enable_logging = enable_logging
        self.classification_log: List[Dict] = []
        self.price_pattern = re.compile(r'\d+[.,]\d{2}\s*[€$£]')
        self.language_root_pattern = re.compile(r'^/[a-z]{2}$', re.IGNORECASE)

    def is_product_page(self, url: str, html: str) -> bool:
        """Determine if page is a product detail page."""
        result = self.classify(url, html)

        if self.enable_logging:
            self.classification_log.append({
                'url': url,
                'result': {
                    'page_type': result.page_type,
                    'confidence': result.confidence,
                    'reasoning': result.reasoning
                }
            })

        return result.page_type == 'product'

    def is_product_detail_page(self, html: str) -> bool:
        """Same decision when no URL is at hand."""
        return self.classify('', html).page_type == 'product'

    def classify(self, url: str, html: str) -> PageClassification:
        """
        Classify a page from its markup.

        Args:
            url: Page URL (only used for logging)
            html: Page HTML

        Returns:
            PageClassification
        """
        result = PageClassification(page_type='other', confidence=0.0)
        soup = BeautifulSoup(html or '', 'html.parser')

        if self._has_buy_button(soup):
            result.page_type = 'product'
            result.confidence = 0.9
            result.add_reason("Add-to-cart control present")
        elif self._single_price(soup):
            result.page_type = 'product'
            result.confidence = 0.7
            result.add_reason("Exactly one price on the page")
        elif self._has_product_metadata(soup):
            result.page_type = 'product'
            result.confidence = 0.8
            result.add_reason("Product metadata (og:type or JSON-LD)")
        else:
            result.add_reason("No product detail signals")

        logger.debug("Classified %s as %s: %s", url or 'page', result.page_type, result.reasoning)
        return result

    def is_root_url(self, url: str) -> bool:
        """Home pages and language roots such as ``/es``."""
        try:
            path = urlparse(url).path.rstrip('/')
        except ValueError:
            return False
        return (
            path == '' or
            self.language_root_pattern.match(path) is not None
        )

    # ------------------------------------------------------------------
    # Signals
    # ------------------------------------------------------------------

    def _has_buy_button(self, soup: BeautifulSoup) -> bool:
        for element in soup.find_all(['button', 'a']):
            text = element.get_text().lower()
            if any(phrase in text for phrase in self.BUY_PHRASES):
                return True
        return False

    def _single_price(self, soup: BeautifulSoup) -> bool:
        body = soup.body or soup
        return len(self.price_pattern.findall(body.get_text())) == 1

    def _has_product_metadata(self, soup: BeautifulSoup) -> bool:
        og_type = soup.find('meta', attrs={'property': 'og:type'})
        if og_type is not None and og_type.get('content') == 'product':
            return True
        for script in soup.find_all('script', type='application/ld+json'):
            if 'Product' in (script.string or ''):
                return True
        return False
