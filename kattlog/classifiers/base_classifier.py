"""Base classifier interface.

Classifiers decide what kind of page a document is before any extraction
runs: a single product detail page, a listing, or a category hub.

Implementations:
    - RuleBasedClassifier: markup signals (buy buttons, prices, metadata)
"""

from abc import ABC, abstractmethod


class BaseClassifier(ABC):
    """Abstract base class for page classifiers."""

    @abstractmethod
    def is_product_page(self, url: str, html: str) -> bool:
        """
        Determine if a page is a single product detail page.

        Args:
            url: The page URL
            html: The page HTML

        Returns:
            True if product detail page, False otherwise
        """
        pass
