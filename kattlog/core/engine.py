"""
Catalog engine: decides what a page offers and extracts it.

Flow:
1. Product detail pages go straight to the detail parser
2. Root pages: AI namer over the selected nav HTML, else rule-based navigation
3. Inner pages: content categories, else listing products, else navigation
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List, Optional

from .config import ENRICH_CONCURRENCY, EngineConfig
from .models import (
    CapturedProduct,
    Category,
    CategoryDetection,
    InteractiveCapture,
    ProductCandidate,
    ProductDetails,
)
from ..classifiers.ai_category_namer import GeminiCategoryNamer
from ..classifiers.rule_based import RuleBasedClassifier
from ..extractors.card_extractor import CardExtractor
from ..extractors.category_extractor import CategoryExtractor
from ..extractors.detail_extractor import ProductDetailExtractor
from ..extractors.listing_extractor import ListingExtractor
from ..extractors.price_extractor import PriceExtractor
from ..interactive.processor import CaptureProcessor
from ..utils.http_client import HybridFetcher

logger = logging.getLogger(__name__)

# Fewer content categories than this get merged with the global navigation
MIN_CONTENT_CATEGORIES = 10
MIN_SNIPPET_CATEGORIES = 3


def dedupe_categories(categories: Iterable[Category]) -> List[Category]:
    """First category per lower-cased name."""
    seen = set()
    unique = []
    for category in categories:
        key = category.name.lower().strip()
        if key in seen:
            continue
        seen.add(key)
        unique.append(category)
    return unique


class CatalogEngine:
    """
    Orchestrates classification and extraction for one store page at a time.

    Holds no per-page state; one engine can serve many pages.
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        fetcher: Optional[HybridFetcher] = None,
        namer: Optional[GeminiCategoryNamer] = None
    ):
        """Initialize the engine with all components."""
        self.config = config or EngineConfig()

        card_extractor = CardExtractor(PriceExtractor(self.config.price_match_policy))
        self.listing_extractor = ListingExtractor(card_extractor, self.config.max_candidates)
        self.category_extractor = CategoryExtractor()
        self.detail_extractor = ProductDetailExtractor()
        self.classifier = RuleBasedClassifier(enable_logging=False)
        self.capture_processor = CaptureProcessor(card_extractor, self.config.proxy_marker)
        self._fetcher = fetcher

        # AI namer (optional)
        self.namer = namer
        if self.namer is None and self.config.use_ai_naming and self.config.validate():
            self.namer = GeminiCategoryNamer(
                api_key=self.config.gemini_api_key,
                model_name=self.config.gemini_model
            )

    @property
    def fetcher(self) -> HybridFetcher:
        if self._fetcher is None:
            self._fetcher = HybridFetcher(self.config)
        return self._fetcher

    # ------------------------------------------------------------------
    # Category detection
    # ------------------------------------------------------------------

    def detect_categories(self, html: str, url: str) -> CategoryDetection:
        """
        Decide whether a page shows categories, products or one product.

        Args:
            html: Page HTML
            url: Page URL

        Returns:
            CategoryDetection; ``view`` tells the caller what to show
        """
        if not html:
            return CategoryDetection(success=False, error='Empty HTML')

        if self.classifier.is_product_page(url, html):
            logger.info("[detect_categories] Product detail page: %s", url)
            return CategoryDetection(
                success=True,
                view='product',
                products=[self.detail_extractor.parse(html, url)],
                source='product_detail',
            )

        if self.classifier.is_root_url(url):
            return self._detect_root_categories(html, url)

        return self._detect_inner_categories(html, url)

    def _detect_root_categories(self, html: str, url: str) -> CategoryDetection:
        nav_html = self.category_extractor.extract_nav_html(html)
        logger.info("[detect_categories] Root URL, nav HTML length %d", len(nav_html))

        if self.namer is not None:
            ai_categories = self.namer.infer_categories(nav_html, url)
            if ai_categories:
                return CategoryDetection(
                    success=True,
                    categories=dedupe_categories(ai_categories),
                    source='ai',
                )
            logger.info("[detect_categories] AI returned no categories, using rule-based navigation")

        categories = self.category_extractor.extract_global_navigation(nav_html, url)
        source = 'nav_snippet'
        if len(categories) < MIN_SNIPPET_CATEGORIES:
            categories = self.category_extractor.extract_global_navigation(html, url)
            source = 'navigation'

        return CategoryDetection(success=True, categories=dedupe_categories(categories), source=source)

    def _detect_inner_categories(self, html: str, url: str) -> CategoryDetection:
        content = self.category_extractor.extract_content_categories(html, url)
        logger.info("[detect_categories] Inner page: %d content categories", len(content))

        if content:
            if len(content) < MIN_CONTENT_CATEGORIES:
                content = content + self.category_extractor.extract_global_navigation(html, url)
            return CategoryDetection(success=True, categories=dedupe_categories(content), source='content')

        products = self.listing_extractor.extract(html, url)
        if products:
            return CategoryDetection(success=True, view='products', products=products, source='listing')

        navigation = self.category_extractor.extract_global_navigation(html, url)
        return CategoryDetection(success=True, categories=dedupe_categories(navigation), source='navigation')

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def extract_products(
        self,
        html: str,
        url: str,
        keywords: Optional[List[str]] = None
    ) -> List[ProductCandidate]:
        """Listing candidates, optionally restricted to ``keywords``."""
        candidates = self.listing_extractor.extract(html, url)
        if keywords:
            return self.filter_by_keywords(candidates, keywords)
        return candidates

    def category_keywords(self, category: str) -> List[str]:
        """Keywords for a category name; the name itself without an AI namer."""
        if self.namer is not None:
            keywords = self.namer.infer_category_keywords(category)
            if keywords:
                return keywords
        return [category]

    @staticmethod
    def filter_by_keywords(candidates: List[ProductCandidate], keywords: List[str]) -> List[ProductCandidate]:
        lowered = [k.lower() for k in keywords if k]
        filtered = []
        for candidate in candidates:
            text = ' '.join(
                part for part in (candidate.title, candidate.description, candidate.html_block) if part
            ).lower()
            if any(keyword in text for keyword in lowered):
                filtered.append(candidate)

        logger.info("Filtered %d -> %d products using keywords %s", len(candidates), len(filtered), lowered)
        return filtered

    def parse_product(self, html: str, url: str) -> ProductCandidate:
        return self.detail_extractor.parse(html, url)

    def extract_details(self, html: str, url: str) -> ProductDetails:
        return self.detail_extractor.extract_details(html, url)

    def process_captures(self, captures: Iterable[InteractiveCapture]) -> List[CapturedProduct]:
        """Product records for operator captures, read from the captured HTML."""
        return self.capture_processor.process(captures)

    # ------------------------------------------------------------------
    # URL variants
    # ------------------------------------------------------------------

    def detect_categories_from_url(self, url: str) -> CategoryDetection:
        result = self.fetcher.fetch(url)
        if not result.success or not result.html:
            return CategoryDetection(success=False, error=result.error or 'Failed to fetch HTML')
        logger.info("Fetched %s via %s (%d chars)", url, result.method, len(result.html))
        return self.detect_categories(result.html, url)

    def extract_products_from_url(self, url: str, keywords: Optional[List[str]] = None) -> List[ProductCandidate]:
        result = self.fetcher.fetch(url)
        if not result.success or not result.html:
            logger.warning("Could not fetch %s: %s", url, result.error)
            return []
        return self.extract_products(result.html, url, keywords)

    def extract_details_from_url(self, url: str) -> Optional[ProductDetails]:
        result = self.fetcher.fetch(url)
        if not result.success or not result.html:
            logger.warning("Could not load product page %s: %s", url, result.error)
            return None
        return self.extract_details(result.html, url)

    def enrich_dimensions(
        self,
        candidates: List[ProductCandidate],
        concurrency: int = ENRICH_CONCURRENCY
    ) -> List[ProductCandidate]:
        """
        Fill in missing dimensions from each candidate's product page.

        Args:
            candidates: Listing candidates, updated in place
            concurrency: Product pages fetched at once

        Returns:
            The same candidates
        """
        pending = [c for c in candidates if not c.dimensions and c.product_url]
        if not pending:
            return candidates

        logger.info("Fetching %d product pages for dimensions (concurrency: %d)", len(pending), concurrency)
        with ThreadPoolExecutor(max_workers=max(1, concurrency)) as executor:
            details = list(executor.map(lambda c: self.extract_details_from_url(c.product_url), pending))

        found = 0
        for candidate, detail in zip(pending, details):
            if detail is not None and detail.dimensions:
                candidate.dimensions = detail.dimensions
                found += 1

        logger.info("Found dimensions for %d/%d products", found, len(pending))
        return candidates
