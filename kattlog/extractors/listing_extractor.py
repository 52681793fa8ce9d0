"""Batch product extraction from listing pages.

No single selector list survives contact with arbitrary markup, so the
extractor runs several independent enumeration strategies and keeps the one
that yields the most valid candidates:

1. SelectorStrategy: a curated list of common card class names.
2. TokenFrequencyStrategy: the CSS class token shared by the largest number
   of card-shaped elements, used as the site's de facto card marker.
"""

import logging
import re
from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Dict, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from ..classifiers.category_filter import is_valid_category_name
from ..core.config import MAX_CANDIDATES
from ..core.models import PLACEHOLDER_TITLE, ExtractionReport, ProductCandidate
from ..utils.url_utils import URLUtils
from .card_extractor import CardExtractor

logger = logging.getLogger(__name__)

CATEGORY_URL_MARKERS = ('/c/', '/categoria/')


def is_valid_candidate(candidate: ProductCandidate) -> bool:
    """
    A candidate needs a real title and an image, and either a price or a
    title/URL that does not look like a category card.
    """
    title = candidate.title
    if not title or title == PLACEHOLDER_TITLE or len(title) < 3:
        return False
    if not candidate.image_url:
        return False

    if not candidate.price or len(candidate.price) < 2:
        # Category cards are the usual priceless cards
        if ' ' not in title or is_valid_category_name(title):
            return False
        url = candidate.product_url or ''
        if any(marker in url for marker in CATEGORY_URL_MARKERS):
            return False

    return True


def normalize_title(title: str) -> str:
    normalized = re.sub(r'ref|sku|code', '', title.lower())
    normalized = re.sub(r'[^a-z0-9 ]', '', normalized)
    return re.sub(r'\s+', ' ', normalized).strip()


def dedupe_key(candidate: ProductCandidate) -> str:
    if candidate.product_url:
        return candidate.product_url
    digits = re.sub(r'[^\d]', '', candidate.price or '')
    image = URLUtils.strip_query(candidate.image_url or '')
    return f"{normalize_title(candidate.title or '')}|{digits}|{image}"


def dedupe_candidates(candidates: List[ProductCandidate]) -> List[ProductCandidate]:
    """Collapse candidates by product URL, else by title + price + image base."""
    seen = set()
    unique = []
    for candidate in candidates:
        key = dedupe_key(candidate)
        if key not in seen:
            seen.add(key)
            unique.append(candidate)
    return unique


class ExtractionStrategy(ABC):
    """One way of enumerating product cards on a page."""

    name = 'strategy'

    def __init__(self, card_extractor: CardExtractor):
        self.card_extractor = card_extractor

    @abstractmethod
    def extract(self, soup: BeautifulSoup, base_url: str) -> List[ProductCandidate]:
        """Valid candidates found by this strategy, in document order."""
        pass

    def describe(self) -> str:
        return self.name

    def _valid_candidates(self, elements: List[Tag], base_url: str) -> List[ProductCandidate]:
        candidates = []
        for element in elements:
            candidate = self.card_extractor.extract(element, base_url)
            if is_valid_candidate(candidate):
                candidates.append(candidate)
        return candidates


class SelectorStrategy(ExtractionStrategy):
    """Try hand-curated card selectors; keep the most productive one."""

    name = 'selector'

    CARD_SELECTORS = [
        '.c-product-card', '.o-card', '.product-card', '.product-tile',
        '.product-item', '.listing-item', '.grid-item', 'article',
        '[data-product-id]', '.card', 'li.product',
    ]
    MIN_MATCHES = 3

    def __init__(self, card_extractor: CardExtractor, selectors: Optional[List[str]] = None):
        super().__init__(card_extractor)
        self.selectors = selectors or list(self.CARD_SELECTORS)
        self.best_selector: Optional[str] = None

    def extract(self, soup: BeautifulSoup, base_url: str) -> List[ProductCandidate]:
        best: List[ProductCandidate] = []
        self.best_selector = None

        for selector in self.selectors:
            elements = soup.select(selector)
            if len(elements) < self.MIN_MATCHES:
                continue

            candidates = self._valid_candidates(elements, base_url)
            logger.debug("Selector %s: %d elements, %d valid", selector, len(elements), len(candidates))
            if len(candidates) > len(best):
                best = candidates
                self.best_selector = selector

        return best

    def describe(self) -> str:
        return f"Selector: {self.best_selector}" if self.best_selector else self.name


class TokenFrequencyStrategy(ExtractionStrategy):
    """Use the most repeated class token among card-shaped elements."""

    name = 'token_frequency'

    CHROME_SELECTOR = 'footer, header, nav, .footer, .header, .payment-methods'
    MIN_HTML_LENGTH = 150
    MAX_HTML_LENGTH = 5000
    MIN_TOKEN_LENGTH = 3
    MIN_TOKEN_COUNT = 3

    def __init__(self, card_extractor: CardExtractor):
        super().__init__(card_extractor)
        self.best_token: Optional[str] = None

    def potential_cards(self, soup: BeautifulSoup) -> List[Tag]:
        """Elements shaped like a card: image, link, moderate size, outside chrome."""
        cards = []
        for element in soup.find_all(['div', 'article', 'li']):
            if element.find('img') is None or element.find('a') is None:
                continue
            if element.css.closest(self.CHROME_SELECTOR) is not None:
                continue
            html_length = len(element.decode_contents())
            if html_length < self.MIN_HTML_LENGTH or html_length > self.MAX_HTML_LENGTH:
                continue
            cards.append(element)
        return cards

    def class_tokens(self, element: Tag) -> List[str]:
        classes = element.get('class') or []
        return [c for c in classes if len(c) >= self.MIN_TOKEN_LENGTH]

    def pick_token(self, cards: List[Tag]) -> Optional[str]:
        """Most frequent token occurring on enough cards; first seen wins ties."""
        counts: Dict[str, int] = OrderedDict()
        for card in cards:
            for token in OrderedDict.fromkeys(self.class_tokens(card)):
                counts[token] = counts.get(token, 0) + 1

        best_token = None
        max_count = 0
        for token, count in counts.items():
            if count > max_count and count >= self.MIN_TOKEN_COUNT:
                best_token = token
                max_count = count
        return best_token

    def extract(self, soup: BeautifulSoup, base_url: str) -> List[ProductCandidate]:
        cards = self.potential_cards(soup)
        self.best_token = self.pick_token(cards)
        if not self.best_token:
            return []

        marked = [card for card in cards if self.best_token in self.class_tokens(card)]
        logger.debug("Token %s marks %d potential cards", self.best_token, len(marked))
        return self._valid_candidates(marked, base_url)

    def describe(self) -> str:
        return f"Heuristic (token: {self.best_token})" if self.best_token else self.name


class ListingExtractor:
    """Find all product cards on a listing page."""

    def __init__(
        self,
        card_extractor: Optional[CardExtractor] = None,
        max_candidates: int = MAX_CANDIDATES
    ):
        self.card_extractor = card_extractor or CardExtractor()
        self.max_candidates = max_candidates

    def build_strategies(self) -> List[ExtractionStrategy]:
        """Fresh strategy objects per call; nothing is shared between pages."""
        return [
            SelectorStrategy(self.card_extractor),
            TokenFrequencyStrategy(self.card_extractor),
        ]

    def extract(self, html: str, base_url: str) -> List[ProductCandidate]:
        """
        Extract product candidates from a listing page.

        Args:
            html: Rendered page HTML
            base_url: URL the page was fetched from

        Returns:
            Deduplicated candidates, empty when nothing card-like is found
        """
        return self.extract_with_report(html, base_url).candidates

    def extract_with_report(self, html: str, base_url: str) -> ExtractionReport:
        """Same as ``extract`` but also reports which strategy won and why."""
        if not html:
            return ExtractionReport(method='none')

        soup = BeautifulSoup(html, 'html.parser')
        winner, results = self._run_tournament(soup, base_url)

        if winner is None:
            logger.info("[ListingExtractor] No product cards found on %s", base_url)
            return ExtractionReport(
                method='none',
                strategy_counts={name: len(c) for name, c in results}
            )

        method, candidates = winner
        unique = dedupe_candidates(candidates)[:self.max_candidates]
        logger.info(
            "[ListingExtractor] %s won with %d candidates (%d after dedupe)",
            method, len(candidates), len(unique)
        )
        return ExtractionReport(
            method=method,
            candidates=unique,
            strategy_counts={name: len(c) for name, c in results},
        )

    def _run_tournament(
        self,
        soup: BeautifulSoup,
        base_url: str
    ) -> Tuple[Optional[Tuple[str, List[ProductCandidate]]], List[Tuple[str, List[ProductCandidate]]]]:
        results = []
        winner = None

        for strategy in self.build_strategies():
            candidates = strategy.extract(soup, base_url)
            results.append((strategy.name, candidates))
            if candidates and (winner is None or len(candidates) > len(winner[1])):
                winner = (strategy.describe(), candidates)

        return winner, results
