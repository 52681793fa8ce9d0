"""Per-element product scoring for the pointer classifier.

The element under the cursor is usually an image or a text leaf, so the
scorer walks up the ancestors and keeps the best-scoring container.
"""

import logging
import re
from typing import Optional

from bs4 import Tag

from ..core.config import ANCESTOR_DEPTH, SCORE_THRESHOLD
from ..core.models import ScoredElement
from ..extractors.price_extractor import PriceExtractor
from .dom import PageView

logger = logging.getLogger(__name__)

STRUCTURAL_SELECTOR = 'header, footer, nav, aside, .cookie-banner, #didomi-host'
HEADING_TAGS = ['h2', 'h3', 'h4', 'h5', 'h6']
CTA_SELECTOR = 'button, a.btn, a.button, .btn'
SEMANTIC_TAGS = ('article', 'li', 'div')
WALK_STOP_TAGS = ('body', 'html', '[document]')

# Currency symbol or ISO code next to an amount, or an amount on its own
PRICE_PATTERN = re.compile(
    rf'[€$£]\s*\d|\b(?:USD|EUR|GBP)\b|(?<![\w.,]){PriceExtractor.AMOUNT_PATTERN}(?!\w)'
)
TITLE_CLASS_PATTERN = re.compile(r'title|name|product-name', re.IGNORECASE)
SEMANTIC_CLASS_PATTERN = re.compile(r'product|item|card|listing|grid-item', re.IGNORECASE)
CTA_PATTERN = re.compile(r'add|cart|buy|shop|comprar|cesta|ver|detalles|añadir', re.IGNORECASE)

EXCLUSION_SCORE = -100
OVERSIZE_PENALTY = -50
OVERSIZE_RATIO = 0.95
PRICE_WEIGHT = 35
TITLE_WEIGHT = 25
IMAGE_WEIGHT = 20
LARGE_IMAGE_BONUS = 10
SEMANTIC_WEIGHT = 10
CTA_WEIGHT = 10
MIN_IMAGE_SIDE = 50
LARGE_IMAGE_WIDTH = 200


def class_string(tag: Tag) -> str:
    classes = tag.get('class') or []
    if isinstance(classes, str):
        return classes
    return ' '.join(classes)


class ProductScorer:
    """Score elements of a rendered page as product-card candidates."""

    def __init__(self, view: PageView, threshold: int = SCORE_THRESHOLD, depth: int = ANCESTOR_DEPTH):
        self.view = view
        self.threshold = threshold
        self.depth = depth

    def score(self, tag: Tag) -> int:
        """
        Weighted product score of one element.

        Structural chrome (header, footer, nav, aside, cookie banners) scores
        -100 regardless of any other signal.
        """
        if tag is None or tag.name in WALK_STOP_TAGS:
            return 0
        if tag.css.closest(STRUCTURAL_SELECTOR) is not None:
            return EXCLUSION_SCORE

        score = 0
        classes = class_string(tag)

        rect = self.view.layout.rect_of(tag)
        if rect is not None and rect.width > self.view.viewport_width * OVERSIZE_RATIO:
            score += OVERSIZE_PENALTY

        if PRICE_PATTERN.search(tag.get_text()):
            score += PRICE_WEIGHT

        has_heading = tag.name in HEADING_TAGS or tag.find(HEADING_TAGS) is not None
        if has_heading or TITLE_CLASS_PATTERN.search(classes):
            score += TITLE_WEIGHT

        img = tag.find('img')
        if img is not None:
            width, height = self.view.layout.size_of(img)
            if width >= MIN_IMAGE_SIDE and height >= MIN_IMAGE_SIDE:
                score += IMAGE_WEIGHT
                if width >= LARGE_IMAGE_WIDTH:
                    score += LARGE_IMAGE_BONUS

        element_id = str(tag.get('id') or '')
        if (
            (tag.name in SEMANTIC_TAGS and SEMANTIC_CLASS_PATTERN.search(classes)) or
            SEMANTIC_CLASS_PATTERN.search(element_id)
        ):
            score += SEMANTIC_WEIGHT

        button = tag.select_one(CTA_SELECTOR)
        if button is not None and CTA_PATTERN.search(button.get_text()):
            score += CTA_WEIGHT

        return score

    def find_best(self, target: Tag) -> Optional[ScoredElement]:
        """
        Best-scoring element among ``target`` and its ancestors.

        Args:
            target: Element under the pointer

        Returns:
            The maximum over the walk (first wins ties) if it reaches the
            threshold, else None
        """
        best: Optional[ScoredElement] = None
        current = target
        depth = 0

        while current is not None and current.name not in WALK_STOP_TAGS and depth < self.depth:
            score = self.score(current)
            if best is None or score > best.score:
                best = ScoredElement(element=current, score=score)
            current = current.parent
            depth += 1

        if best is None or best.score < self.threshold:
            return None

        logger.debug("Best candidate <%s> scored %d", best.element.name, best.score)
        return best
