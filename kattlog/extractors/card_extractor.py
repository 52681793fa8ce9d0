"""Extract a product candidate from one card-shaped DOM element."""

import logging
from typing import Callable, List, Optional, Tuple

from bs4 import Tag

from ..classifiers.image_filter import is_valid_image_url
from ..core.config import PRIMARY_IMAGE_INDEX
from ..core.models import PLACEHOLDER_TITLE, ProductCandidate
from ..utils.url_utils import URLUtils
from .dimension_extractor import DimensionExtractor
from .price_extractor import PriceExtractor

logger = logging.getLogger(__name__)

TITLE_SELECTOR = (
    'h1, h2, h3, h4, h5, .product-name, .product-title, '
    '.c-product-card__title, .o-card__title, a.product-link'
)
PRICE_SELECTOR = (
    '.price, .amount, [data-price], [class*="price"], [class*="precio"], '
    '.c-product-card__price, .o-card__price, '
    'span:-soup-contains("€"), span:-soup-contains("$")'
)
DESCRIPTION_SELECTOR = '[class*="description"], [class*="descripcion"], .excerpt'

MIN_TITLE_LENGTH = 5
MAX_TITLE_LENGTH = 150
TRUNCATED_TITLE_LENGTH = 80

# (name, extractor, accept) evaluated in order; first accepted value wins
TitleSource = Tuple[str, Callable[[Tag], str], Callable[[str], bool]]


def element_text(tag: Optional[Tag]) -> str:
    if tag is None:
        return ''
    return tag.get_text().strip()


def first_anchor(card: Tag) -> Optional[Tag]:
    """The card itself when it is a link, else its first link."""
    if card.name == 'a':
        return card
    return card.find('a')


def primary_image(card: Tag) -> Optional[Tag]:
    images = card.find_all('img')
    if len(images) > PRIMARY_IMAGE_INDEX:
        return images[PRIMARY_IMAGE_INDEX]
    return None


def image_source(img: Optional[Tag]) -> Optional[str]:
    if img is None:
        return None
    return img.get('src') or img.get('data-src') or None


class CardExtractor:
    """Build a ProductCandidate from a card using ordered fallback chains."""

    def __init__(
        self,
        price_extractor: Optional[PriceExtractor] = None,
        dimension_extractor: Optional[DimensionExtractor] = None
    ):
        self.price_extractor = price_extractor or PriceExtractor()
        self.dimension_extractor = dimension_extractor or DimensionExtractor()
        self.title_sources: List[TitleSource] = [
            ('image_alt', self._image_alt, lambda t: len(t) >= MIN_TITLE_LENGTH),
            ('link_title', self._link_title, lambda t: 3 < len(t) < 200),
            ('heading', self._heading_text, lambda t: len(t) > 0),
            ('link_text', self._link_text, lambda t: len(t) > 0),
        ]

    def extract(self, card: Tag, base_url: str) -> ProductCandidate:
        """
        Extract title, price, image, link and extras from one card.

        Args:
            card: Element believed to represent one product
            base_url: Page URL used to resolve relative links

        Returns:
            A candidate; validity is decided by the caller
        """
        img = primary_image(card)
        src = image_source(img)
        alt = img.get('alt', '') if img is not None else ''

        image_url = None
        if is_valid_image_url(src, alt):
            image_url = URLUtils.resolve_or_keep(src, base_url)

        anchor = first_anchor(card)
        product_url = None
        if anchor is not None and anchor.get('href'):
            product_url = URLUtils.resolve(anchor['href'], base_url)

        card_text = card.get_text()
        price = self.price_extractor.extract_card_price(
            self._price_text(card),
            card_text
        )

        title = self.resolve_title(card)
        description = element_text(card.select_one(DESCRIPTION_SELECTOR)) or None
        if len(title) > MAX_TITLE_LENGTH:
            # A description rendered where the title should be
            if not description:
                description = title
            title = title[:TRUNCATED_TITLE_LENGTH] + '...'

        dimensions = self.dimension_extractor.extract(
            ' '.join(card_text.split()),
            title
        )

        return ProductCandidate(
            title=title or PLACEHOLDER_TITLE,
            price=price,
            image_url=image_url,
            product_url=product_url,
            description=description,
            dimensions=dimensions,
            html_block=card.decode_contents(),
        )

    def resolve_title(self, card: Tag) -> str:
        """Run the title chain; keep the first non-empty value if none is accepted."""
        fallback = ''
        for name, extract, accept in self.title_sources:
            value = ' '.join(extract(card).split())
            if not value:
                continue
            if accept(value):
                logger.debug("Title from %s: %s", name, value[:40])
                return value
            fallback = fallback or value
        return fallback

    # ------------------------------------------------------------------
    # Title sources
    # ------------------------------------------------------------------

    def _image_alt(self, card: Tag) -> str:
        img = primary_image(card)
        return img.get('alt', '') if img is not None else ''

    def _link_title(self, card: Tag) -> str:
        anchor = first_anchor(card)
        return anchor.get('title', '') if anchor is not None else ''

    def _heading_text(self, card: Tag) -> str:
        for heading in card.select(TITLE_SELECTOR):
            text = element_text(heading)
            if text:
                return text
        return ''

    def _link_text(self, card: Tag) -> str:
        return element_text(first_anchor(card))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _price_text(self, card: Tag) -> Optional[str]:
        """Text of the last price-shaped element; discounted prices come last."""
        matches = card.select(PRICE_SELECTOR)
        if not matches:
            return None
        return matches[-1].get_text()
