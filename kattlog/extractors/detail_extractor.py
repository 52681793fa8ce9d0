"""Extract product information from a single product page."""

import json
import logging
import re
from typing import List, Optional

from bs4 import BeautifulSoup

from ..core.models import ProductCandidate, ProductDetails
from ..utils.url_utils import URLUtils
from .dimension_extractor import DimensionExtractor

logger = logging.getLogger(__name__)

TITLE_PRICE_SELECTOR = '.price, .current-price, [itemprop="price"], .product-price'
TITLE_DESCRIPTION_SELECTOR = '#description, .product-description, [itemprop="description"], .description'
MAIN_IMAGE_SELECTOR = '.product-image img, .main-image img'

GALLERY_SELECTOR = (
    '.c-product-gallery__list img, .o-product-image, .c-lightbox__img, '
    '.js-product-card-image, .c-product-card__image'
)
GALLERY_EXCLUDE = '.c-slider-carousel-section, .related-products, .cross-sell, .upsell, .c-product-card'
MAIN_CONTENT_SELECTOR = 'main, article, .product-container, #main-content, .page-content, .l-details-main-content'
CONTENT_EXCLUDE = (
    '.c-slider-carousel-section, .related-products, .cross-sell, .upsell, '
    '.recommended, .accessories, .footer, nav, header, .c-product-card, '
    '.c-product-gallery__bullets'
)
IMAGE_TOKEN_DENYLIST = (
    'logo', 'icon', 'banner', 'svg', 'payment', '1x1', 'pixel', 'loader',
    'placeholder', 'swatch', 'texture', 'pattern',
)
DESCRIPTION_SELECTORS = ['.product-description', '.description', '[class*="description"]']

MAX_IMAGES = 15
MAX_DESCRIPTION_LENGTH = 500
HTML_BLOCK_LENGTH = 2000

WORDS = r'[A-Za-zÀ-ÿ\s]'
MATERIAL_PATTERN = re.compile(
    rf'Material[:\s]+({WORDS}+?)(?=Material|Características|Colores|[^A-Za-zÀ-ÿ\s]|$)',
    re.IGNORECASE
)
COLOR_PATTERN = re.compile(
    rf'Colores?[:\s]+({WORDS}+?)(?=\s*Peso|Material|Uso|[^A-Za-zÀ-ÿ\s]|$)',
    re.IGNORECASE
)
HWD_PATTERN = re.compile(r'[HWD]\s*\d+(?:[.,]\d+)?\s*[x×*]\s*[HWD]\s*\d+(?:[.,]\d+)?', re.IGNORECASE)
CSS_MARKERS = ('var(', '--', '{', 'body')


def meta_content(soup: BeautifulSoup, **attrs) -> str:
    tag = soup.find('meta', attrs=attrs)
    if tag is None:
        return ''
    return (tag.get('content') or '').strip()


def first_text(soup: BeautifulSoup, selector: str) -> str:
    tag = soup.select_one(selector)
    return tag.get_text().strip() if tag is not None else ''


class ProductDetailExtractor:
    """Parse product pages into candidates and detail records."""

    def __init__(self, dimension_extractor: Optional[DimensionExtractor] = None):
        self.dimension_extractor = dimension_extractor or DimensionExtractor()

    def parse(self, html: str, url: str) -> ProductCandidate:
        """
        Build a single candidate from a product page.

        Args:
            html: Product page HTML
            url: Product page URL

        Returns:
            Candidate whose product URL is the page itself
        """
        soup = BeautifulSoup(html or '', 'html.parser')

        title = first_text(soup, 'h1') or meta_content(soup, property='og:title')
        price = first_text(soup, TITLE_PRICE_SELECTOR) or meta_content(soup, property='product:price:amount')
        description = (
            first_text(soup, TITLE_DESCRIPTION_SELECTOR) or
            meta_content(soup, property='og:description')
        )

        image = meta_content(soup, property='og:image')
        if not image:
            img = soup.select_one(MAIN_IMAGE_SELECTOR)
            image = img.get('src', '') if img is not None else ''

        return ProductCandidate(
            title=' '.join(title.split()),
            price=price or None,
            image_url=URLUtils.resolve_or_keep(image, url) if image else None,
            product_url=url,
            description=description or None,
            dimensions=self._page_dimensions(self._body_text(soup)),
            html_block=(html or '')[:HTML_BLOCK_LENGTH],
        )

    def extract_details(self, html: str, url: str) -> ProductDetails:
        """
        Extract gallery images, dimensions, description, materials and colors.

        Args:
            html: Product page HTML
            url: Product page URL, used to absolutise images

        Returns:
            ProductDetails with at most 15 unique images
        """
        soup = BeautifulSoup(html or '', 'html.parser')
        body_text = self._body_text(soup)

        images = self._unique(
            self._json_ld_images(soup) +
            self._gallery_images(soup) +
            self._content_images(soup, url)
        )
        logger.info("[ProductDetailExtractor] Found %d images on %s", min(len(images), MAX_IMAGES), url)

        dimensions = (
            self.dimension_extractor.extract_labeled(body_text) or
            self.dimension_extractor.extract(body_text)
        )

        return ProductDetails(
            images=images[:MAX_IMAGES],
            dimensions=dimensions,
            description=self._description(soup)[:MAX_DESCRIPTION_LENGTH],
            materials=self._materials(body_text),
            colors=self._colors(body_text),
        )

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def _json_ld_images(self, soup: BeautifulSoup) -> List[str]:
        images = []
        for script in soup.find_all('script', type='application/ld+json'):
            try:
                data = json.loads(script.string or '{}')
            except json.JSONDecodeError as e:
                logger.debug("Skipping invalid JSON-LD block: %s", e)
                continue

            entries = data if isinstance(data, list) else [data]
            for entry in entries:
                if not isinstance(entry, dict) or entry.get('@type') != 'Product':
                    continue
                value = entry.get('image')
                for img in (value if isinstance(value, list) else [value]):
                    if isinstance(img, str) and img.startswith('http'):
                        images.append(img)
        return images

    def _gallery_images(self, soup: BeautifulSoup) -> List[str]:
        images = []
        for img in soup.select(GALLERY_SELECTOR):
            if img.css.closest(GALLERY_EXCLUDE) is not None:
                continue
            src = img.get('src') or img.get('data-src') or img.get('data-pswp-src')
            if src and src.startswith('http'):
                images.append(src)
        return images

    def _content_images(self, soup: BeautifulSoup, url: str) -> List[str]:
        context = soup.select_one(MAIN_CONTENT_SELECTOR) or soup.body or soup
        images = []
        for img in context.find_all('img'):
            if img.css.closest(CONTENT_EXCLUDE) is not None:
                continue
            src = img.get('src') or img.get('data-src') or img.get('data-lazy-src')
            if not src or any(token in src for token in IMAGE_TOKEN_DENYLIST):
                continue
            images.append(URLUtils.resolve_or_keep(src, url))
        return images

    @staticmethod
    def _unique(images: List[str]) -> List[str]:
        return list(dict.fromkeys(images))

    # ------------------------------------------------------------------
    # Text fields
    # ------------------------------------------------------------------

    def _description(self, soup: BeautifulSoup) -> str:
        meta = meta_content(soup, name='description')
        if len(meta) > 30:
            return meta

        for selector in DESCRIPTION_SELECTORS:
            text = first_text(soup, selector)
            if len(text) > 50 and 'var(--' not in text:
                return text
        return ''

    def _materials(self, body_text: str) -> Optional[str]:
        materials = [
            match.group(1).strip()
            for match in MATERIAL_PATTERN.finditer(body_text)
        ]
        materials = [m for m in materials if 1 < len(m) < 50 and 'var(' not in m][:4]
        return ' • '.join(materials) if materials else None

    def _colors(self, body_text: str) -> Optional[str]:
        match = COLOR_PATTERN.search(body_text)
        if not match:
            return None
        color = match.group(1).strip()
        if not 2 < len(color) < 50:
            return None
        if any(marker in color for marker in CSS_MARKERS):
            return None
        return color

    def _page_dimensions(self, body_text: str) -> Optional[str]:
        """Generic, then H/W/D-prefixed, then any other dimension format."""
        generic = self.dimension_extractor.extract_tier('generic', body_text)
        if generic:
            return generic
        hwd = HWD_PATTERN.search(body_text)
        if hwd:
            return hwd.group(0).strip()
        return self.dimension_extractor.extract(body_text)

    @staticmethod
    def _body_text(soup: BeautifulSoup) -> str:
        body = soup.body or soup
        return ' '.join(body.get_text(' ').split())
