"""Category link extraction for hub and root pages.

Three passes share one link test (same host, not the current page, not a
media file) and the category-name filter:

* global navigation: menus and headers, then footers when menus are thin
* content categories: image cards in the main region that show no price
* nav HTML selection: the most category-dense containers, as raw HTML for
  the optional AI namer
"""

import copy
import logging
import re
from typing import Dict, List, Optional, Tuple

from bs4 import BeautifulSoup, Tag

from ..classifiers.category_filter import clean_category_name, is_valid_category_name
from ..core.config import MAX_CONTENT_CATEGORIES, MAX_NAV_CATEGORIES
from ..core.models import Category
from ..utils.url_utils import URLUtils

logger = logging.getLogger(__name__)

NAV_SELECTORS = [
    'nav', 'header', '.header', '.menu', '.navigation', '.nav', '.navbar',
    '.sidebar', '[role="navigation"]', '#menu', '#header', '.c-main-nav',
    '.c-header__main',
]
FOOTER_SELECTORS = [
    'footer', '.footer', '.c-footer', '.site-footer', '#footer',
    '.c-footer-nav__column',
]
MAIN_SELECTORS = ['main', '#content', '.content', '.page-content', '.container', 'body']
CONTAINER_SELECTORS = [
    '.c-slider-carousel__list', '.category-carousel', '.main-categories-slider',
    'nav', 'header', '.header', '.main-menu', '.primary-navigation',
    '.top-menu', '#main-menu', '[role="navigation"]', '.c-main-nav',
    '.c-header__nav', '.c-section', '.st-group-section', 'section',
]
CATALOG_KEYWORDS = ('productos', 'tienda', 'shop', 'categorías', 'catálogo', 'muebles', 'colecciones')

ICON_SELECTOR = 'img, svg, i, .icon'
CHROME_SELECTOR = 'header, nav, footer, .header, .footer'
CARD_TITLE_SELECTOR = 'h2, h3, h4, .title, .category-name'
PRICE_CLASS_SELECTOR = '[class*="price"], [class*="precio"], [data-price]'

PRICE_TEXT_PATTERN = re.compile(r'\d+[.,]\d{2}\s*[€$£]|[€$£]\s*\d+[.,]\d{2}')
PRICE_MARKUP_PATTERN = re.compile(r'price|precio|cost|amount', re.IGNORECASE)
PRODUCT_URL_PATTERN = re.compile(r'/p/|/product/|/articulo/|/item/', re.IGNORECASE)

MIN_FOOTER_FALLBACK = 3
MIN_CONTAINER_LINKS = 3
MAX_CONTAINER_LINKS = 150
MIN_VALID_LINKS = 2
ANCHOR_BOOST = 2.5
LIST_BOOST = 1.2
MAX_NAV_CONTAINERS = 10
NAV_HTML_FALLBACK_LENGTH = 15000


def link_name(anchor: Tag) -> str:
    """Anchor ``title`` attribute, else its text with icons removed."""
    name = (anchor.get('title') or '').strip()
    if name:
        return name
    clone = copy.copy(anchor)
    for icon in clone.select(ICON_SELECTOR):
        icon.decompose()
    return clone.get_text().strip()


def title_case(name: str) -> str:
    return ' '.join(word[:1].upper() + word[1:] for word in name.split(' '))


class CategoryExtractor:
    """Rule-based category discovery."""

    def __init__(
        self,
        max_nav_categories: int = MAX_NAV_CATEGORIES,
        max_content_categories: int = MAX_CONTENT_CATEGORIES
    ):
        self.max_nav_categories = max_nav_categories
        self.max_content_categories = max_content_categories

    # ------------------------------------------------------------------
    # Global navigation
    # ------------------------------------------------------------------

    def extract_global_navigation(self, html: str, base_url: str) -> List[Category]:
        """
        Categories from the site's menus.

        Args:
            html: Page HTML
            base_url: URL the page was fetched from

        Returns:
            Title-cased text categories, first occurrence per name
        """
        if not html:
            return []

        soup = BeautifulSoup(html, 'html.parser')
        found: Dict[str, str] = {}

        nav_anchors = soup.select(', '.join(f'{s} a' for s in NAV_SELECTORS))
        if soup.select_one(', '.join(NAV_SELECTORS)) is not None:
            self._collect_links(nav_anchors, base_url, found)
        else:
            self._collect_links(soup.find_all('a'), base_url, found)

        if len(found) < MIN_FOOTER_FALLBACK:
            footer_anchors = soup.select(', '.join(f'{s} a' for s in FOOTER_SELECTORS))
            if footer_anchors:
                logger.debug("Only %d menu categories, scanning footer", len(found))
                self._collect_links(footer_anchors, base_url, found)

        categories = [
            Category(name=title_case(key), url=url, type='text')
            for key, url in found.items()
        ]
        logger.info("Global navigation: %d categories on %s", len(categories), base_url)
        return categories[:self.max_nav_categories]

    def _collect_links(self, anchors: List[Tag], base_url: str, found: Dict[str, str]):
        for anchor in anchors:
            href = anchor.get('href')
            name = clean_category_name(link_name(anchor))
            if not href or not name or not is_valid_category_name(name):
                continue

            url = URLUtils.resolve(href, base_url)
            if not url or not URLUtils.is_category_link(url, base_url):
                continue

            key = name.lower()
            if key not in found:
                found[key] = url

    # ------------------------------------------------------------------
    # Content categories
    # ------------------------------------------------------------------

    def extract_content_categories(self, html: str, base_url: str) -> List[Category]:
        """
        Category cards in the page's main content.

        Image cards with a link and no price signal are categories; a priced
        card is a product.
        """
        if not html:
            return []

        soup = BeautifulSoup(html, 'html.parser')
        context = self._main_region(soup)
        if context is None:
            return []

        categories = []
        seen_urls = set()
        seen_names = set()

        for element in context.find_all(['div', 'article', 'li', 'a']):
            link = self._category_card_link(element)
            if link is None:
                continue

            name = clean_category_name(self._card_name(element, link))
            if not name or not is_valid_category_name(name):
                continue
            if 'ver todo' in name.lower():
                continue

            url = URLUtils.resolve(link['href'], base_url)
            if not url or url == base_url or not URLUtils.is_category_link(url, base_url):
                continue

            key = name.lower()
            if url in seen_urls or key in seen_names:
                continue
            seen_urls.add(url)
            seen_names.add(key)
            categories.append(Category(name=name, url=url, type='card'))

        logger.info("Content categories: %d on %s", len(categories), base_url)
        return categories[:self.max_content_categories]

    def _main_region(self, soup: BeautifulSoup) -> Optional[Tag]:
        for selector in MAIN_SELECTORS:
            region = soup.select_one(selector)
            if region is not None:
                return region
        return None

    def _category_card_link(self, element: Tag) -> Optional[Tag]:
        """The card's link if the element looks like a category card."""
        if element.css.closest(CHROME_SELECTOR) is not None:
            return None
        if element.find('img') is None:
            return None

        link = element if element.name == 'a' else element.find('a')
        if link is None or not link.get('href'):
            return None

        if self._has_price_signal(element):
            return None
        if PRODUCT_URL_PATTERN.search(link['href']):
            return None
        return link

    def _has_price_signal(self, element: Tag) -> bool:
        return (
            PRICE_TEXT_PATTERN.search(element.get_text()) is not None
            or element.select_one(PRICE_CLASS_SELECTOR) is not None
            or PRICE_MARKUP_PATTERN.search(element.decode_contents()) is not None
        )

    def _card_name(self, element: Tag, link: Tag) -> str:
        heading = element.select_one(CARD_TITLE_SELECTOR)
        if heading is not None and heading.get_text().strip():
            return heading.get_text().strip()
        if link.get('title'):
            return link['title']
        img = element.find('img')
        if img is not None and img.get('alt'):
            return img['alt']
        return link.get_text().strip()

    # ------------------------------------------------------------------
    # Nav HTML selection
    # ------------------------------------------------------------------

    def extract_nav_html(self, html: str) -> str:
        """
        Raw HTML of the containers most likely to hold the category menu.

        Returns:
            Up to 10 non-nested containers joined by ``<hr>``, else the start
            of the body
        """
        if not html:
            return ''

        soup = BeautifulSoup(html, 'html.parser')
        catalog_anchors = [
            el for el in soup.find_all(['a', 'button', 'span'])
            if self._is_catalog_anchor(el)
        ]

        scored: List[Tuple[float, Tag]] = []
        seen = set()
        for selector in CONTAINER_SELECTORS:
            for container in soup.select(selector):
                if id(container) in seen:
                    continue
                seen.add(id(container))
                score = self.score_container(container, catalog_anchors)
                if score is not None:
                    scored.append(score)

        # Stable sort keeps selector order for equal ranks
        scored.sort(key=lambda item: item[0], reverse=True)

        selected: List[Tag] = []
        for _, container in scored:
            if len(selected) >= MAX_NAV_CONTAINERS:
                break
            if any(self._nested(container, other) for other in selected):
                continue
            selected.append(container)

        if selected:
            logger.info("[extract_nav_html] Selected %d relevant containers", len(selected))
            return '\n<hr>\n'.join(str(container) for container in selected)

        body = soup.body or soup
        return body.decode_contents()[:NAV_HTML_FALLBACK_LENGTH]

    def score_container(self, container: Tag, catalog_anchors: List[Tag]) -> Optional[Tuple[float, Tag]]:
        """Rank of a container as ``link_count * score``, or None if unsuitable."""
        if container.css.closest('footer') is not None:
            return None

        links = container.find_all('a')
        if len(links) < MIN_CONTAINER_LINKS or len(links) > MAX_CONTAINER_LINKS:
            return None

        valid = sum(1 for a in links if is_valid_category_name(a.get_text().strip()))
        if valid < MIN_VALID_LINKS:
            return None

        score = valid / len(links)
        if any(self._related(container, anchor) for anchor in catalog_anchors):
            score *= ANCHOR_BOOST
        if container.find(['ul', 'li']) is not None:
            score *= LIST_BOOST

        return len(links) * score, container

    def _is_catalog_anchor(self, element: Tag) -> bool:
        text = element.get_text().strip().lower()
        return any(keyword in text for keyword in CATALOG_KEYWORDS)

    def _related(self, container: Tag, anchor: Tag) -> bool:
        """Container is, holds, or sits beside the catalog entry anchor."""
        if anchor is container or self._contains(container, anchor):
            return True
        for sibling in self._siblings(container):
            if sibling is anchor or self._contains(sibling, anchor):
                return True
        parent = container.parent
        if parent is not None:
            for sibling in self._siblings(parent):
                if self._contains(sibling, anchor):
                    return True
        return False

    @staticmethod
    def _siblings(tag: Tag) -> List[Tag]:
        parent = tag.parent
        if parent is None:
            return []
        return [child for child in parent.find_all(recursive=False) if child is not tag]

    @staticmethod
    def _contains(container: Tag, element: Tag) -> bool:
        return any(parent is container for parent in element.parents)

    @classmethod
    def _nested(cls, a: Tag, b: Tag) -> bool:
        return a is b or cls._contains(a, b) or cls._contains(b, a)
