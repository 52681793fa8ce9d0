"""Turn operator captures into product records without a second page load."""

import logging
from typing import Iterable, List, Optional

from bs4 import BeautifulSoup

from ..core.config import PROXY_MARKER
from ..core.models import PLACEHOLDER_TITLE, CapturedProduct, InteractiveCapture
from ..extractors.card_extractor import CardExtractor, image_source
from ..extractors.price_extractor import parse_price
from ..utils.url_utils import URLUtils

logger = logging.getLogger(__name__)

CAPTURE_TITLE = "Producto capturado"
NOISE_TAGS = ['script', 'style', 'link', 'noscript', 'iframe']
CURRENCIES = {'€': 'EUR', '$': 'USD', '£': 'GBP'}
DEFAULT_CURRENCY = 'EUR'


def currency_of(price: Optional[str]) -> str:
    for symbol, code in CURRENCIES.items():
        if price and symbol in price:
            return code
    return DEFAULT_CURRENCY


class CaptureProcessor:
    """
    Read title, price, image and dimensions out of a captured snippet.

    The capture already carries the operator's choice of image and link;
    those win over whatever the snippet holds.
    """

    def __init__(self, card_extractor: Optional[CardExtractor] = None, proxy_marker: str = PROXY_MARKER):
        self.card_extractor = card_extractor or CardExtractor()
        self.proxy_marker = proxy_marker

    def to_product(self, capture: InteractiveCapture) -> Optional[CapturedProduct]:
        """
        Build a product record from one capture.

        Args:
            capture: Selection confirmed in the pointer classifier

        Returns:
            CapturedProduct, or None when the snippet holds no element
        """
        soup = BeautifulSoup(capture.html or '', 'html.parser')
        for tag in soup.find_all(NOISE_TAGS):
            tag.decompose()

        container = soup.find(True)
        if container is None:
            logger.warning("Capture from %s has no HTML, skipping", capture.url)
            return None

        page_url = URLUtils.unwrap_proxy_url(capture.url, self.proxy_marker)
        product_url = capture.product_url or page_url
        candidate = self.card_extractor.extract(container, page_url or product_url)

        image_url = capture.preview_image
        if not image_url:
            src = image_source(container if container.name == 'img' else container.find('img'))
            image_url = URLUtils.resolve_or_keep(src, page_url or product_url) if src else None

        title = candidate.title
        if not title or title == PLACEHOLDER_TITLE:
            title = CAPTURE_TITLE

        product = CapturedProduct(
            title=title,
            brand=URLUtils.store_name(page_url),
            product_url=product_url,
            price=candidate.price,
            price_value=parse_price(candidate.price),
            currency=currency_of(candidate.price),
            image_url=image_url,
            images=[image_url] if image_url else [],
            dimensions=candidate.dimensions,
            captured_at=capture.timestamp,
        )
        logger.info("Processed capture: %s (%s)", product.title[:30], product.price or 'no price')
        return product

    def process(self, captures: Iterable[InteractiveCapture]) -> List[CapturedProduct]:
        """Products for every capture that yields one, in capture order."""
        products = []
        for capture in captures:
            product = self.to_product(capture)
            if product is not None:
                products.append(product)
        return products
