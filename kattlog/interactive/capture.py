"""Resolve a confirmed selection into an InteractiveCapture."""

import logging
import time
from typing import Callable, Optional

from bs4 import Tag

from ..core.config import PROXY_MARKER
from ..core.models import InteractiveCapture
from ..utils.url_utils import URLUtils
from .dom import PageView

logger = logging.getLogger(__name__)

TITLE_SELECTOR = 'h2, h3, h4, h5, h6, .product-name, .title'
SNIPPET_LENGTH = 150

MIN_IMAGE_AREA = 2500
TOO_SMALL_SCORE = -100
TOP_DISTANCE = 50
TOP_BONUS = 50
MAX_SIZE_TERM = 100
ASPECT_PENALTY = -50
MAX_ASPECT_RATIO = 3.0

# (tokens, searched in alt too, penalty)
IMAGE_PENALTIES = [
    (('fsc',), True, -1000),
    (('logo',), True, -500),
    (('icon',), True, -200),
    (('badge',), True, -200),
    (('rating', 'stars'), False, -200),
]


def epoch_millis() -> int:
    return int(time.time() * 1000)


class CaptureResolver:
    """Pick the representative image and canonical link of a container."""

    def __init__(
        self,
        view: PageView,
        proxy_marker: str = PROXY_MARKER,
        clock: Callable[[], int] = epoch_millis
    ):
        self.view = view
        self.proxy_marker = proxy_marker
        self.clock = clock

    def resolve(self, container: Tag) -> InteractiveCapture:
        """
        Build the capture record for a confirmed container.

        Args:
            container: Element chosen by the scorer

        Returns:
            InteractiveCapture with a de-proxied product URL
        """
        best_img = self.best_image(container)
        preview = self.image_url(best_img) if best_img is not None else None
        snippet = ' '.join(container.get_text().split())[:SNIPPET_LENGTH]

        capture = InteractiveCapture(
            html=str(container),
            url=self.view.url,
            product_url=self.canonical_link(container, best_img),
            tag_name=container.name.upper(),
            preview_image=preview,
            text_snippet=snippet,
            timestamp=self.clock(),
        )
        logger.info("Capturing product: %s -> %s", snippet[:40], capture.product_url)
        return capture

    # ------------------------------------------------------------------
    # Image
    # ------------------------------------------------------------------

    def best_image(self, container: Tag) -> Optional[Tag]:
        """Highest-scoring image; earlier images win ties."""
        best = None
        best_score = float('-inf')
        for img in container.find_all('img'):
            score = self.score_image(img, container)
            if score > best_score:
                best, best_score = img, score
        return best

    def score_image(self, img: Tag, container: Tag) -> float:
        width, height = self.view.layout.size_of(img)
        area = width * height
        if area < MIN_IMAGE_AREA:
            return TOO_SMALL_SCORE

        src = str(img.get('src') or '').lower()
        alt = str(img.get('alt') or '').lower()

        score = 0.0
        for tokens, check_alt, penalty in IMAGE_PENALTIES:
            if any(t in src or (check_alt and t in alt) for t in tokens):
                score += penalty

        img_rect = self.view.layout.rect_of(img)
        container_rect = self.view.layout.rect_of(container)
        if img_rect is not None and container_rect is not None:
            if img_rect.top - container_rect.top < TOP_DISTANCE:
                score += TOP_BONUS

        score += min(area / 1000, MAX_SIZE_TERM)

        ratio = width / height
        if ratio > MAX_ASPECT_RATIO or ratio < 1 / MAX_ASPECT_RATIO:
            score += ASPECT_PENALTY

        return score

    def image_url(self, img: Tag) -> Optional[str]:
        src = img.get('src') or img.get('data-src')
        if not src:
            return None
        return URLUtils.resolve_or_keep(src, self.view.url)

    # ------------------------------------------------------------------
    # Link
    # ------------------------------------------------------------------

    def canonical_link(self, container: Tag, best_img: Optional[Tag] = None) -> str:
        """
        Product URL for the container, proxy-unwrapped.

        Order: anchor around the best image, anchor around the first title,
        first meaningful anchor, the container itself, the page URL.
        """
        link = self._find_link(container, best_img)
        href = link.get('href') if link is not None else None
        url = URLUtils.resolve(href, self.view.url) if href else None
        return URLUtils.unwrap_proxy_url(url or self.view.url, self.proxy_marker)

    def _find_link(self, container: Tag, best_img: Optional[Tag]) -> Optional[Tag]:
        if best_img is not None:
            link = best_img.find_parent('a')
            if link is not None:
                return link

        title = container.select_one(TITLE_SELECTOR)
        if title is not None:
            link = title.css.closest('a')
            if link is not None:
                return link

        for anchor in container.find_all('a'):
            href = anchor.get('href') or ''
            if len(href) > 5 and not href.startswith('#') and 'javascript' not in href:
                return anchor

        if container.name == 'a':
            return container
        return None
