"""Render pages with Playwright for geometry-aware classification."""

import logging
import time
from dataclasses import dataclass, field
from typing import Dict, Optional

from ..core.models import FetchResult
from .dom import RECT_ATTRIBUTE, PageView

logger = logging.getLogger(__name__)

# Stamps each element's viewport box so the DOM can be scored offline
STAMP_RECTS_SCRIPT = """
(attribute) => {
    document.querySelectorAll('*').forEach(el => {
        const r = el.getBoundingClientRect();
        el.setAttribute(attribute, [r.left, r.top, r.width, r.height].map(v => Math.round(v)).join(','));
    });
    return [window.scrollX, window.scrollY];
}
"""


@dataclass
class BrowserConfig:
    """Configuration for browser execution."""
    headless: bool = True
    timeout: int = 30000  # ms
    wait_after_load: int = 1000  # ms
    viewport: Dict = field(default_factory=lambda: {'width': 1280, 'height': 720})
    user_agent: str = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36'


class PageSnapshotter:
    """
    Load a page in Chromium and return its rendered HTML.

    Requires the ``browser`` extra (``pip install kattlog[browser]`` and
    ``playwright install chromium``).
    """

    def __init__(self, config: Optional[BrowserConfig] = None):
        self.config = config or BrowserConfig()
        self.last_error: Optional[str] = None

    def render(self, url: str) -> FetchResult:
        """Rendered HTML with element boxes stamped on every tag."""
        start = time.time()
        html, _, status = self._capture(url)
        if html is None:
            return FetchResult(
                success=False,
                error=self.last_error,
                method="browser",
                duration=time.time() - start,
            )
        return FetchResult(
            success=True,
            html=html,
            method="browser",
            status_code=status,
            duration=time.time() - start,
        )

    def snapshot(self, url: str) -> Optional[PageView]:
        """Rendered page as a PageView, or None if the browser failed."""
        html, scroll, _ = self._capture(url)
        if html is None:
            return None
        return PageView.from_html(html, url, viewport=self.config.viewport, scroll=scroll)

    def _capture(self, url: str):
        try:
            from playwright.sync_api import Error as PlaywrightError, sync_playwright
        except ImportError:
            self.last_error = "Playwright not installed. Run: pip install playwright && playwright install chromium"
            logger.warning(self.last_error)
            return None, (0.0, 0.0), None

        try:
            with sync_playwright() as playwright:
                browser = playwright.chromium.launch(headless=self.config.headless)
                try:
                    context = browser.new_context(
                        viewport=self.config.viewport,
                        user_agent=self.config.user_agent
                    )
                    page = context.new_page()
                    page.set_default_timeout(self.config.timeout)
                    response = page.goto(url, wait_until="domcontentloaded")
                    status = response.status if response is not None else None
                    page.wait_for_timeout(self.config.wait_after_load)
                    scroll = page.evaluate(STAMP_RECTS_SCRIPT, RECT_ATTRIBUTE)
                    html = page.content()
                finally:
                    browser.close()
        except PlaywrightError as e:
            self.last_error = str(e)
            logger.warning("Browser render failed for %s: %s", url, e)
            return None, (0.0, 0.0), None

        logger.info("Rendered %s (%d chars)", url, len(html))
        return html, (float(scroll[0]), float(scroll[1])), status
