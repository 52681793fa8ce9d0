"""HTML acquisition: plain HTTP with an optional rendering browser in front."""

import logging
import time
from typing import Dict, Optional

import requests

from ..core.config import EngineConfig
from ..core.models import FetchResult

logger = logging.getLogger(__name__)

SOFT_404_MARKERS = ('Error 404', 'Page Not Found')
SOFT_404_MAX_LENGTH = 15000


def is_error_page(html: Optional[str], status_code: Optional[int] = None) -> bool:
    """Plain 404s and pages that announce themselves as one."""
    if status_code == 404:
        return True
    return bool(html) and any(marker in html for marker in SOFT_404_MARKERS)


def is_soft_404(html: Optional[str], status_code: Optional[int] = None) -> bool:
    """
    Error pages served with a 200 status, or plain 404s.

    Short pages that merely mention "404" also count, so only use this where
    another source remains to fall back on.
    """
    if is_error_page(html, status_code):
        return True
    return bool(html) and '404' in html and len(html) < SOFT_404_MAX_LENGTH


class HTTPClient:
    """Wrapper for static HTML requests."""

    def __init__(self, timeout: int = 15, user_agent: Optional[str] = None, session=None):
        self.timeout = timeout
        self.headers: Dict[str, str] = {
            'Accept': 'text/html,application/xhtml+xml',
            'Accept-Language': 'es-ES,es;q=0.9,en;q=0.8',
        }
        if user_agent:
            self.headers['User-Agent'] = user_agent
        self.session = session or requests.Session()

    def fetch(self, url: str) -> FetchResult:
        """
        Download a page.

        Args:
            url: Page URL

        Returns:
            FetchResult with ``method='static'``; failures carry the error text
        """
        start = time.time()
        try:
            response = self.session.get(url, headers=self.headers, timeout=self.timeout)
        except requests.exceptions.Timeout:
            logger.warning("Timeout fetching %s", url)
            return FetchResult(success=False, error='Timeout', method='static', duration=time.time() - start)
        except requests.exceptions.RequestException as e:
            logger.warning("Request failed for %s: %s", url, e)
            return FetchResult(success=False, error=str(e), method='static', duration=time.time() - start)

        duration = time.time() - start
        html = response.text
        if response.status_code >= 400 or is_error_page(html, response.status_code):
            logger.info("Unusable page %s (status %s)", url, response.status_code)
            return FetchResult(
                success=False,
                html=html,
                error=f"HTTP {response.status_code}" if response.status_code >= 400 else 'Soft 404',
                method='static',
                status_code=response.status_code,
                duration=duration,
            )

        return FetchResult(
            success=True,
            html=html,
            method='static',
            status_code=response.status_code,
            duration=duration,
        )


class HybridFetcher:
    """
    Browser first, static HTTP as the fallback.

    The rendered page is kept only when it is long enough and not an error
    page; otherwise the static client is tried.
    """

    def __init__(self, config: Optional[EngineConfig] = None, client: Optional[HTTPClient] = None, browser=None):
        self.config = config or EngineConfig()
        self.client = client or HTTPClient(
            timeout=self.config.request_timeout,
            user_agent=self.config.user_agent
        )
        if browser is None and self.config.use_browser:
            from ..interactive.snapshot import BrowserConfig, PageSnapshotter
            browser = PageSnapshotter(BrowserConfig(
                timeout=self.config.request_timeout * 1000,
                viewport=self.config.viewport,
                user_agent=self.config.user_agent,
            ))
        self.browser = browser

    def fetch(self, url: str) -> FetchResult:
        if self.browser is not None:
            rendered = self.browser.render(url)
            length = len(rendered.html or '')
            if (
                rendered.success
                and length > self.config.min_html_length
                and not is_soft_404(rendered.html, rendered.status_code)
            ):
                logger.info("[HybridFetcher] Browser succeeded for %s (%d chars)", url, length)
                return rendered
            logger.info("[HybridFetcher] Browser result unusable for %s, falling back to static", url)

        return self.client.fetch(url)
