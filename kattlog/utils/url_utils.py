"""URL manipulation utilities."""

import logging
from typing import Optional
from urllib.parse import unquote, urljoin, urlparse

logger = logging.getLogger(__name__)


class URLUtils:
    """Utilities for URL resolution and validation."""

    # Links to these are never categories or products
    SKIP_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.gif', '.webp', '.svg', '.pdf')

    @staticmethod
    def resolve(url: str, base_url: str) -> Optional[str]:
        """
        Convert a relative URL to an absolute one.

        Args:
            url: The URL (relative or absolute)
            base_url: The page URL it was found on

        Returns:
            Absolute URL, or None when it cannot be parsed
        """
        if not url:
            return None
        try:
            return urljoin(base_url, url.strip())
        except ValueError:
            logger.debug("Unresolvable URL %r on %s", url, base_url)
            return None

    @staticmethod
    def resolve_or_keep(url: str, base_url: str) -> str:
        """Resolve a URL, falling back to the raw value."""
        return URLUtils.resolve(url, base_url) or url

    @staticmethod
    def hostname(url: str) -> str:
        try:
            return (urlparse(url).hostname or '').lower()
        except ValueError:
            return ''

    @staticmethod
    def is_same_host(url: str, base_url: str) -> bool:
        """Check if two URLs share a hostname."""
        host = URLUtils.hostname(url)
        return bool(host) and host == URLUtils.hostname(base_url)

    @staticmethod
    def is_same_page(url: str, base_url: str) -> bool:
        """Check if a link points back at the page's own path."""
        try:
            return urlparse(url).path == urlparse(base_url).path
        except ValueError:
            return False

    @staticmethod
    def is_media_file(url: str) -> bool:
        """Check if a URL path ends in an image or document extension."""
        try:
            path = urlparse(url).path.lower()
        except ValueError:
            return False
        return path.endswith(URLUtils.SKIP_EXTENSIONS)

    @staticmethod
    def is_category_link(url: str, base_url: str) -> bool:
        """
        Link test shared by every navigation pass.

        The target must live on the same host, must not be the current page
        and must not be an image or PDF.
        """
        return (
            URLUtils.is_same_host(url, base_url)
            and not URLUtils.is_same_page(url, base_url)
            and not URLUtils.is_media_file(url)
        )

    @staticmethod
    def strip_query(url: str) -> str:
        return url.split('?')[0]

    @staticmethod
    def unwrap_proxy_url(url: str, marker: str) -> str:
        """
        Recover the original target of a URL rewritten by the preview proxy.

        Args:
            url: URL as seen inside the proxied page
            marker: Path and query prefix identifying the proxy

        Returns:
            The decoded target URL, or ``url`` unchanged if it is not proxied
            or cannot be decoded
        """
        if not url or marker not in url:
            return url
        encoded = url.split(marker, 1)[1]
        if not encoded:
            return url
        try:
            target = unquote(encoded, errors='strict')
        except UnicodeDecodeError:
            logger.warning("Failed to unwrap proxy URL %s", url)
            return url
        if not target.startswith(('http://', 'https://')):
            logger.warning("Proxy URL does not wrap an absolute target: %s", url)
            return url
        logger.debug("Unwrapped proxy URL: %s", target)
        return target

    @staticmethod
    def store_name(url: Optional[str]) -> str:
        """Human-friendly shop name derived from the hostname."""
        host = URLUtils.hostname(url or '')
        if not host:
            return 'Store'
        if host.startswith('www.'):
            host = host[4:]
        name = host.split('.')[0]
        return name[:1].upper() + name[1:]
