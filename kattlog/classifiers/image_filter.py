"""Image URL validity filter.

Precision over recall: missing a real product photo is preferred to taking a
badge or logo for one.
"""

from typing import Optional

IMAGE_DENYLIST = (
    'logo', 'icon', 'avatar', 'hover', 'spinner', 'placeholder',
    'banner', 'slideshow', 'badge', 'fsc', 'rating', 'swatch', 'texture',
)

MIN_IMAGE_URL_LENGTH = 15


def is_valid_image_url(url: Optional[str], alt: Optional[str] = None) -> bool:
    """Return True if ``url`` can be trusted as a product photo."""
    if not url:
        return False
    if url.startswith('data:') or len(url) < MIN_IMAGE_URL_LENGTH:
        return False

    haystack = f"{url} {alt or ''}".lower()
    return not any(token in haystack for token in IMAGE_DENYLIST)
