"""Configuration and extraction policy for the classification engine."""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


class MatchPolicy(str, Enum):
    """Which regex match to keep when a text holds several prices."""
    FIRST = "first"
    LAST = "last"


# Listings render the struck-through original before the discounted price.
PRICE_MATCH_POLICY = MatchPolicy.LAST

# Cards with several images are carousels; only this one is the primary photo.
PRIMARY_IMAGE_INDEX = 0

MAX_CANDIDATES = 200
MAX_NAV_CATEGORIES = 100
MAX_CONTENT_CATEGORIES = 50

# Detail pages fetched at once when filling in missing dimensions
ENRICH_CONCURRENCY = 3

# Interactive classifier
SCORE_THRESHOLD = 50
ANCESTOR_DEPTH = 6
HEARTBEAT_INTERVAL = 5.0
PROXY_MARKER = "/api/proxy?url="


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class EngineConfig:
    """Configuration for the catalog engine and its collaborators."""

    # AI naming (optional collaborator)
    use_ai_naming: bool = False
    gemini_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.0-flash"

    # Acquisition
    use_browser: bool = False
    request_timeout: int = 15
    min_html_length: int = 3000
    user_agent: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
    )

    # Extraction
    max_candidates: int = MAX_CANDIDATES
    price_match_policy: MatchPolicy = PRICE_MATCH_POLICY

    # Interactive
    proxy_marker: str = PROXY_MARKER
    heartbeat_interval: float = HEARTBEAT_INTERVAL
    viewport: Dict = field(default_factory=lambda: {'width': 1280, 'height': 720})

    def __post_init__(self):
        """Fill unset values from environment variables."""
        if not self.gemini_api_key:
            self.gemini_api_key = (
                os.getenv("GEMINI_API_KEY") or
                os.getenv("GOOGLE_API_KEY")
            )

        self.gemini_model = os.getenv("KATTLOG_GEMINI_MODEL", self.gemini_model)
        self.use_browser = self.use_browser or _env_flag("KATTLOG_USE_BROWSER")

        timeout = os.getenv("KATTLOG_REQUEST_TIMEOUT")
        if timeout and timeout.isdigit():
            self.request_timeout = int(timeout)

    def validate(self) -> bool:
        """Validate configuration."""
        if self.use_ai_naming and not self.gemini_api_key:
            logger.warning("AI category naming enabled but no API key found")
            return False
        return True
