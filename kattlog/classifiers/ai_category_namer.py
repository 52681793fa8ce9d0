"""Gemini-powered category naming from navigation HTML."""

import json
import logging
import re
from typing import List, Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from ..core.models import Category
from ..utils.url_utils import URLUtils
from .category_filter import clean_category_name

logger = logging.getLogger(__name__)

# response.text raises ValueError when the candidate was blocked or empty
GEMINI_ERRORS = (google_exceptions.GoogleAPIError, ValueError)


class GeminiCategoryNamer:
    """
    Turn the selected navigation containers into a clean category list.

    Optional collaborator: every failure returns an empty list so callers
    fall back to the rule-based passes.
    """

    def __init__(self, api_key: Optional[str] = None, model_name: str = "gemini-2.0-flash", model=None):
        """
        Initialize the namer.

        Args:
            api_key: Gemini API key
            model_name: Gemini model to use
            model: Prebuilt model object exposing ``generate_content``
        """
        if model is None:
            genai.configure(api_key=api_key)
            model = genai.GenerativeModel(model_name)
        self.model = model
        logger.info("Gemini category namer enabled (%s)", model_name)

    def infer_categories(self, nav_html: str, base_url: str) -> List[Category]:
        """
        Ask Gemini for the primary product categories in ``nav_html``.

        Args:
            nav_html: Containers joined by ``<hr>``
            base_url: Page URL, used to absolutise returned links

        Returns:
            Categories in the order Gemini listed them, or [] on failure
        """
        if not nav_html:
            return []

        data = self._generate_json(self._build_categories_prompt(nav_html, base_url))
        if not isinstance(data, list):
            return []

        categories = []
        for item in data:
            if not isinstance(item, dict):
                continue
            name = clean_category_name(str(item.get('name') or ''))
            if not name:
                continue
            url = item.get('url')
            categories.append(Category(
                name=name,
                url=URLUtils.resolve(url, base_url) if url else None,
                type='text',
            ))

        logger.info("Gemini found %d categories for %s", len(categories), base_url)
        return categories

    def infer_category_keywords(self, category: str) -> List[str]:
        """Keywords that identify products of ``category``; [] on failure."""
        prompt = f"""Generate 8-12 keywords to identify products belonging to the category "{category}".
Include synonyms, related terms, and common attributes.
Return a JSON array of strings."""

        data = self._generate_json(prompt)
        if isinstance(data, dict):
            data = data.get('keywords') or data.get('result')
        if not isinstance(data, list):
            return []
        return [str(k).strip() for k in data if str(k).strip()]

    def _generate_json(self, prompt: str):
        try:
            response = self.model.generate_content(prompt)
            response_text = response.text.strip()
        except GEMINI_ERRORS as e:
            logger.warning("Gemini request failed: %s", e)
            return None

        # Remove markdown code blocks if present
        json_text = re.sub(r'```json\s*|\s*```', '', response_text).strip()
        try:
            return json.loads(json_text)
        except json.JSONDecodeError as e:
            logger.warning("Failed to parse Gemini JSON response: %s", e)
            logger.debug("Response preview: %s", response_text[:200])
            return None

    def _build_categories_prompt(self, nav_html: str, base_url: str) -> str:
        return f"""You are an expert web scraper and product catalog specialist.
I will provide you with several HTML snippets from the home page of {base_url} (separated by <hr>).
These snippets contain navigation menus, category carousels, and "Shop by Category" grids.

Your goal is to synthesize a single, clean, and comprehensive list of the PRIMARY PRODUCT CATEGORIES.

Rules:
- ONLY extract product categories (e.g., "Sofás", "Mesas", "Iluminación", "Decoración").
- Extract ALL product categories you find.
- If the same category appears in multiple snippets, include it only once.
- Remove promotional prefixes like "Rebajas", "Sale", "Outlet" from the names.
- Use the exact URLs found in the HTML.

REJECT:
- Countries and languages: France, Italy, UK, Deutschland, España, English, Español
- Utility links: Login, Cart, Account, Help, Contact, FAQ, Search
- Legal: Terms, Privacy, Cookies, Returns
- Generic: Home, Back, Menu, Close, View All
- Promotions with years or seasons: "Black Friday 2024", "AW25-26", "SS24"
- Marketing slogans, store info and discount codes
- Links to /login, /account, /cart, /checkout, /blog, /stores, /tiendas

Respond with ONLY a JSON array in this exact format:
[{{"name": "Category Name", "url": "Absolute URL"}}]

HTML Snippets:
{nav_html}"""
