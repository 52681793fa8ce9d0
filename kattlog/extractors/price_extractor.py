"""Locale-agnostic price extraction from card and page text."""

import re
from typing import List, Optional

from ..core.config import MatchPolicy, PRICE_MATCH_POLICY


class PriceExtractor:
    """Find currency-shaped substrings in mixed-locale text.

    Returns raw price substrings such as ``"1.234,56 €"`` or ``"$299.99"``;
    ``parse_price`` turns them into numbers for collaborators that need one.
    """

    CURRENCY_SYMBOLS = '€$£'

    # Amount with ".", "," or space group separators and 0-2 decimals.
    # Groups after the first are exactly three digits so the pattern never
    # backtracks exponentially on long digit runs.
    AMOUNT_PATTERN = r'\d{1,3}(?:[.,\s]?\d{3})*(?:[.,]\d{1,2})?'

    # Longer than this, a dedicated price element holds more than a price
    MAX_PRICE_TEXT_LENGTH = 30

    def __init__(self, match_policy: MatchPolicy = PRICE_MATCH_POLICY):
        self.match_policy = match_policy
        symbols = re.escape(self.CURRENCY_SYMBOLS)
        self.currency_pattern = re.compile(
            rf'(?:{self.AMOUNT_PATTERN})\s*[{symbols}]|[{symbols}]\s*(?:{self.AMOUNT_PATTERN})'
        )
        self.amount_pattern = re.compile(rf'(?<![\d.,]){self.AMOUNT_PATTERN}')

    # ------------------------------------------------------------------
    # Main extraction methods
    # ------------------------------------------------------------------

    def extract_price(self, text: str) -> Optional[str]:
        """
        Extract a raw price substring from arbitrary text.

        Args:
            text: Text that may contain zero, one or many prices

        Returns:
            The selected currency-shaped match, else the selected bare amount,
            else None
        """
        if not text:
            return None

        price = self._select(self.currency_pattern.findall(text))
        if price:
            return price
        return self._select(self.amount_pattern.findall(text))

    def extract_card_price(self, price_text: Optional[str], card_text: str) -> Optional[str]:
        """
        Resolve the price of a product card.

        Args:
            price_text: Text of the card's dedicated price element, if any
            card_text: Full text of the card

        Returns:
            Raw price substring or None when nothing price-shaped is found
        """
        price_text = (price_text or '').strip()

        # "was/now" markup puts each price on its own line
        if '\n' in price_text:
            lines = [line.strip() for line in price_text.split('\n')]
            numeric_lines = [line for line in lines if re.search(r'\d', line)]
            if numeric_lines:
                price_text = numeric_lines[-1]

        price = self._select(self.currency_pattern.findall(price_text))
        if price:
            return price

        if self._is_unusable(price_text):
            return self._select(self.currency_pattern.findall(card_text or ''))

        return self._select(self.amount_pattern.findall(price_text))

    def extract_all_prices(self, text: str) -> List[str]:
        """Every currency-shaped substring, in document order."""
        return [m.strip() for m in self.currency_pattern.findall(text or '')]

    def has_price(self, text: str) -> bool:
        return bool(text) and self.currency_pattern.search(text) is not None

    # ------------------------------------------------------------------
    # Helper methods
    # ------------------------------------------------------------------

    def _select(self, matches: List[str]) -> Optional[str]:
        matches = [m.strip() for m in matches if m.strip()]
        if not matches:
            return None
        if self.match_policy == MatchPolicy.FIRST:
            return matches[0]
        return matches[-1]

    def _is_unusable(self, price_text: str) -> bool:
        return (
            not price_text
            or len(price_text) > self.MAX_PRICE_TEXT_LENGTH
            or not re.search(r'\d', price_text)
        )


def parse_price(price_str: Optional[str]) -> float:
    """
    Normalize a raw price substring into a float.

    Handles "1.200,50", "1,200.50", "1200,50" and "1 229,80 €".
    Returns 0.0 when nothing numeric remains.
    """
    if not price_str:
        return 0.0

    clean = re.sub(r'[^\d.,]', '', price_str)
    normalized = clean

    if ',' in clean and '.' in clean:
        if clean.index(',') > clean.index('.'):
            normalized = clean.replace('.', '').replace(',', '.')
        else:
            normalized = clean.replace(',', '')
    elif ',' in clean:
        # Comma near the end is a decimal separator
        if len(clean) - clean.rindex(',') <= 3:
            normalized = clean.replace(',', '.')
        else:
            normalized = clean.replace(',', '')
    elif clean.count('.') > 1:
        normalized = clean.replace('.', '')

    try:
        return float(normalized)
    except ValueError:
        return 0.0
