"""Extract measurement strings such as "120x80 cm" from product text."""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional

UNIT = r'(?:cm|mm|m)\b'
NUMBER = r'\d+(?:[.,]\d+)?'
TIMES = r'[x×*]'

LABELS = (
    'medidas', 'dimensiones', 'alto', 'ancho', 'fondo', 'largo', 'profundo',
    'altura', 'anchura', 'width', 'height', 'depth', 'dim',
)

# Characters after a labelled measurement that end the returned window
WINDOW_BOUNDARY = re.compile(r'[,.;\n]')


@dataclass
class DimensionPattern:
    """One tier of the dimension fallback chain."""
    name: str
    pattern: re.Pattern
    source: str  # "text" searches title + text, "title" the title only
    render: Callable[[re.Match, str], str]


def _whole_match(match: re.Match, haystack: str) -> str:
    return match.group(0).strip()


def _inner_group(match: re.Match, haystack: str) -> str:
    return match.group(1).strip()


def _label_window(match: re.Match, haystack: str, width: int = 30) -> str:
    """Fixed window from the label, cut at the next clause boundary."""
    start = match.start()
    window = haystack[start:start + width]
    measured = match.end() - start
    boundary = WINDOW_BOUNDARY.search(window, measured)
    if boundary:
        window = window[:boundary.start()]
    return window.strip()


class DimensionExtractor:
    """Ordered chain of dimension patterns; the first tier that matches wins."""

    def __init__(self):
        self.patterns: List[DimensionPattern] = [
            DimensionPattern(
                name='generic',
                pattern=re.compile(
                    rf'{NUMBER}\s*(?:{UNIT})?\s*{TIMES}\s*{NUMBER}\s*(?:{UNIT})?'
                    rf'(?:\s*{TIMES}\s*{NUMBER})?\s*{UNIT}',
                    re.IGNORECASE
                ),
                source='text',
                render=_whole_match,
            ),
            DimensionPattern(
                name='labeled',
                pattern=re.compile(
                    rf'\b(?:{"|".join(LABELS)})[:\s]+{NUMBER}\s*{UNIT}',
                    re.IGNORECASE
                ),
                source='text',
                render=_label_window,
            ),
            DimensionPattern(
                name='parenthesized',
                pattern=re.compile(rf'\(\s*({NUMBER}\s*{UNIT})\s*\)', re.IGNORECASE),
                source='title',
                render=_inner_group,
            ),
            DimensionPattern(
                name='bare',
                pattern=re.compile(
                    rf'\b{NUMBER}\s*[x×]\s*{NUMBER}(?:\s*[x×]\s*{NUMBER})?\b',
                    re.IGNORECASE
                ),
                source='text',
                render=_whole_match,
            ),
        ]
        self.labeled_pattern = re.compile(
            rf'\b(?:{"|".join(LABELS)})\s*:?\s*{NUMBER}\s*{UNIT}',
            re.IGNORECASE
        )

    def extract(self, text: str, title: Optional[str] = None) -> Optional[str]:
        """
        Extract a dimension string.

        Args:
            text: Card or page text
            title: Product title, the only place parenthesized sizes count

        Returns:
            Dimension string from the first matching tier, or None
        """
        full_text = ' '.join(part for part in (title, text) if part)

        for tier in self.patterns:
            haystack = title if tier.source == 'title' else full_text
            if not haystack:
                continue
            match = tier.pattern.search(haystack)
            if match:
                return tier.render(match, haystack)

        return None

    def extract_tier(self, name: str, text: str) -> Optional[str]:
        """Run a single named tier of the chain."""
        for tier in self.patterns:
            if tier.name == name:
                match = tier.pattern.search(text or '')
                return tier.render(match, text) if match else None
        raise KeyError(name)

    def extract_labeled(self, text: str, limit: int = 4) -> Optional[str]:
        """
        Join labelled measurements ("Alto: 70 cm | Ancho: 50 cm").

        Only used when at least two labels are present, as on detail pages.
        """
        matches = [m.group(0).strip() for m in self.labeled_pattern.finditer(text or '')]
        if len(matches) < 2:
            return None
        return ' | '.join(matches[:limit])
