"""Rendered-page model for the interactive classifier.

The browser hands over its DOM with each element's bounding box stamped in a
``data-kattlog-rect="left,top,width,height"`` attribute (viewport
coordinates, as ``getBoundingClientRect`` reports them). ``Layout`` reads
those boxes back so scoring can use geometry without a live browser.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from bs4 import BeautifulSoup, Tag

RECT_ATTRIBUTE = 'data-kattlog-rect'


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height

    def offset(self, dx: float, dy: float) -> 'Rect':
        return Rect(self.left + dx, self.top + dy, self.width, self.height)

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional['Rect']:
        """Parse ``"left,top,width,height"``; None when malformed."""
        if not value:
            return None
        parts = value.split(',')
        if len(parts) != 4:
            return None
        try:
            return cls(*(float(p) for p in parts))
        except ValueError:
            return None


def _dimension(tag: Tag, name: str) -> float:
    value = str(tag.get(name) or '').strip().lower().rstrip('px')
    try:
        return float(value)
    except ValueError:
        return 0.0


class Layout:
    """Element geometry keyed by element identity."""

    def __init__(self, rects: Optional[Dict[int, Rect]] = None):
        self._rects: Dict[int, Rect] = dict(rects or {})

    @classmethod
    def from_attributes(cls, soup: BeautifulSoup) -> 'Layout':
        layout = cls()
        for tag in soup.find_all(attrs={RECT_ATTRIBUTE: True}):
            rect = Rect.parse(tag.get(RECT_ATTRIBUTE))
            if rect is not None:
                layout.set_rect(tag, rect)
        return layout

    def set_rect(self, tag: Tag, rect: Rect):
        self._rects[id(tag)] = rect

    def rect_of(self, tag: Tag) -> Optional[Rect]:
        return self._rects.get(id(tag))

    def size_of(self, tag: Tag) -> Tuple[float, float]:
        """Rendered size, else the ``width``/``height`` attributes, else 0x0."""
        rect = self.rect_of(tag)
        if rect is not None:
            return rect.width, rect.height
        return _dimension(tag, 'width'), _dimension(tag, 'height')


@dataclass
class PageView:
    """A parsed page plus the geometry the browser rendered it with."""
    soup: BeautifulSoup
    layout: Layout
    url: str
    viewport: Dict = field(default_factory=lambda: {'width': 1280, 'height': 720})
    scroll: Tuple[float, float] = (0.0, 0.0)

    @classmethod
    def from_html(
        cls,
        html: str,
        url: str,
        viewport: Optional[Dict] = None,
        scroll: Tuple[float, float] = (0.0, 0.0)
    ) -> 'PageView':
        soup = BeautifulSoup(html, 'html.parser')
        view = cls(soup=soup, layout=Layout.from_attributes(soup), url=url, scroll=scroll)
        if viewport:
            view.viewport = dict(viewport)
        return view

    @property
    def viewport_width(self) -> float:
        return float(self.viewport.get('width', 0))

    def page_rect(self, tag: Tag) -> Optional[Rect]:
        """Bounding box in document coordinates."""
        rect = self.layout.rect_of(tag)
        if rect is None:
            return None
        return rect.offset(self.scroll[0], self.scroll[1])

    def select_one(self, selector: str) -> Optional[Tag]:
        return self.soup.select_one(selector)
