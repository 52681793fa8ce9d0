"""Pointer state machine for visual product selection.

All state lives in ``SelectorState``; each handler reads and updates it and
posts messages to the hosting frame through a ``FrameChannel``.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from bs4 import Tag

from ..core.config import HEARTBEAT_INTERVAL
from ..core.models import InteractiveCapture, ScoredElement
from .capture import CaptureResolver
from .dom import PageView, Rect
from .messages import (
    CaptureMessage,
    FrameChannel,
    Message,
    ReadyMessage,
    SelectorMode,
    SetModeMessage,
    parse_message,
)
from .scorer import ProductScorer

logger = logging.getLogger(__name__)

OVERLAY_ID = 'kattlog-selector-overlay'


@dataclass
class Overlay:
    """Highlight box drawn over the current candidate."""
    visible: bool = False
    rect: Optional[Rect] = None
    target: Optional[Tag] = None

    def show(self, rect: Optional[Rect], target: Tag):
        self.visible = True
        self.rect = rect
        self.target = target

    def hide(self):
        self.visible = False
        self.rect = None
        self.target = None


@dataclass
class Flash:
    """Acknowledgement drawn over a captured container."""
    rect: Optional[Rect]
    timestamp: float


@dataclass
class SelectorState:
    mode: SelectorMode = SelectorMode.NAVIGATE
    overlay: Optional[Overlay] = None
    cursor: str = 'default'
    last_heartbeat: Optional[float] = None
    flashes: List[Flash] = field(default_factory=list)


class VisualSelector:
    """Drive hover highlighting and click capture over a rendered page."""

    def __init__(
        self,
        view: PageView,
        channel: Optional[FrameChannel] = None,
        scorer: Optional[ProductScorer] = None,
        resolver: Optional[CaptureResolver] = None,
        heartbeat_interval: float = HEARTBEAT_INTERVAL,
        clock: Callable[[], float] = time.monotonic
    ):
        self.view = view
        self.channel = channel or FrameChannel()
        self.scorer = scorer or ProductScorer(view)
        self.resolver = resolver or CaptureResolver(view)
        self.heartbeat_interval = heartbeat_interval
        self.clock = clock
        self.state = SelectorState()

    # ------------------------------------------------------------------
    # Frame sync
    # ------------------------------------------------------------------

    def start(self, now: Optional[float] = None):
        """Announce readiness; the host answers with the current mode."""
        self._sync(now)

    def tick(self, now: Optional[float] = None) -> bool:
        """Re-announce when a heartbeat is due. Returns True if one was sent."""
        now = self.clock() if now is None else now
        last = self.state.last_heartbeat
        if last is not None and now - last < self.heartbeat_interval:
            return False
        self._sync(now)
        return True

    def on_mousedown(self, now: Optional[float] = None):
        self._sync(now)

    def _sync(self, now: Optional[float]):
        self.channel.post(ReadyMessage(url=self.view.url))
        self.state.last_heartbeat = self.clock() if now is None else now

    def handle_message(self, data: Dict[str, Any]) -> Optional[Message]:
        """Apply an inbound frame message; unknown messages are ignored."""
        message = parse_message(data)
        if isinstance(message, SetModeMessage):
            self.apply_mode(message.mode)
        return message

    def apply_mode(self, mode: SelectorMode):
        self.state.mode = mode
        logger.debug("Mode applied: %s", mode.value)

        if mode == SelectorMode.NAVIGATE:
            if self.state.overlay is not None:
                self.state.overlay.hide()
            self.state.cursor = 'default'
        else:
            self.state.cursor = 'crosshair'
            if self.state.overlay is None:
                self.state.overlay = Overlay()

    # ------------------------------------------------------------------
    # Pointer events
    # ------------------------------------------------------------------

    def on_mouseover(self, target: Tag) -> Optional[ScoredElement]:
        """Highlight the best container around ``target`` in capture mode."""
        if self.state.mode != SelectorMode.CAPTURE:
            return None
        if target is None or target.get('id') == OVERLAY_ID:
            return None

        best = self.scorer.find_best(target)
        if best is None:
            if self.state.overlay is not None:
                self.state.overlay.hide()
            return None

        if self.state.overlay is None:
            self.state.overlay = Overlay()
        self.state.overlay.show(self.view.page_rect(best.element), best.element)
        return best

    def on_click(self, target: Tag, now: Optional[float] = None) -> Optional[InteractiveCapture]:
        """
        Capture the highlighted container, or the best one around ``target``.

        Returns:
            The posted capture, or None outside capture mode or when nothing
            scores high enough
        """
        if self.state.mode != SelectorMode.CAPTURE:
            return None

        overlay = self.state.overlay
        container = overlay.target if overlay is not None else None
        if container is None:
            best = self.scorer.find_best(target) if target is not None else None
            if best is None:
                return None
            container = best.element

        capture = self.resolver.resolve(container)
        self.channel.post(CaptureMessage(capture=capture))
        self.state.flashes.append(Flash(
            rect=self.view.layout.rect_of(container),
            timestamp=self.clock() if now is None else now,
        ))
        return capture
