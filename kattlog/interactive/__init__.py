"""Interactive pointer classifier.

Components:
    - dom: rendered page model (parsed DOM plus element geometry)
    - scorer: per-element product scoring and ancestor walk
    - capture: best image and canonical link of a selection
    - processor: product records from captures
    - messages: typed frame messages
    - selector: pointer state machine
    - snapshot: Playwright rendering
"""

from .capture import CaptureResolver
from .dom import Layout, PageView, Rect
from .messages import (
    CaptureMessage,
    FrameChannel,
    ReadyMessage,
    SelectorMode,
    SetModeMessage,
    parse_message,
)
from .processor import CaptureProcessor
from .scorer import ProductScorer
from .selector import SelectorState, VisualSelector
from .snapshot import BrowserConfig, PageSnapshotter

__all__ = [
    'CaptureResolver',
    'Layout',
    'PageView',
    'Rect',
    'CaptureMessage',
    'FrameChannel',
    'ReadyMessage',
    'SelectorMode',
    'SetModeMessage',
    'parse_message',
    'CaptureProcessor',
    'ProductScorer',
    'SelectorState',
    'VisualSelector',
    'BrowserConfig',
    'PageSnapshotter',
]
