"""Typed messages exchanged with the hosting frame.

Inbound ``SET_MODE``; outbound ``READY`` heartbeats and ``KATTLOG_CAPTURE``
records. Delivery is fire-and-forget: nothing is acknowledged or retried.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from ..core.models import InteractiveCapture

logger = logging.getLogger(__name__)


class SelectorMode(str, Enum):
    NAVIGATE = "navigate"
    CAPTURE = "capture"


@dataclass(frozen=True)
class SetModeMessage:
    mode: SelectorMode
    type = "SET_MODE"

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.type, 'mode': self.mode.value}


@dataclass(frozen=True)
class ReadyMessage:
    url: str
    type = "READY"

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.type, 'url': self.url}


@dataclass(frozen=True)
class CaptureMessage:
    capture: InteractiveCapture
    type = "KATTLOG_CAPTURE"

    def to_dict(self) -> Dict[str, Any]:
        return {'type': self.type, **self.capture.to_dict()}


Message = Union[SetModeMessage, ReadyMessage, CaptureMessage]


def parse_message(data: Any) -> Optional[Message]:
    """
    Decode a raw frame message.

    Returns:
        The matching message variant, or None for unknown or malformed data
    """
    if not isinstance(data, dict):
        return None

    kind = data.get('type')
    if kind == SetModeMessage.type:
        try:
            return SetModeMessage(mode=SelectorMode(data.get('mode')))
        except ValueError:
            logger.debug("Ignoring SET_MODE with unknown mode %r", data.get('mode'))
            return None

    if kind == ReadyMessage.type:
        url = data.get('url')
        return ReadyMessage(url=url) if isinstance(url, str) else None

    if kind == CaptureMessage.type:
        try:
            capture = InteractiveCapture(
                html=data['html'],
                url=data['url'],
                product_url=data['productUrl'],
                tag_name=data['tagName'],
                preview_image=data.get('previewImage'),
                text_snippet=data.get('textSnippet', ''),
                timestamp=int(data['timestamp']),
            )
        except (KeyError, TypeError, ValueError):
            logger.debug("Ignoring malformed capture message")
            return None
        return CaptureMessage(capture=capture)

    return None


class FrameChannel:
    """One-way channel to the hosting frame."""

    def __init__(self, listener: Optional[Callable[[Dict[str, Any]], None]] = None):
        self.listener = listener
        self._outbox: List[Dict[str, Any]] = []

    def post(self, message: Message):
        payload = message.to_dict()
        self._outbox.append(payload)
        if self.listener is not None:
            self.listener(payload)

    def drain(self) -> List[Dict[str, Any]]:
        """Posted payloads since the last drain, oldest first."""
        messages, self._outbox = self._outbox, []
        return messages
